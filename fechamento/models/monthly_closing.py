# fechamento/models/monthly_closing.py
from decimal import Decimal

from ..extensions import db


def _num(v):
    if isinstance(v, Decimal):
        return float(v)
    return v


class MonthlyClosing(db.Model):
    __tablename__ = "fechamento_mensal"
    __table_args__ = (db.UniqueConstraint("ano", "mes", name="unique_fechamento_ano_mes"),)

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    year = db.Column("ano", db.Integer, nullable=False)
    month = db.Column("mes", db.Integer, nullable=False)
    days_worked = db.Column("dias_trabalhados", db.Integer, nullable=False, default=0, server_default="0")
    max_goal = db.Column("meta_maxima", db.Numeric(10, 2), nullable=False, default=0, server_default="0.00")
    min_goal = db.Column("meta_minima", db.Numeric(10, 2), nullable=False, default=0, server_default="0.00")

    # [{"day": 1, "value": 0}, ...]; positions with no entry are stored as null
    daily_values = db.Column("valores_diarios", db.JSON, nullable=False)
    sum_values = db.Column("soma_valores", db.Numeric(10, 2), nullable=False, default=0, server_default="0.00")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ano": self.year,
            "mes": self.month,
            "dias_trabalhados": self.days_worked,
            "meta_maxima": _num(self.max_goal),
            "meta_minima": _num(self.min_goal),
            "valores_diarios": self.daily_values,
            "soma_valores": _num(self.sum_values),
        }

    def __repr__(self):
        return f"<MonthlyClosing id={self.id} ano={self.year} mes={self.month} soma={self.sum_values}>"
