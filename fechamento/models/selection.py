from ..extensions import db


class Selection(db.Model):
    __tablename__ = "selecionado"
    __table_args__ = (db.UniqueConstraint("ano", "mes", name="unique_ano_mes"),)

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    year = db.Column("ano", db.Integer, nullable=False)
    month = db.Column("mes", db.Integer, nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "ano": self.year, "mes": self.month}

    def __repr__(self):
        return f"<Selection id={self.id} ano={self.year} mes={self.month}>"
