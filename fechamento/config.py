import os
from dotenv import load_dotenv
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret_change_me")
    SQLALCHEMY_DATABASE_URI = os.getenv("MYSQL_URI", "sqlite:///fechamento.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_ISS = os.getenv("JWT_ISS", "fechamento")
    ACCESS_TTL_SEC = int(os.getenv("ACCESS_TTL_SEC", "300"))
    AUTH_HEADER = os.getenv("AUTH_HEADER", "x-access-token")
    RESET_CODE_TTL_MIN = int(os.getenv("RESET_CODE_TTL_MIN", "60"))
    # Fixed offset used to decide "today" (America/Sao_Paulo without DST)
    UTC_OFFSET_HOURS = int(os.getenv("UTC_OFFSET_HOURS", "-3"))
    BOOTSTRAP_ON_START = _flag("BOOTSTRAP_ON_START", "1")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "3003"))

    MAIL_SERVER = os.getenv("MAIL_SERVER", "localhost")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "25"))
    MAIL_USE_TLS = _flag("MAIL_USE_TLS", "0")
    MAIL_USE_SSL = _flag("MAIL_USE_SSL", "0")
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", "no-reply@fechamento.local")
