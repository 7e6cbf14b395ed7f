import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ponto_db"),
}

CIVIL_TIMEZONE = os.getenv("CIVIL_TIMEZONE", "America/Sao_Paulo")

PROTOCOL_BASE_URL = os.getenv("PROTOCOL_BASE_URL", "https://erp.example.com/ponto/protocolo")

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "1")))
