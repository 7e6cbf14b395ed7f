import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ponto_db"),
}

# Civil timezone that decides which calendar day a punch belongs to.
CIVIL_TIMEZONE = os.getenv("CIVIL_TIMEZONE", "America/Sao_Paulo")

# Page that checks printed protocols (target of the QR code on documents).
PROTOCOL_BASE_URL = os.getenv("PROTOCOL_BASE_URL", "http://localhost:5000/ponto/protocolo")

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "0")))
