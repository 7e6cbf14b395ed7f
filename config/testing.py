import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", "12345"),
    "database": os.getenv("DB_NAME", "ponto_test"),
}

CIVIL_TIMEZONE = "America/Sao_Paulo"

PROTOCOL_BASE_URL = "http://testserver/ponto/protocolo"

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
LOG_JSON = False
