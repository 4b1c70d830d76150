import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "presence_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Applies schema.sql on startup (CREATE TABLE IF NOT EXISTS, so repeatable)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Without a key the vision endpoints answer with the stand-in analysis
VISION_API_KEY = os.getenv("VISION_API_KEY")
VISION_API_URL = os.getenv("VISION_API_URL", "https://vision.googleapis.com/v1/images:annotate")
VISION_TIMEOUT_SECONDS = float(os.getenv("VISION_TIMEOUT_SECONDS", "10"))

LEDGER_EXPECTED_WALLET = os.getenv("LEDGER_EXPECTED_WALLET")
