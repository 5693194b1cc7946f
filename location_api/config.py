import os

# === Fixed storage / listener settings ===
DATABASE_FILE = "locations.db"
SQLALCHEMY_DATABASE_URL = f"sqlite:///./{DATABASE_FILE}"
TABLE_NAME = "locations"

HOST = "0.0.0.0"
PORT = 8000

# === Tunables (env) ===
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# Every response carries these; preflight answers with nothing else.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
