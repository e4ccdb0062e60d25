import os

HOST = os.environ.get("RECEIPT_HOST", "0.0.0.0")
PORT = int(os.environ.get("RECEIPT_PORT", "3000"))

# memo entries live this long from insertion, never refreshed on read
CACHE_TTL_SEC = float(os.environ.get("RECEIPT_CACHE_TTL_SEC", "300"))

FETCH_TIMEOUT_SEC = float(os.environ.get("RECEIPT_FETCH_TIMEOUT_SEC", "30"))

LOGO_PATH = os.environ.get("RECEIPT_LOGO_PATH", "logo.png")

LOG_LEVEL = os.environ.get("RECEIPT_LOG_LEVEL", "INFO")
