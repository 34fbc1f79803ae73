# loanapi/config.py
import os

from dotenv import load_dotenv

load_dotenv()


# ----------------------------
# Database
# ----------------------------
DB_PATH = os.getenv("DB_PATH", "loanapi.db")
DATABASE_URL = os.getenv("DATABASE_URL", "").strip()

# ----------------------------
# Tokens
# ----------------------------
SECRET_KEY = os.getenv("SECRET_KEY", "loanapi-dev-secret-change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
TOKEN_EXPIRE_HOURS = int(os.getenv("TOKEN_EXPIRE_HOURS", "24"))

# ----------------------------
# Bootstrap accountant
# ----------------------------
ADMIN_USER = os.getenv("ADMIN_USER", "accountant")
ADMIN_PASS = os.getenv("ADMIN_PASS", "accountant123")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
