"""
Application configuration read from the environment.

Values are loaded from a local .env file (if present) on import, so every
module can simply do `from config import JWT_SECRET`.
"""
import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Database
DB_SERVER = os.getenv("DB_SERVER")
DB_PORT = os.getenv("DB_PORT", "1433")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"


def build_database_url() -> str:
     """
     Resolve the SQLAlchemy URL.

     DATABASE_URL wins when set (handy for local SQLite); otherwise the MS SQL
     Server URL is assembled from the DB_* variables for pymssql.
     """
     explicit = os.getenv("DATABASE_URL")
     if explicit:
          return explicit
     safe_user = quote_plus(DB_USER or "")
     safe_pass = quote_plus(DB_PASS or "")
     return f"mssql+pymssql://{safe_user}:{safe_pass}@{DB_SERVER}:{DB_PORT}/{DB_NAME}"


DATABASE_URL = build_database_url()

# Auth
JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

# HTTP
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()]
FRONTEND_URL = os.getenv("FRONTEND_URL", "https://renta.rw")
PORT = int(os.getenv("PORT", "10000"))

# Outbound email (Brevo)
BREVO_API_KEY = os.getenv("BREVO_API_KEY")
MAIL_SENDER = os.getenv("MAIL_SENDER", "noreply@renta.rw")

# Document storage (Azure Blob)
AZURE_STORAGE_ACCOUNT = os.getenv("AZURE_STORAGE_ACCOUNT")
AZURE_STORAGE_KEY = os.getenv("AZURE_STORAGE_KEY")
DOCUMENTS_CONTAINER = os.getenv("DOCUMENTS_CONTAINER", "documents")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Settings the API refuses to start without
REQUIRED_SETTINGS = ("JWT_SECRET",)


def check_required_settings() -> None:
     missing = [name for name in REQUIRED_SETTINGS if not globals()[name]]
     if missing:
          raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")
