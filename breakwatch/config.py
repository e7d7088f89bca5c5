"""Environment configuration for breakwatch."""

import os
from dotenv import load_dotenv

from breakwatch.models.constants import DEFAULT_MIN_MINUTES as _DEFAULT_MIN_MINUTES

load_dotenv()

# Verkada API
VERKADA_API_KEY = os.getenv("VERKADA_API_KEY")
VERKADA_API_BASE = os.getenv("VERKADA_API_BASE", "https://api.verkada.com")
SITE_ID = os.getenv("SITE_ID")

# Short-lived API token is reused until it expires
TOKEN_TTL_SECONDS = int(os.getenv("TOKEN_TTL_SECONDS", "300"))
EVENTS_PAGE_SIZE = int(os.getenv("EVENTS_PAGE_SIZE", "100"))
REQUEST_TIMEOUT_SEC = int(os.getenv("REQUEST_TIMEOUT_SEC", "10"))

# Report
DEFAULT_MIN_MINUTES = float(os.getenv("DEFAULT_MIN_MINUTES", str(_DEFAULT_MIN_MINUTES)))

# Web app
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
