"""
Docsie client configuration.
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Token server base URL (token + Docsie config endpoints)
API_BASE_URL = os.environ.get("DOCSIE_API_BASE_URL", "http://localhost:5145").rstrip("/")

# Seconds before a token/config request is abandoned
HTTP_TIMEOUT = float(os.environ.get("DOCSIE_HTTP_TIMEOUT", "10"))

# Docsie platform resources (fixed by Docsie)
DOCSIE_STYLESHEET_URL = "https://lib.docsie.io/current/styles/docsie.css"
DOCSIE_SCRIPT_URL = "https://lib.docsie.io/current/service.js"

# Used when the config endpoint returns no redirect URL
DEFAULT_FALLBACK_URL = "http://localhost:5145/auth/login"

PORT = int(os.environ.get("DOCSIE_CLIENT_PORT", "8000"))
