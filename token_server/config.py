"""
Token server configuration. Values come from the environment (optionally a .env file).
No secrets in this file; the master key is shared out-of-band with Docsie.
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Shared secret used to sign tokens; Docsie validates with the same key. Required.
MASTER_KEY = os.environ.get("DOCSIE_MASTER_KEY") or None

# Token lifetime in minutes (raw string; parsed and validated by tokens.get_expiry_minutes)
JWT_EXPIRY_MINUTES = os.environ.get("JWT_EXPIRY_MINUTES", "60")

# Docsie deployment ("pk") key returned to clients by GET /config/docsie
DEPLOYMENT_KEY = os.environ.get("DOCSIE_DEPLOYMENT_KEY") or None

# Where Docsie sends users whose token fails validation (our login page)
REDIRECT_URL = os.environ.get("DOCSIE_REDIRECT_URL") or None
DEFAULT_REDIRECT_URL = "http://localhost:5145/auth/login"

# Subject used by POST /auth/token (no credentials)
DEMO_SUBJECT = "demo-user"

# CORS: comma-separated origins; "*" allows any client (lab default)
CORS_ALLOW_ORIGINS = [o.strip() for o in os.environ.get("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]

PORT = int(os.environ.get("TOKEN_SERVER_PORT", "5145"))
