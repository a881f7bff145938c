"""
Pytest configuration for token_server. Env is set before token_server.config is imported.
"""
import os

os.environ["DOCSIE_MASTER_KEY"] = "test-master-key-for-docsie-hs256-signing"
os.environ["JWT_EXPIRY_MINUTES"] = "60"
# Config endpoint tests set these explicitly via monkeypatch
for _name in ("DOCSIE_DEPLOYMENT_KEY", "DOCSIE_REDIRECT_URL"):
    if _name in os.environ:
        del os.environ[_name]
