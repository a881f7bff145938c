"""
Transport to the token server: fetch a Docsie token and the widget config.
Failures never raise; they log a warning and return None so the widget can
still load (unauthenticated) or the page can show an error state.
"""
import logging
from dataclasses import dataclass

import httpx

from docsie_client import config

logger = logging.getLogger(__name__)


@dataclass
class DocsieConfig:
    deployment_id: str
    redirect_url: str


def _post_for_token(path: str) -> str | None:
    try:
        r = httpx.post(
            f"{config.API_BASE_URL}{path}",
            headers={"Accept": "application/json"},
            timeout=config.HTTP_TIMEOUT,
        )
    except httpx.HTTPError as e:
        logger.warning("Error getting JWT token from %s: %s", path, e)
        return None
    if r.status_code != 200:
        logger.warning("Token request to %s failed: %s", path, r.status_code)
        return None
    try:
        token = r.json().get("token")
    except ValueError as e:
        logger.warning("Token response from %s was not JSON: %s", path, e)
        return None
    return token or None


def get_token() -> str | None:
    """POST /auth/token (demo subject). Token or None."""
    return _post_for_token("/auth/token")


def get_docsie_config() -> DocsieConfig | None:
    """GET /config/docsie. DocsieConfig or None."""
    try:
        r = httpx.get(
            f"{config.API_BASE_URL}/config/docsie",
            headers={"Accept": "application/json"},
            timeout=config.HTTP_TIMEOUT,
        )
    except httpx.HTTPError as e:
        logger.warning("Error getting Docsie config: %s", e)
        return None
    if r.status_code != 200:
        logger.warning("Failed to get Docsie config: %s", r.status_code)
        return None
    try:
        data = r.json()
    except ValueError as e:
        logger.warning("Docsie config response was not JSON: %s", e)
        return None
    deployment_id = data.get("deploymentId")
    if not deployment_id:
        logger.warning("Docsie config response has no deploymentId")
        return None
    return DocsieConfig(
        deployment_id=deployment_id,
        redirect_url=data.get("redirectUrl") or config.DEFAULT_FALLBACK_URL,
    )
