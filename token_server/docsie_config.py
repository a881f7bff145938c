"""
Docsie client configuration endpoint: GET /config/docsie.
Returns the deployment key and the fallback (login) URL the widget redirects to.
"""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from token_server import config

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/config")


@router.get("/docsie")
def docsie_config():
    """{deploymentId, redirectUrl}; 400 if no deployment key is configured."""
    deployment_key = config.DEPLOYMENT_KEY
    redirect_url = config.REDIRECT_URL

    if not deployment_key:
        logger.warning("DOCSIE_DEPLOYMENT_KEY is not configured")
        return JSONResponse(
            status_code=400,
            content={"message": "DOCSIE_DEPLOYMENT_KEY is not configured in .env"},
        )

    if not redirect_url:
        logger.warning("DOCSIE_REDIRECT_URL is not configured, using default")
        redirect_url = config.DEFAULT_REDIRECT_URL

    logger.info("Returning Docsie config: deployment_key=%s redirect_url=%s", deployment_key, redirect_url)
    return {"deploymentId": deployment_key, "redirectUrl": redirect_url}
