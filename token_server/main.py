"""
Docsie token server.
POST /auth/login, POST /auth/token, GET /auth/login, GET /config/docsie.
Port 5145 (the default fallback URL points here).
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from token_server.auth import login_required_response, router as auth_router
from token_server.config import CORS_ALLOW_ORIGINS, PORT
from token_server.docsie_config import router as docsie_config_router
from token_server.tokens import ConfigurationError, check_configuration

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Refuse to start without a usable master key / expiry."""
    check_configuration()
    yield


app = FastAPI(title="Docsie Token Server", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth_router, tags=["auth"])
app.include_router(docsie_config_router, tags=["config"])


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Refusing to issue token for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"message": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Login answers any unusable body (null fields, wrong types, bad JSON) with 400 {message}
    if request.method == "POST" and request.url.path == "/auth/login":
        return login_required_response()
    return await request_validation_exception_handler(request, exc)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "token_server"}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "token_server.main:app",
        host="127.0.0.1",
        port=PORT,
        reload=True,
    )
