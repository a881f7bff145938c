"""
Docsie client web app.
GET / (links), GET /docs (inline token), GET /secure-docs (token in URL + fallback login).
Each page fetches a token and the Docsie config from the token server, mounts the
widget into a fresh document and renders it. Port 8000.
"""
import html
import json
import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool

from docsie_client import api
from docsie_client.bootstrap import FallbackRedirectBootstrap, InlineTokenBootstrap, WidgetBootstrap
from docsie_client.config import PORT
from docsie_client.dom import Window

logger = logging.getLogger(__name__)

# /docs is the widget page, so the OpenAPI UI moves
app = FastAPI(title="Docsie Client", version="0.1.0", docs_url="/api/docs", redoc_url=None)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "docsie_client"}


@app.get("/", response_class=HTMLResponse)
def home():
    """Links to both handshake variants."""
    return HTMLResponse(
        """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Docsie Client</title></head>
<body>
  <h1>Docsie documentation</h1>
  <p><a href="/docs">Documentation</a> (token passed to the widget inline)</p>
  <p><a href="/secure-docs">Secure documentation</a> (token in URL, login fallback)</p>
</body>
</html>"""
    )


def _config_error_page(title: str) -> HTMLResponse:
    return HTMLResponse(
        f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{html.escape(title)}</title></head>
<body>
  <h1>{html.escape(title)}</h1>
  <p>Docsie configuration could not be loaded from the token server.</p>
  <p><a href="/">Home</a></p>
</body>
</html>""",
        status_code=502,
    )


def _page_window(request: Request, title: str, container_id: str, token: str | None) -> Window:
    """Page shell with the widget container; the bootstrap fills in the rest."""
    window = Window(str(request.url))
    document = window.document
    document.head.append_child(document.create_element("meta", {"charset": "utf-8"}))
    document.head.append_child(document.create_element("title", text=title))
    body = document.body
    body.append_child(document.create_element("h1", text=title))
    if not token:
        body.append_child(
            document.create_element(
                "p",
                {"class": "notice"},
                text="Could not obtain an access token; showing public documentation only.",
            )
        )
    nav = body.append_child(document.create_element("p"))
    nav.append_child(document.create_element("a", {"href": "/"}, text="Home"))
    body.append_child(document.create_element("div", {"id": container_id}))
    return window


def _sync_browser_url(window: Window) -> None:
    """Replay a history.replace_state from the bootstrap in the real browser."""
    if not window.history.replaced:
        return
    url_js = json.dumps(window.location.href).replace("<", "\\u003c")
    window.document.head.append_child(
        window.document.create_element(
            "script",
            text=f"window.history.replaceState(null, '', {url_js});",
        )
    )


async def _render_widget_page(
    request: Request,
    bootstrap_cls: type[WidgetBootstrap],
    title: str,
    token: str | None,
    use_fallback: bool,
) -> HTMLResponse:
    docsie_config = await run_in_threadpool(api.get_docsie_config)
    if docsie_config is None:
        return _config_error_page(title)

    window = _page_window(request, title, bootstrap_cls.container_id, token)
    bootstrap = bootstrap_cls(window)
    # Server side only renders the markup; nothing dispatches load/error on this
    # Window, so the returned future is never observed here.
    bootstrap.initialize(
        docsie_config.deployment_id,
        token,
        docsie_config.redirect_url if use_fallback else None,
    )
    _sync_browser_url(window)
    return HTMLResponse(window.document.render())


@app.get("/docs", response_class=HTMLResponse)
async def docs(request: Request):
    """Widget with the token passed inline (authorizationToken)."""
    token = await run_in_threadpool(api.get_token)
    return await _render_widget_page(request, InlineTokenBootstrap, "Documentation", token, use_fallback=False)


@app.get("/secure-docs", response_class=HTMLResponse)
async def secure_docs(request: Request, token: str | None = None):
    """
    Widget with token-in-URL and a fallback login URL. A token already in the
    query string (e.g. after returning from the login page) is used as-is.
    """
    if not token:
        token = await run_in_threadpool(api.get_token)
    return await _render_widget_page(
        request, FallbackRedirectBootstrap, "Secure Documentation", token, use_fallback=True
    )


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(
        "docsie_client.main:app",
        host="127.0.0.1",
        port=PORT,
        reload=True,
    )
