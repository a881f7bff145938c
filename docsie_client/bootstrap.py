"""
Docsie widget bootstrap.
Injects the Docsie stylesheet and service script into a document, passes the
deployment key and authentication through the script's data-docsie attribute,
and reports the script's load outcome as an asyncio future.

Two handshakes:
- InlineTokenBootstrap: token goes in the attribute (authorizationToken).
- FallbackRedirectBootstrap: token goes in the page URL (?token=) and Docsie
  gets an authorizationFallbackURL that returns the user to this page.

One session per container id. initialize() tears down the previous session
first; a still-pending future from it is rejected with WidgetSupersededError
and late load/error events from its script are ignored.
"""
import asyncio
import itertools
import logging
from dataclasses import dataclass
from urllib.parse import quote, urlsplit, urlunsplit

from docsie_client import config
from docsie_client.dom import Element, Location, Window

logger = logging.getLogger(__name__)

# Session states
IDLE = "idle"
LOADING = "loading"
READY = "ready"
FAILED = "failed"


class WidgetError(Exception):
    pass


class WidgetLoadError(WidgetError):
    """The Docsie script reported a load failure."""


class WidgetSupersededError(WidgetError):
    """The session was cleaned up before its script finished loading."""


@dataclass
class WidgetSession:
    container_id: str
    generation: int
    stylesheet: Element
    script: Element
    future: asyncio.Future
    config: str
    state: str = LOADING


def build_fallback_url(fallback_url: str, current_url: str) -> str:
    """
    Append redirect=<current page, no query> to fallback_url.
    Only the redirect value is percent-encoded.
    """
    separator = "&" if "?" in fallback_url else "?"
    return_to = Location(current_url).href_without_query
    return f"{fallback_url}{separator}redirect={quote(return_to, safe='')}"


def build_config_string(
    deployment_id: str,
    token: str | None = None,
    fallback_url: str | None = None,
) -> str:
    """
    data-docsie value: docsie_pk_key:<id>[,authorizationToken:<t>|,authorizationFallbackURL:<url>].
    Values are inserted as-is (no escaping).
    """
    if not deployment_id:
        raise ValueError("deployment_id is required")
    if token and fallback_url:
        raise ValueError("Use either an inline token or a fallback URL, not both")
    parts = [f"docsie_pk_key:{deployment_id}"]
    if token:
        parts.append(f"authorizationToken:{token}")
    elif fallback_url:
        parts.append(f"authorizationFallbackURL:{fallback_url}")
    return ",".join(parts)


def with_query_param(url: str, name: str, value: str) -> str:
    """Set name=value, replacing any existing name; other params are kept byte-for-byte."""
    parts = urlsplit(url)
    kept = [p for p in parts.query.split("&") if p and p.split("=", 1)[0] != name]
    kept.append(f"{name}={quote(value, safe='')}")
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "&".join(kept), parts.fragment))


class WidgetBootstrap:
    """Base lifecycle (inline-token handshake). Sessions are keyed by container id."""

    container_id = "docsie-container"
    label = "Docsie"

    def __init__(
        self,
        window: Window,
        container_id: str | None = None,
        *,
        stylesheet_url: str = config.DOCSIE_STYLESHEET_URL,
        script_url: str = config.DOCSIE_SCRIPT_URL,
    ):
        self.window = window
        if container_id:
            self.container_id = container_id
        self.stylesheet_url = stylesheet_url
        self.script_url = script_url
        self._sessions: dict[str, WidgetSession] = {}
        self._generations = itertools.count(1)

    def session(self, container_id: str | None = None) -> WidgetSession | None:
        return self._sessions.get(container_id or self.container_id)

    def state(self, container_id: str | None = None) -> str:
        session = self.session(container_id)
        return session.state if session else IDLE

    def initialize(
        self,
        deployment_id: str,
        token: str | None = None,
        fallback_url: str | None = None,
        *,
        container_id: str | None = None,
    ) -> asyncio.Future:
        """
        Mount the widget and return a future for the script load.
        Resolves (None) on the script's load event, rejects with WidgetLoadError on
        its error event. Must be called from a running event loop.
        """
        if not deployment_id:
            raise ValueError("deployment_id is required")
        loop = asyncio.get_running_loop()
        container_id = container_id or self.container_id
        self.cleanup(container_id)

        document = self.window.document
        stylesheet = document.create_element(
            "link",
            {"rel": "stylesheet", "media": "all", "href": self.stylesheet_url},
        )
        document.head.append_child(stylesheet)

        config_string = build_config_string(deployment_id, **self._authorization(token, fallback_url))

        script = document.create_element(
            "script",
            {"async": True, "type": "text/javascript", "src": self.script_url, "data-docsie": config_string},
        )
        self._prepare_container(document.get_element_by_id(container_id))

        session = WidgetSession(
            container_id=container_id,
            generation=next(self._generations),
            stylesheet=stylesheet,
            script=script,
            future=loop.create_future(),
            config=config_string,
        )
        script.add_event_listener("load", lambda _el: self._on_load(session))
        script.add_event_listener("error", lambda _el: self._on_error(session))
        self._sessions[container_id] = session
        document.body.append_child(script)
        return session.future

    def cleanup(self, container_id: str | None = None) -> None:
        """Remove injected resources, empty the container, call Docsie.cleanup(). Idempotent."""
        container_id = container_id or self.container_id
        session = self._sessions.pop(container_id, None)
        if session is not None:
            if session.script.parent is not None:
                session.script.remove()
            if session.stylesheet.parent is not None:
                session.stylesheet.remove()
            if not session.future.done():
                session.future.set_exception(
                    WidgetSupersededError(f"{self.label} session for #{container_id} was cleaned up before loading")
                )
            session.state = IDLE

        container = self.window.document.get_element_by_id(container_id)
        if container is not None:
            container.clear_children()

        self._cleanup_remote_widget()

    def _authorization(self, token: str | None, fallback_url: str | None) -> dict:
        if fallback_url:
            logger.debug("Inline token handshake ignores fallback URL")
        return {"token": token or None}

    def _prepare_container(self, container: Element | None) -> None:
        pass

    def _is_current(self, session: WidgetSession) -> bool:
        current = self._sessions.get(session.container_id)
        return current is not None and current.generation == session.generation

    def _on_load(self, session: WidgetSession) -> None:
        if not self._is_current(session) or session.future.done():
            logger.debug("Ignoring load event for stale session #%s", session.container_id)
            return
        session.state = READY
        logger.info("%s script loaded successfully", self.label)
        session.future.set_result(None)

    def _on_error(self, session: WidgetSession) -> None:
        if not self._is_current(session) or session.future.done():
            logger.debug("Ignoring error event for stale session #%s", session.container_id)
            return
        session.state = FAILED
        logger.error("Failed to load %s script", self.label)
        session.future.set_exception(WidgetLoadError(f"Failed to load {self.label} script"))

    def _cleanup_remote_widget(self) -> None:
        docsie = self.window.globals.get("Docsie")
        if docsie is None:
            return
        if isinstance(docsie, dict):
            hook = docsie.get("cleanup")
        else:
            hook = getattr(docsie, "cleanup", None)
        if not callable(hook):
            return
        try:
            hook()
        except Exception as e:
            logger.warning("Error during %s cleanup: %s", self.label, e)


class InlineTokenBootstrap(WidgetBootstrap):
    """Token passed inline as authorizationToken; no token means unauthenticated."""


class FallbackRedirectBootstrap(WidgetBootstrap):
    """Token-in-URL handshake with a fallback login URL that returns here."""

    container_id = "secure-docsie-container"
    label = "Secure Docsie"

    def _authorization(self, token: str | None, fallback_url: str | None) -> dict:
        if token:
            self._ensure_token_in_url(token)
        full_fallback_url = build_fallback_url(
            fallback_url or config.DEFAULT_FALLBACK_URL,
            self.window.location.href,
        )
        logger.info("Fallback URL with redirect: %s", full_fallback_url)
        return {"fallback_url": full_fallback_url}

    def _ensure_token_in_url(self, token: str) -> None:
        location = self.window.location
        # A blank ?token= counts as absent and is replaced
        if location.query_params.get("token", [""])[0]:
            return
        self.window.history.replace_state(with_query_param(location.href, "token", token))

    def _prepare_container(self, container: Element | None) -> None:
        if container is not None:
            container.set_attribute("data-ddsroot", "")
