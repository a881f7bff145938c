"""
Minimal document model for hosting the Docsie widget.
Just enough of the browser surface (elements, head/body, load/error events,
location, history, window globals) for the bootstrap to inject and remove
resources, and for pages to render the result as HTML.
"""
import html
from typing import Callable, Iterator
from urllib.parse import parse_qs, urlsplit, urlunsplit

VOID_TAGS = {"link", "meta", "br", "img", "input", "hr"}

Listener = Callable[["Element"], None]


class Element:
    def __init__(self, tag: str, attributes: dict | None = None, text: str = ""):
        self.tag = tag
        self.attributes: dict = dict(attributes or {})
        self.text = text
        self.children: list[Element] = []
        self.parent: Element | None = None
        self._listeners: dict[str, list[Listener]] = {}
        self._is_root = False

    def __repr__(self) -> str:
        return f"<Element {self.tag} id={self.id!r}>"

    @property
    def id(self) -> str | None:
        return self.attributes.get("id")

    def get_attribute(self, name: str):
        return self.attributes.get(name)

    def set_attribute(self, name: str, value="") -> None:
        self.attributes[name] = value

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def append_child(self, child: "Element") -> "Element":
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove_child(self, child: "Element") -> "Element":
        """Detach child. Raises ValueError if it is not a child of this element."""
        self.children.remove(child)
        child.parent = None
        return child

    def remove(self) -> None:
        if self.parent is not None:
            self.parent.remove_child(self)

    def clear_children(self) -> None:
        """Equivalent of innerHTML = ''."""
        for child in list(self.children):
            self.remove_child(child)
        self.text = ""

    @property
    def is_connected(self) -> bool:
        """True if attached (directly or transitively) to a document."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node._is_root

    def iter(self) -> Iterator["Element"]:
        """This element and all descendants, depth-first."""
        yield self
        for child in self.children:
            yield from child.iter()

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_event_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def dispatch_event(self, event_type: str) -> None:
        """Invoke listeners for event_type (e.g. 'load', 'error') synchronously."""
        for listener in list(self._listeners.get(event_type, [])):
            listener(self)

    def render(self) -> str:
        attrs = []
        for name, value in self.attributes.items():
            if value is None or value is False:
                continue
            if value is True or value == "":
                attrs.append(f" {name}")
            else:
                attrs.append(f' {name}="{html.escape(str(value), quote=True)}"')
        open_tag = f"<{self.tag}{''.join(attrs)}>"
        if self.tag in VOID_TAGS:
            return open_tag
        # Script bodies are raw text
        body = self.text if self.tag == "script" else html.escape(self.text)
        inner = body + "".join(child.render() for child in self.children)
        return f"{open_tag}{inner}</{self.tag}>"


class Document:
    def __init__(self):
        self.root = Element("html")
        self.root._is_root = True
        self.head = self.root.append_child(Element("head"))
        self.body = self.root.append_child(Element("body"))

    def create_element(self, tag: str, attributes: dict | None = None, text: str = "") -> Element:
        return Element(tag, attributes, text)

    def get_element_by_id(self, element_id: str) -> Element | None:
        for el in self.root.iter():
            if el.id == element_id:
                return el
        return None

    def query_all(self, tag: str) -> list[Element]:
        return [el for el in self.root.iter() if el.tag == tag]

    def render(self) -> str:
        return "<!DOCTYPE html>\n" + self.root.render()


class Location:
    def __init__(self, href: str):
        self.href = href

    @property
    def query_params(self) -> dict[str, list[str]]:
        return parse_qs(urlsplit(self.href).query, keep_blank_values=True)

    @property
    def href_without_query(self) -> str:
        """href with query string and fragment removed."""
        parts = urlsplit(self.href)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class History:
    """Session history; replace_state changes the URL without a reload."""

    def __init__(self, location: Location):
        self._location = location
        self.entries = [location.href]
        self.replaced = False

    def replace_state(self, url: str) -> None:
        self._location.href = url
        self.entries[-1] = url
        self.replaced = True


class Window:
    def __init__(self, url: str = "about:blank", document: Document | None = None):
        self.document = document or Document()
        self.location = Location(url)
        self.history = History(self.location)
        # Script-defined globals, e.g. globals["Docsie"] once service.js has run
        self.globals: dict = {}
