"""Tests for the document model used to host the widget."""
import pytest

from docsie_client.dom import Document, Element, Window


def test_append_and_remove_child():
    doc = Document()
    div = doc.body.append_child(doc.create_element("div", {"id": "c"}))
    assert div.is_connected
    assert doc.get_element_by_id("c") is div
    div.remove()
    assert not div.is_connected
    assert doc.get_element_by_id("c") is None
    # Detached elements: remove() is a no-op
    div.remove()


def test_remove_child_of_other_parent_raises():
    doc = Document()
    with pytest.raises(ValueError):
        doc.head.remove_child(Element("p"))


def test_append_moves_element():
    doc = Document()
    el = doc.head.append_child(Element("link"))
    doc.body.append_child(el)
    assert el.parent is doc.body
    assert doc.head.children == []


def test_clear_children():
    el = Element("div", text="hello")
    el.append_child(Element("span"))
    el.clear_children()
    assert el.children == []
    assert el.text == ""


def test_dispatch_event_and_remove_listener():
    seen = []
    el = Element("script")

    def listener(target):
        seen.append(target)

    el.add_event_listener("load", listener)
    el.dispatch_event("load")
    el.remove_event_listener("load", listener)
    el.dispatch_event("load")
    el.dispatch_event("error")
    assert seen == [el]


def test_render_attributes_and_escaping():
    el = Element(
        "script",
        {"async": True, "src": "https://lib.docsie.io/current/service.js", "data-docsie": "k:v,u:http://x/?a=1&b=2"},
    )
    assert el.render() == (
        '<script async src="https://lib.docsie.io/current/service.js" '
        'data-docsie="k:v,u:http://x/?a=1&amp;b=2"></script>'
    )
    assert Element("div", {"id": "c", "data-ddsroot": ""}).render() == '<div id="c" data-ddsroot></div>'
    assert Element("link", {"rel": "stylesheet"}).render() == '<link rel="stylesheet">'
    assert Element("p", text="<b>").render() == "<p>&lt;b&gt;</p>"


def test_document_render():
    doc = Document()
    doc.head.append_child(Element("title", text="Docs"))
    assert doc.render() == "<!DOCTYPE html>\n<html><head><title>Docs</title></head><body></body></html>"


def test_location_and_history():
    window = Window("http://y/doc?q=1&token=#frag")
    assert window.location.query_params == {"q": ["1"], "token": [""]}
    assert window.location.href_without_query == "http://y/doc"
    window.history.replace_state("http://y/doc?token=t")
    assert window.location.href == "http://y/doc?token=t"
    assert window.history.entries == ["http://y/doc?token=t"]
    assert window.history.replaced
