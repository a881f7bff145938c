"""Tests for docsie_client pages (/docs inline token, /secure-docs token in URL + fallback)."""
from unittest.mock import patch

from fastapi.testclient import TestClient

from docsie_client.api import DocsieConfig
from docsie_client.main import app

client = TestClient(app)

CONFIG = DocsieConfig(deployment_id="dep_1", redirect_url="http://x/login")


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("service") == "docsie_client"


def test_home_links_both_variants():
    r = client.get("/")
    assert r.status_code == 200
    assert 'href="/docs"' in r.text
    assert 'href="/secure-docs"' in r.text


def test_docs_inline_token():
    with patch("docsie_client.main.api.get_token", return_value="tok.en.sig"), patch(
        "docsie_client.main.api.get_docsie_config", return_value=CONFIG
    ):
        r = client.get("/docs")
    assert r.status_code == 200
    assert 'data-docsie="docsie_pk_key:dep_1,authorizationToken:tok.en.sig"' in r.text
    assert 'href="https://lib.docsie.io/current/styles/docsie.css"' in r.text
    assert 'src="https://lib.docsie.io/current/service.js"' in r.text
    assert '<div id="docsie-container"></div>' in r.text
    assert r.text.count("<script") == 1
    assert "replaceState" not in r.text


def test_docs_without_token_is_unauthenticated():
    with patch("docsie_client.main.api.get_token", return_value=None), patch(
        "docsie_client.main.api.get_docsie_config", return_value=CONFIG
    ):
        r = client.get("/docs")
    assert r.status_code == 200
    assert 'data-docsie="docsie_pk_key:dep_1"' in r.text
    assert "Could not obtain an access token" in r.text


def test_docs_without_config_shows_error():
    with patch("docsie_client.main.api.get_token", return_value="tok"), patch(
        "docsie_client.main.api.get_docsie_config", return_value=None
    ):
        r = client.get("/docs")
    assert r.status_code == 502
    assert "configuration could not be loaded" in r.text
    assert "service.js" not in r.text


def test_secure_docs_fetches_token_and_sets_fallback():
    with patch("docsie_client.main.api.get_token", return_value="tok") as get_token, patch(
        "docsie_client.main.api.get_docsie_config", return_value=CONFIG
    ):
        r = client.get("/secure-docs")
    assert r.status_code == 200
    get_token.assert_called_once()
    assert (
        'data-docsie="docsie_pk_key:dep_1,authorizationFallbackURL:'
        'http://x/login?redirect=http%3A%2F%2Ftestserver%2Fsecure-docs"'
    ) in r.text
    assert "authorizationToken" not in r.text
    assert '<div id="secure-docsie-container" data-ddsroot></div>' in r.text
    assert 'window.history.replaceState(null, \'\', "http://testserver/secure-docs?token=tok");' in r.text


def test_secure_docs_uses_token_from_url():
    with patch("docsie_client.main.api.get_token", return_value="other") as get_token, patch(
        "docsie_client.main.api.get_docsie_config", return_value=CONFIG
    ):
        r = client.get("/secure-docs", params={"token": "from-login"})
    assert r.status_code == 200
    get_token.assert_not_called()
    assert "replaceState" not in r.text
    assert "redirect=http%3A%2F%2Ftestserver%2Fsecure-docs" in r.text


def test_openapi_ui_moved():
    r = client.get("/api/docs")
    assert r.status_code == 200


def test_secure_docs_blank_url_token_is_replaced():
    with patch("docsie_client.main.api.get_token", return_value="fresh") as get_token, patch(
        "docsie_client.main.api.get_docsie_config", return_value=CONFIG
    ):
        r = client.get("/secure-docs?token=")
    assert r.status_code == 200
    get_token.assert_called_once()
    assert 'window.history.replaceState(null, \'\', "http://testserver/secure-docs?token=fresh");' in r.text
