"""
Auth endpoints: POST /auth/login, POST /auth/token, GET /auth/login (login page).
No credential validation: any non-empty username/password gets a token.
Who may request a token is restricted by the deployment boundary, not here.
"""
import logging

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from token_server.config import DEMO_SUBJECT
from token_server.tokens import issue_token

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth")


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


def login_required_response() -> JSONResponse:
    """400 for a missing, empty, null or malformed login body."""
    logger.info("Login rejected: username or password missing")
    return JSONResponse(status_code=400, content={"message": "Username and password are required"})


@router.post("/login")
def login(request: LoginRequest | None = None):
    """Return a Docsie token for any non-empty username/password."""
    if request is None or not request.username or not request.password:
        return login_required_response()
    return {"token": issue_token(request.username)}


@router.post("/token")
def token():
    """Token for the fixed demo subject; no body required."""
    return {"token": issue_token(DEMO_SUBJECT)}


_LOGIN_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Sign in to documentation</title></head>
<body>
  <h1>Sign in</h1>
  <p>Sign in to view the documentation. You will be sent back afterwards.</p>
  <form id="login-form">
    <p><label>Username <input type="text" name="username" autocomplete="username"></label></p>
    <p><label>Password <input type="password" name="password" autocomplete="current-password"></label></p>
    <p><button type="submit">Sign in</button></p>
  </form>
  <p id="login-error" style="color: #b00020;"></p>
  <script>
    document.getElementById("login-form").addEventListener("submit", async function (event) {
      event.preventDefault();
      const form = event.target;
      const errorBox = document.getElementById("login-error");
      errorBox.textContent = "";
      const response = await fetch("/auth/login", {
        method: "POST",
        headers: {"Content-Type": "application/json"},
        body: JSON.stringify({username: form.username.value, password: form.password.value}),
      });
      const data = await response.json();
      if (!response.ok) {
        errorBox.textContent = data.message || "Login failed";
        return;
      }
      const redirect = new URLSearchParams(window.location.search).get("redirect");
      if (!redirect) {
        errorBox.textContent = "Signed in. No page to return to.";
        return;
      }
      const target = new URL(redirect);
      target.searchParams.set("token", data.token);
      window.location.href = target.toString();
    });
  </script>
</body>
</html>"""


@router.get("/login", response_class=HTMLResponse)
def login_page():
    """Fallback target for Docsie: sign in, then return to ?redirect= with ?token= appended."""
    return HTMLResponse(_LOGIN_PAGE)
