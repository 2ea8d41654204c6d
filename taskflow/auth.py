"""Login state for the Streamlit front end.

The bearer token and the signed-in user live in the session state mapping
(``st.session_state`` in the app, a plain dict in tests).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, MutableMapping, Optional

from .envelope import unwrap_item
from .gateway import TaskflowGateway


logger = logging.getLogger(__name__)

TOKEN_KEY = "taskflow_token"
USER_KEY = "taskflow_user"
LOGGED_IN_KEY = "logged_in"


@dataclass(frozen=True)
class AuthResult:
    ok: bool
    token: Optional[str] = None
    refresh_token: Optional[str] = None
    user: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


def _auth_result(response: Any, action: str) -> AuthResult:
    if not response.ok:
        if response.status_code == 0:
            return AuthResult(ok=False, error="The server could not be reached.")
        return AuthResult(ok=False, error=response.error or f"{action} failed.")
    body = unwrap_item(response.data) or (response.data if isinstance(response.data, dict) else {})
    token = body.get("token") or body.get("accessToken")
    user = body.get("user") if isinstance(body.get("user"), dict) else {}
    return AuthResult(ok=True, token=token, refresh_token=body.get("refreshToken"), user=dict(user))


def login(gateway: TaskflowGateway, email: str, password: str) -> AuthResult:
    if not (email or "").strip() or not password:
        return AuthResult(ok=False, error="Email and password are required.")
    response = gateway.post("/auth/login", json_body={"email": email.strip(), "password": password})
    result = _auth_result(response, "Login")
    if result.ok and not result.token:
        return AuthResult(ok=False, error="Login response did not include a token.")
    if result.ok:
        gateway.set_token(result.token)
        logger.info("Signed in as %s", email.strip())
    return result


def register(gateway: TaskflowGateway, first_name: str, last_name: str, email: str, password: str) -> AuthResult:
    if not (email or "").strip() or not password:
        return AuthResult(ok=False, error="Email and password are required.")
    response = gateway.post(
        "/auth/register",
        json_body={
            "firstName": (first_name or "").strip(),
            "lastName": (last_name or "").strip(),
            "email": email.strip(),
            "password": password,
        },
    )
    result = _auth_result(response, "Registration")
    if result.ok and result.token:
        gateway.set_token(result.token)
    return result


def logout(session_state: MutableMapping[str, Any], gateway: Optional[TaskflowGateway] = None) -> None:
    set_login_state(session_state, False)
    if gateway is not None:
        gateway.set_token(None)


def is_logged_in(session_state: MutableMapping[str, Any]) -> bool:
    return bool(session_state.get(LOGGED_IN_KEY, False)) and bool(session_state.get(TOKEN_KEY))


def set_login_state(
    session_state: MutableMapping[str, Any],
    state: bool,
    *,
    token: Optional[str] = None,
    user: Optional[Dict[str, Any]] = None,
) -> None:
    session_state[LOGGED_IN_KEY] = bool(state)
    if state:
        session_state[TOKEN_KEY] = token
        session_state[USER_KEY] = dict(user or {})
    else:
        session_state.pop(TOKEN_KEY, None)
        session_state.pop(USER_KEY, None)


def current_token(session_state: MutableMapping[str, Any]) -> Optional[str]:
    return session_state.get(TOKEN_KEY)


def current_user(session_state: MutableMapping[str, Any]) -> Dict[str, Any]:
    return dict(session_state.get(USER_KEY) or {})


def display_name(user: Dict[str, Any]) -> str:
    first = (user.get("firstName") or "").strip()
    last = (user.get("lastName") or "").strip()
    full = f"{first} {last}".strip()
    return full or user.get("username") or user.get("email") or "User"
