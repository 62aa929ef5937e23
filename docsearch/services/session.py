"""Session identity — a stable per-browser token carried in a cookie.

The token groups a sequence of search events. It is read from the request's
cookie when present and well-formed, otherwise a new UUID is minted and the
caller must bind it with `attach_session_cookie`.
"""

import uuid
from dataclasses import dataclass

from starlette.requests import Request
from starlette.responses import Response

SESSION_COOKIE = "search_session_id"


@dataclass(frozen=True)
class SessionIdentity:
    has_cookie: bool
    session_id: str


def is_valid_session_id(value: str | None) -> bool:
    if not value:
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def resolve_session(request: Request, cookie_name: str = SESSION_COOKIE) -> SessionIdentity:
    """Return the session carried by the request, or a freshly minted one."""
    value = request.cookies.get(cookie_name)
    if is_valid_session_id(value):
        return SessionIdentity(has_cookie=True, session_id=value)
    return SessionIdentity(has_cookie=False, session_id=str(uuid.uuid4()))


def attach_session_cookie(
    response: Response,
    identity: SessionIdentity,
    cookie_name: str = SESSION_COOKIE,
) -> Response:
    """Bind a newly minted session to the browser. No-op for existing sessions."""
    if not identity.has_cookie:
        # No max_age/expires: the browser decides the lifetime
        response.set_cookie(cookie_name, identity.session_id, path="/", samesite="lax")
    return response
