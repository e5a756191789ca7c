from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse

from zee_ordering.config import settings

LOGIN_PATH = "/login"
PROTECTED_PATH_PREFIXES = ("/", "/api/products", "/api/import/sheets", "/api/export/order")
PUBLIC_PATH_PREFIXES = ("/api/health", LOGIN_PATH, "/_next", "/favicon.ico", "/public", "/api/auth")


def is_public_path(path: str) -> bool:
    return any(path == p or path.startswith(p) for p in PUBLIC_PATH_PREFIXES)


def is_protected_path(path: str) -> bool:
    if is_public_path(path):
        return False
    return any(path == p or path.startswith(p) for p in PROTECTED_PATH_PREFIXES)


def login_redirect(path: str) -> RedirectResponse:
    return RedirectResponse(f"{LOGIN_PATH}?{urlencode({'next': path or '/'})}", status_code=307)


async def access_gate(request: Request, call_next):
    """
    Presence-only gate: a protected request passes when the session cookie
    exists with any non-empty value, otherwise it is sent to the login page.
    """
    path = request.url.path
    if not is_protected_path(path):
        return await call_next(request)
    if request.cookies.get(settings.AUTH_COOKIE_NAME):
        return await call_next(request)
    return login_redirect(path)
