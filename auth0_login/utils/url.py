"""
Redirect helpers for user-facing login messages.
"""

from typing import Optional
from urllib.parse import urlencode

from fastapi.responses import RedirectResponse

MESSAGE_STATUS = "status"
MESSAGE_WARNING = "warning"
MESSAGE_ERROR = "error"


def is_local_path(url: Optional[str]) -> bool:
    """True for same-site absolute paths ("/x"), never "//host" or "http://"."""
    return bool(url) and url.startswith("/") and not url.startswith("//")


def redirect_with_message(
    url: str, message: Optional[str] = None, message_type: str = MESSAGE_STATUS
) -> RedirectResponse:
    """Redirect (303) with the message carried as query parameters."""
    if message:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{urlencode({'message': message, 'message_type': message_type})}"
    return RedirectResponse(url=url, status_code=303)
