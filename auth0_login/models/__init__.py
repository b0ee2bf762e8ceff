from .auth0_user import Auth0User
from .user import User, UserRole

__all__ = [
    "User",
    "UserRole",
    "Auth0User",
]
