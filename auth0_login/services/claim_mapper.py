"""
Map Auth0 claims onto user profile fields.
"""

from typing import Any, Dict, Iterable

from auth0_login.core.logging import get_logger
from auth0_login.models.user import User
from auth0_login.schemas.claims import Claims
from auth0_login.utils.pipe_list import MappingPair

logger = get_logger(__name__)

# Fields the login flow sets itself; mappings to these are ignored
BUILTIN_FIELDS = frozenset({"uid", "name", "mail", "init", "is_new", "status", "pass"})


def claim_value_as_text(value: Any) -> str:
    """Render a claim value the way it is stored in a text field."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


def compute_field_changes(
    claims: Claims, user: User, mappings: Iterable[MappingPair]
) -> Dict[str, str]:
    """
    Work out which profile fields differ from the mapped claims.

    A claim that is absent maps to the empty string. The user is not modified.

    Args:
        claims: Claims for this login
        user: Account being reconciled
        mappings: (claim_name, field_name) pairs

    Returns:
        Field name to new value, for changed fields only

    Raises:
        InvalidFieldMapping: A mapping names a field the account does not have
    """
    changes: Dict[str, str] = {}
    for claim_name, field_name in mappings:
        if field_name in BUILTIN_FIELDS:
            logger.info(
                "Skipping claim mapping for built-in field",
                extra={"claim": claim_name, "field": field_name},
            )
            continue

        value = claim_value_as_text(claims.get(claim_name))
        current_value = user.get_field(field_name)
        if current_value == value:
            logger.debug("Field value unchanged", extra={"field": field_name})
            continue

        logger.info(
            "Field value changed",
            extra={"field": field_name, "old": current_value, "new": value},
        )
        changes[field_name] = value
    return changes
