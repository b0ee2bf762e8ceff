"""
Map values of a role claim onto local roles.

Only roles named in the role mapping are managed: they are granted when a
matching claim value is present and revoked otherwise. Every other role a
user holds is left alone.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Set

from auth0_login.core.logging import get_logger
from auth0_login.schemas.claims import Claims
from auth0_login.utils.pipe_list import MappingPair

logger = get_logger(__name__)


@dataclass(frozen=True)
class RoleChanges:
    """Roles to add and remove, each sorted."""

    add: List[str] = field(default_factory=list)
    remove: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.add and not self.remove


def normalize_claim_values(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value]
    return [str(value)]


def compute_role_changes(
    claims: Claims,
    current_roles: Iterable[str],
    mappings: Iterable[MappingPair],
    role_claim: Optional[str],
) -> RoleChanges:
    """
    Diff the user's roles against what the role claim grants.

    Args:
        claims: Claims for this login
        current_roles: Roles the user holds now
        mappings: (claim_value, role_name) pairs
        role_claim: Claim holding the role values; None disables role mapping

    Returns:
        RoleChanges; empty when nothing needs to change
    """
    if not role_claim:
        return RoleChanges()

    claim_values = set(normalize_claim_values(claims.get(role_claim)))
    logger.info(
        "Mapping roles",
        extra={"role_claim": role_claim, "claim_values": sorted(claim_values)},
    )

    managed: Set[str] = set()
    granted: Set[str] = set()
    for claim_value, role in mappings:
        managed.add(role)
        if claim_value in claim_values:
            granted.add(role)

    revoked = managed - granted
    current = set(current_roles)
    target = (current - revoked) | granted

    changes = RoleChanges(
        add=sorted(target - current),
        remove=sorted(current - target),
    )
    if changes.is_empty:
        logger.info("No changes to roles detected")
    else:
        logger.info(
            "Changes to roles detected",
            extra={"roles_added": changes.add, "roles_removed": changes.remove},
        )
    return changes
