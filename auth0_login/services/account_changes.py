"""
Combined field and role edits for one account, computed then applied.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from auth0_login.core.config import Settings
from auth0_login.models.user import User
from auth0_login.schemas.claims import Claims
from auth0_login.services.claim_mapper import compute_field_changes
from auth0_login.services.role_mapper import RoleChanges, compute_role_changes
from auth0_login.utils.pipe_list import MappingPair, parse_pipe_list


@dataclass(frozen=True)
class AccountChanges:
    fields: Dict[str, str] = field(default_factory=dict)
    roles: RoleChanges = field(default_factory=RoleChanges)

    @property
    def is_empty(self) -> bool:
        return not self.fields and self.roles.is_empty


def compute_account_changes(
    claims: Claims,
    user: User,
    settings: Settings,
    claim_mapping: Optional[List[MappingPair]] = None,
    role_mapping: Optional[List[MappingPair]] = None,
) -> AccountChanges:
    """
    Describe how the account must change to match the claims.

    Mappings default to those parsed from settings.
    """
    if claim_mapping is None:
        claim_mapping = parse_pipe_list(settings.AUTH0_CLAIM_MAPPING)
    if role_mapping is None:
        role_mapping = parse_pipe_list(settings.AUTH0_ROLE_MAPPING)

    return AccountChanges(
        fields=compute_field_changes(claims, user, claim_mapping),
        roles=compute_role_changes(
            claims,
            user.get_roles(),
            role_mapping,
            settings.AUTH0_CLAIM_TO_USE_FOR_ROLE,
        ),
    )


def apply_account_changes(user: User, changes: AccountChanges) -> None:
    """Write the changes onto the user. The caller commits."""
    for field_name, value in changes.fields.items():
        user.set_field(field_name, value)
    for role in changes.roles.add:
        user.add_role(role)
    for role in changes.roles.remove:
        user.remove_role(role)
