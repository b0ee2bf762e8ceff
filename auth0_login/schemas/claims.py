"""
Pydantic schema for the claims Auth0 returns about an authenticated user.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Identity provider name Auth0 uses for its own username/password database
DATABASE_PROVIDER = "auth0"


class Identity(BaseModel):
    """One entry of the ``identities`` claim."""

    model_config = ConfigDict(frozen=True, extra="allow")

    provider: str = ""
    connection: Optional[str] = None
    user_id: Optional[str] = None
    is_social: Optional[bool] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def coerce_user_id(cls, v: Any) -> Any:
        # Some social providers report numeric ids
        if isinstance(v, int):
            return str(v)
        return v


class Claims(BaseModel):
    """
    Verified claims for one login attempt.

    The fields the login flow depends on are typed; every other claim is kept
    as an extra attribute and is reachable through ``get``.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    user_id: str = Field(..., min_length=1, description="Auth0 subject id")
    email: Optional[str] = None
    email_verified: bool = False
    nickname: Optional[str] = None
    name: Optional[str] = None
    identities: List[Identity] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def subject_as_user_id(cls, data: Any) -> Any:
        """OIDC /userinfo reports the subject as ``sub`` rather than ``user_id``."""
        if isinstance(data, dict) and not data.get("user_id") and data.get("sub"):
            data = {**data, "user_id": data["sub"]}
        return data

    @field_validator("email_verified", mode="before")
    @classmethod
    def none_is_unverified(cls, v: Any) -> Any:
        return False if v is None else v

    @property
    def is_database_user(self) -> bool:
        """True when the identity came from Auth0's credential database."""
        return any(
            identity.provider == DATABASE_PROVIDER for identity in self.identities
        )

    def get(self, claim: str, default: Any = None) -> Any:
        """Look up any claim by name."""
        if claim in type(self).model_fields:
            value = getattr(self, claim)
            return default if value is None else value
        extra = self.model_extra or {}
        return extra.get(claim, default)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
