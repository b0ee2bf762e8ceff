"""
Pydantic schemas for user and login endpoints.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Public view of a local account."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    status: bool
    firstname: str
    surname: str
    picture: str = ""
    locale: str = ""
    homepage: str = ""
    about: str = ""
    created: Optional[datetime] = Field(None, description="When the account was created")
    roles: List[str] = Field(default_factory=list)


class LoginWidgetSettings(BaseModel):
    """Settings for the Auth0 Lock login widget, passed through unchanged."""

    domain: Optional[str]
    clientID: Optional[str]
    state: Optional[str] = None
    formTitle: str
    showSignup: bool
    widgetCdn: str
    loginCSS: str
    lockExtraSettings: Dict[str, Any] = Field(default_factory=dict)
    callbackURL: str
