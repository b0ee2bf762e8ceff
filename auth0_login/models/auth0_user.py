"""
Link between an Auth0 identity and a local user account.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text

from auth0_login.db.database import Base


class Auth0User(Base):
    """auth0_user table: one row per Auth0 identity that has logged in."""

    __tablename__ = "auth0_user"

    # Primary key doubles as the uniqueness guarantee for concurrent signups
    auth0_id = Column(String(255), primary_key=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    auth0_object = Column(Text, nullable=False)  # JSON of the last claims seen
