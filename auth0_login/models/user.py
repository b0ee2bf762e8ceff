"""
Local user account models.
"""

from datetime import datetime
from typing import Set

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from auth0_login.core.exceptions import InvalidFieldMapping
from auth0_login.db.database import Base

# Profile fields that claim mappings may write to
PROFILE_FIELDS = ("firstname", "surname", "picture", "locale", "homepage", "about")


class User(Base):
    """A local account. Authenticates only through Auth0 once linked."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)

    # Core identity fields, owned by the login flow
    name = Column(String(60), nullable=False, index=True, unique=True)  # Username
    mail = Column(String(254), nullable=True, index=True)
    init = Column(String(254), nullable=True)  # Email used at signup
    pass_ = Column("pass", String(255), nullable=False)
    status = Column(Boolean, nullable=False, default=False)  # Active flag
    created = Column(DateTime, nullable=False, default=datetime.now)
    login = Column(DateTime, nullable=True)  # Last successful login

    # Profile fields (claim mapping targets)
    firstname = Column(String(60), nullable=False, default="")
    surname = Column(String(60), nullable=False, default="")
    picture = Column(String(512), nullable=False, default="")
    locale = Column(String(12), nullable=False, default="")
    homepage = Column(String(255), nullable=False, default="")
    about = Column(Text, nullable=False, default="")

    role_links = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def get_field(self, field_name: str) -> str:
        if field_name not in PROFILE_FIELDS:
            raise InvalidFieldMapping(field_name)
        return getattr(self, field_name) or ""

    def set_field(self, field_name: str, value: str) -> None:
        if field_name not in PROFILE_FIELDS:
            raise InvalidFieldMapping(field_name)
        setattr(self, field_name, value)

    def get_roles(self) -> Set[str]:
        return {link.role for link in self.role_links}

    def add_role(self, role: str) -> None:
        if role not in self.get_roles():
            self.role_links.append(UserRole(role=role))

    def remove_role(self, role: str) -> None:
        for link in list(self.role_links):
            if link.role == role:
                self.role_links.remove(link)


class UserRole(Base):
    """Role granted to a user."""

    __tablename__ = "user_role"

    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True
    )
    role = Column(String(64), primary_key=True)

    user = relationship("User", back_populates="role_links")
