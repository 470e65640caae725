"""Actor profiles and homeowner properties.

Accounts live in the identity service; a profile links a user id to the
role-specific data the engagement workflow needs.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.marketplace.models.base import UtcDateTime, utc_now
from src.marketplace.models.enums import PropertyType


class HomeownerProfile(SQLModel, table=True):
    __tablename__ = "homeowner_profiles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(unique=True, index=True)
    name: str = Field(max_length=200)
    email: str | None = Field(default=None, max_length=320)
    city: str | None = Field(default=None, max_length=100)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)


class DesignerProfile(SQLModel, table=True):
    __tablename__ = "designer_profiles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(unique=True, index=True)
    name: str = Field(max_length=200)
    firm_name: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, max_length=100)
    is_verified: bool = Field(default=False)
    verified_at: datetime | None = Field(default=None, sa_type=UtcDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)


class Property(SQLModel, table=True):
    """A homeowner's property that projects can be attached to."""

    __tablename__ = "properties"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    homeowner_id: UUID = Field(foreign_key="homeowner_profiles.id", index=True)
    property_type: str = Field(default=PropertyType.APARTMENT.value, max_length=20)
    address: str | None = Field(default=None, max_length=500)
    city: str | None = Field(default=None, max_length=100)
    size_sqft: int | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UtcDateTime)
