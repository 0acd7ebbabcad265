"""User model for fastapi-users."""

import enum

from fastapi_users_db_sqlalchemy import SQLAlchemyBaseUserTableUUID
from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from futurely.core.database import Base, TimestampMixin


class Plan(str, enum.Enum):
    """Subscription plan of a user."""

    FREE = "free"
    PLUS = "plus"
    VAULT = "vault"


class User(SQLAlchemyBaseUserTableUUID, TimestampMixin, Base):
    """User model with UUID primary key."""

    __tablename__ = "users"

    # fastapi-users provides: id, email, hashed_password, is_active, is_superuser, is_verified
    # TimestampMixin provides: created_at, updated_at

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    plan: Mapped[Plan] = mapped_column(Enum(Plan), nullable=False, default=Plan.FREE)
