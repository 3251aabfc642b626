"""User ORM — credential store for the single class of signed-in user.

Invariants:
    - id is UUID primary key
    - email is unique (DB unique constraint) — the lookup key for sign-in
    - password_hash holds a bcrypt hash, never plaintext

Design Decisions:
    - Provisioned out of band (migration/seed); the application only reads users
"""

import uuid

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from invoice_desk.core.domain_types import Identity, UserId
from invoice_desk.db.base import Base


class User(Base):
    """Signed-in user of the dashboard."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        Text, nullable=False, unique=True, index=True,
    )
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)

    def to_identity(self) -> Identity:
        return Identity(
            id=UserId(self.id), email=self.email,
            name=self.name, password_hash=self.password_hash,
        )
