"""Customer ORM — the party an invoice is billed to.

Invariants:
    - id is UUID primary key, referenced by invoices.customer_id
"""

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from invoice_desk.db.base import Base


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str] = mapped_column(
        String(255), nullable=False, default="",
    )

    invoices: Mapped[list["Invoice"]] = relationship(
        "Invoice", back_populates="customer",
    )
