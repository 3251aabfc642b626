"""Invoice ORM — billed amount for a customer, pending or paid.

Invariants:
    - id is UUID primary key assigned by the application on create
    - amount is an integer count of minor currency units, strictly positive
    - status is exactly 'pending' or 'paid' (check constraint)
    - customer_id must reference an existing customer (foreign key)
    - id and date never change after insert

Design Decisions:
    - Store-level CHECK constraints back the form validator: a row that slips
      past validation still cannot persist an invalid amount or status
    - Date column (not timestamp): an invoice is dated, not timed
"""

import uuid
import datetime

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from invoice_desk.db.base import Base


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_invoices_amount_positive"),
        CheckConstraint(
            "status IN ('pending', 'paid')", name="ck_invoices_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    customer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("customers.id"),
        nullable=False, index=True,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    customer: Mapped["Customer"] = relationship(
        "Customer", back_populates="invoices",
    )
