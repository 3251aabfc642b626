"""ORM Models — SQLAlchemy declarative models for users, customers and invoices.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from invoice_desk.models.user import User  # noqa: F401
from invoice_desk.models.customer import Customer  # noqa: F401
from invoice_desk.models.invoice import Invoice  # noqa: F401
