"""Auth Schemas — sign-in credential shape checked before any store access.

Invariants:
    - email must parse as an email address (EmailStr)
    - password must be at least 6 characters
    - Violations are NOT reported to the client field-by-field; the caller
      turns any ValidationError into the same generic rejection

Design Decisions:
    - Pydantic at the boundary: same validation machinery as every other request body
"""

from pydantic import BaseModel, EmailStr, Field

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."


class SignInCredentials(BaseModel):
    """Submitted sign-in form, validated before lookup."""
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class SignInRejected(BaseModel):
    """Uniform rejection body — never says which check failed."""
    message: str = INVALID_CREDENTIALS_MESSAGE
