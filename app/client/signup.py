"""Sign-up form state with touched/dirty tracking and derived errors."""

from __future__ import annotations

import logging
from typing import Literal

import httpx

from ..utils import is_valid_email, is_valid_password

logger = logging.getLogger(__name__)

FormField = Literal["email", "password", "re_password"]
SignUpOutcome = Literal["created", "exists", "failed"]

FIELDS: tuple[FormField, ...] = ("email", "password", "re_password")

EMPTY_MESSAGE = "Can't be empty"
EMAIL_MESSAGE = "Invalid email format"
PASSWORD_MESSAGE = "Must be at least 6 characters, with at least one number and one letter"
REPEAT_LENGTH_MESSAGE = "Must be at least 3 characters"
MISMATCH_MESSAGE = "Passwords do not match"


class SignUpForm:
    """Mirror of the sign-up page's form controller.

    A field becomes *touched* once it loses focus and *dirty* once its value
    differs from the initial empty string.
    """

    def __init__(self) -> None:
        self.values: dict[FormField, str] = {field: "" for field in FIELDS}
        self.touched: set[FormField] = set()
        self.dirty: set[FormField] = set()
        self.submitting = False

    def set_value(self, field: FormField, value: str) -> None:
        self.values[field] = value
        if value:
            self.dirty.add(field)
        else:
            self.dirty.discard(field)

    def blur(self, field: FormField) -> None:
        self.touched.add(field)

    @property
    def errors(self) -> dict[FormField, str]:
        errors: dict[FormField, str] = {}
        email = self.values["email"]
        password = self.values["password"]
        repeat = self.values["re_password"]

        if not email:
            errors["email"] = EMPTY_MESSAGE
        elif not is_valid_email(email):
            errors["email"] = EMAIL_MESSAGE

        if not password:
            errors["password"] = EMPTY_MESSAGE
        elif not is_valid_password(password):
            errors["password"] = PASSWORD_MESSAGE

        if not repeat:
            errors["re_password"] = EMPTY_MESSAGE
        elif len(repeat) < 3:
            errors["re_password"] = REPEAT_LENGTH_MESSAGE
        elif repeat != password:
            errors["re_password"] = MISMATCH_MESSAGE
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def field_message(self, field: FormField) -> str | None:
        """Message displayed next to ``field``; only shown once it was touched."""

        if field not in self.touched:
            return None
        if field not in self.dirty:
            return EMPTY_MESSAGE
        return self.errors.get(field)

    def has_error(self, field: FormField) -> bool:
        return self.field_message(field) is not None

    async def submit(self, client: httpx.AsyncClient) -> SignUpOutcome:
        """Post the form to ``/users``; an invalid form is never sent."""

        self.touched.update(FIELDS)
        if not self.is_valid:
            return "failed"

        self.submitting = True
        try:
            response = await client.post(
                "/users",
                json={
                    "email": self.values["email"],
                    "password": self.values["password"],
                },
            )
        except httpx.HTTPError as exc:
            logger.error("Sign-up request failed: %s", exc)
            return "failed"
        finally:
            self.submitting = False

        if response.status_code == 409:
            return "exists"
        if response.is_success:
            logger.info("User created successfully")
            return "created"
        logger.error("Failed to create user: HTTP %s", response.status_code)
        return "failed"
