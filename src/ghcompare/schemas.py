"""Validation of comparison requests."""

import re

from pydantic import BaseModel, Field, model_validator

from ghcompare.insights import PROFILE_URL_PATTERN

HANDLE_PATTERN = r"^[A-Za-z0-9\-@._:/?=]+$"


def normalize_handle(value: str) -> str:
    """Lower-cased login for duplicate detection."""
    trimmed = value.strip().lower()
    match = PROFILE_URL_PATTERN.search(trimmed)
    if match:
        return match.group(1)
    return re.sub(r"^@", "", trimmed)


class ComparisonInput(BaseModel):
    """A request to compare two users."""

    user_a: str = Field(min_length=1, pattern=HANDLE_PATTERN)
    user_b: str = Field(min_length=1, pattern=HANDLE_PATTERN)
    refresh: bool = False

    @model_validator(mode="after")
    def _distinct_users(self) -> "ComparisonInput":
        if normalize_handle(self.user_a) == normalize_handle(self.user_b):
            raise ValueError("Pick two different users to compare.")
        return self
