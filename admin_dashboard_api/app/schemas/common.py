"""
Shared schema helpers.

The dashboard speaks camelCase JSON (``sortBy``, ``currentPassword``,
``createdAt``) while the Python side uses snake_case attribute names.
``CamelModel`` accepts both spellings on input and dumps camelCase.
"""

import re
from typing import Any, Dict

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly sent by the client, keyed the way they are stored."""
        return self.model_dump(by_alias=True, exclude_unset=True)


def normalize_email(value: str) -> str:
    """Trim and lower-case an address, rejecting anything that is not ``a@b.c``."""
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value
