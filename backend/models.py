"""
models.py
─────────
Pydantic models for item input and the API response envelope.
"""

from __future__ import annotations
from typing import Any, List, Mapping, Optional
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from errors import MissingFields

REQUIRED_FIELDS = ("item_id", "item_name")


class ItemCreate(BaseModel):
    """Only presence of the business id and name is checked; everything else passes through."""

    model_config = ConfigDict(extra="allow")

    item_id: Any
    item_name: Any


class Envelope(BaseModel):
    isOk: bool
    data: Any = None
    error: Optional[str] = None
    appliedInMemory: Optional[bool] = None


def validate_new_item(fields: Mapping[str, Any]) -> None:
    """Raise MissingFields when a required field is absent."""
    try:
        ItemCreate.model_validate(dict(fields))
    except PydanticValidationError as exc:
        missing: List[str] = [
            str(err["loc"][0]) for err in exc.errors() if err["type"] == "missing"
        ]
        if not missing:
            raise
        raise MissingFields(missing) from exc
