"""Dropdown option models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DropdownOption(BaseModel):
    """One selectable choice of an enumerated form field."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int | str
    name: str
