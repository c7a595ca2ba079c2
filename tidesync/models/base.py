"""Shared Pydantic base model for Tidepool and Nightscout documents."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TideSyncBase(BaseModel):
    """Base model with shared config for all wire documents.

    Both services speak camelCase (mostly), so every model declares aliases
    and accepts either the alias or the Python field name on input.  Unknown
    fields are ignored: Tidepool and Nightscout documents carry far more than
    we consume.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        """Serialize using aliases, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
