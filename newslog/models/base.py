"""Base model class for all records."""

from typing import Any, Dict

from pydantic import BaseModel


class NewslogModel(BaseModel):
    """Base model for records persisted to JSON or returned to the UI."""

    class Config:
        """Pydantic config."""

        populate_by_name = True

    def to_dict(self) -> Dict[str, Any]:
        """Dump using the camelCase wire names, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)
