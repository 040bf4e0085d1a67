from typing import Any
from pydantic import BaseModel, ConfigDict

PROTECTED_FIELDS = ("id", "created_at")


class ReportCreate(BaseModel):
    """Contact messages and content reports; any extra keys are kept as-is."""

    model_config = ConfigDict(extra="allow")

    type: str = "contact"
    message: str = ""

    def to_record(self) -> dict[str, Any]:
        data = self.model_dump()
        for key in PROTECTED_FIELDS:
            data.pop(key, None)
        return data
