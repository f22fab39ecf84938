from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON (the stored record layout)."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
