"""
Base schemas for all models.

Records are exchanged with the UI layer in camelCase ("locationId",
"importedCount"); Python code uses snake_case attributes.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - camelCase aliases, snake_case names accepted too
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict:
        """Serialize with camelCase keys, enums as plain values."""
        return self.model_dump(mode="json", by_alias=True)
