"""Shared configuration for serializable value objects."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ValueModel(BaseModel):
    """Immutable value object that dumps to camelCase JSON."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict[str, object]:
        """Return a JSON-ready dict using the stable camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)
