"""Schema Base — camelCase wire format shared by every request and response model.

Design Decisions:
    - alias_generator=to_camel + populate_by_name: clients send and receive camelCase,
      Python code keeps snake_case attribute names
    - from_attributes: response models validate straight from ORM rows
    - PartialUpdate: an omitted field means "leave unchanged", an explicit null
      is only accepted for columns that may hold NULL
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PartialUpdate(CamelModel):
    """Base for PATCH bodies; subclasses list the fields that refuse null."""

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self
