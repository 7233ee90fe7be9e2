from datetime import datetime
from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from pharmacy.core.dates import as_utc


class CamelModel(BaseModel):
    """JSON bodies use camelCase keys; Python code uses the snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PartialUpdate(CamelModel):
    """Partial update body: omitted fields are left alone.

    Fields named in `non_nullable` may be omitted but not sent as `null`.
    """

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        nulled = [
            type(self).model_fields[name].alias or name
            for name in self.non_nullable
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self


# Timestamps are kept timezone-aware in UTC whatever the client or backend sends.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
