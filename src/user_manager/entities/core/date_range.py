"""Birth date range query object."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class DateRange(BaseModel):
    """Inclusive date range where either bound may be left open.

    Ordering of the bounds is checked by ``validate_date_range_order``
    rather than at construction, so an out-of-order range can still be
    represented and rejected with a typed error.
    """

    model_config = ConfigDict(
        frozen=True, validate_by_name=True, validate_by_alias=True
    )

    from_: date | None = Field(default=None, alias="from", description="Lower bound")
    to: date | None = Field(default=None, description="Upper bound")
