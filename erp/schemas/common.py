# erp/schemas/common.py
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

# input limits match the column precision (Numeric(14, 4) / Numeric(14, 2))
QtyIn = Annotated[Decimal, Field(gt=0, le=Decimal("9999999999.9999"), decimal_places=4)]
OptQtyIn = Annotated[Decimal, Field(ge=0, le=Decimal("9999999999.9999"), decimal_places=4)]
RateIn = Annotated[Decimal, Field(ge=0, le=Decimal("9999999999.99"), decimal_places=2)]
MoneyIn = Annotated[Decimal, Field(ge=0, le=Decimal("999999999999.99"), decimal_places=2)]
PercentIn = Annotated[Decimal, Field(ge=0, le=100, decimal_places=2)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserRef(CamelModel):
    id: int
    name: str
