import math
from typing import Iterable, Optional
from pydantic import BaseModel, ConfigDict, Field

from . import settings

Dimensions = tuple[float, float, float]


def round_dimensions(dims: Iterable[float]) -> Dimensions:
    """Ceil every side and order them longest first: (length, width, height)."""
    rounded = sorted((float(math.ceil(side)) for side in dims), reverse=True)
    if len(rounded) != 3:
        raise ValueError(f"Expected three dimensions, got {len(rounded)}.")
    return rounded[0], rounded[1], rounded[2]


class Entry(BaseModel):
    """
    One signed quantity of one FNSKU confined to one physical case.

    `units` is a delta: every entry for an FNSKU has to be summed to get the
    real quantity. Negative entries are how inventory leaves a group.
    The field order is the order of the persisted JSON record.
    """

    amz_size: Optional[str] = None
    fnsku: str = Field(..., min_length=1)
    msku: Optional[str] = None
    title: Optional[str] = None
    asin: Optional[str] = None
    condition: Optional[str] = None
    units: int = Field(default=0, ge=settings.I32_MIN, le=settings.I32_MAX)
    total_pounds: Optional[float] = None
    id: str = ""
    upc: Optional[str] = None
    dimensions: Optional[Dimensions] = None
    amz_dimensions: Optional[Dimensions] = None

    @property
    def case_dimensions(self) -> Optional[Dimensions]:
        return self.dimensions

    def set_dimensions(self, dims: Iterable[float]) -> None:
        # Normalised once here; loading persisted entries keeps the stored triplet.
        self.dimensions = round_dimensions(dims)


class ScanLine(BaseModel):
    """One line of the operator's physical count: `cases` boxes of `units_per_case` each."""

    fnsku: str = Field(..., min_length=1, alias="FNSKU")
    upc: Optional[str] = Field(default=None, alias="UPC")
    # Each case becomes one Entry, so a case holds at most an i32 of units.
    units_per_case: int = Field(..., gt=0, le=settings.I32_MAX, alias="Units Per Case")
    cases: int = Field(..., gt=0, alias="Cases")

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    @property
    def total_units(self) -> int:
        return self.units_per_case * self.cases
