"""Metal price snapshot schemas."""

from typing import Optional

from pydantic import Field

from metalpulse.schemas.base import CamelModel

GOLD = "XAU"
SILVER = "XAG"
INSTRUMENTS = (GOLD, SILVER)
BASE_CURRENCY = "USD"


class MetalPrices(CamelModel):
    """Spot prices per troy ounce; None when the provider gave no value."""

    XAU: Optional[float] = None
    XAG: Optional[float] = None

    def has_any(self) -> bool:
        return self.XAU is not None or self.XAG is not None


class PriceSnapshot(CamelModel):
    """Single-slot cached price snapshot.

    last_updated is None only for the default (never fetched) snapshot.
    """

    last_updated: Optional[str] = None
    prices: MetalPrices = Field(default_factory=MetalPrices)
    base: str = BASE_CURRENCY

    @classmethod
    def default(cls) -> "PriceSnapshot":
        return cls()
