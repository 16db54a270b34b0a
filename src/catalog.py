"""Static product catalog: barcodes, quality tiers and product instances."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from errors import UnknownProductError


class Quality(Enum):
    """Quality tiers, lowest first.  Declaration order is the tier ordinal."""

    REGULAR = "regular"
    SILVER = "silver"
    GOLD = "gold"
    IRIDIUM = "iridium"

    @property
    def ordinal(self) -> int:
        return _QUALITY_ORDER.index(self)

    def __str__(self) -> str:
        return self.name


_QUALITY_ORDER: Tuple[Quality, ...] = tuple(Quality)


class Barcode(Enum):
    """The closed set of product types sold by the shop.

    Each member carries its data directly: identifier, display name,
    base price in cents and the quality tiers it can be stocked at.
    """

    EGG = ("egg", "Egg", 50)
    MILK = ("milk", "Milk", 440)
    JAM = ("jam", "Jam", 670)
    WOOL = ("wool", "Wool", 3000)

    def __init__(self, identifier: str, display_name: str, base_price: int) -> None:
        self.identifier = identifier
        self.display_name = display_name
        self.base_price = base_price

    @property
    def qualities(self) -> Tuple[Quality, ...]:
        return _QUALITY_ORDER

    @property
    def ordinal(self) -> int:
        return _BARCODE_ORDER.index(self)

    def __str__(self) -> str:
        return self.identifier


_BARCODE_ORDER: Tuple[Barcode, ...] = tuple(Barcode)


@dataclass(frozen=True)
class Product:
    """One unit of stock.

    Instances with the same barcode and quality are interchangeable; there
    is no serial number.
    """

    barcode: Barcode
    quality: Quality = Quality.REGULAR

    @property
    def base_price(self) -> int:
        return self.barcode.base_price

    @property
    def display_name(self) -> str:
        return self.barcode.display_name

    def __str__(self) -> str:
        return f"{self.display_name}: {self.base_price}c *{self.quality}*"


def create_product(barcode: Barcode, quality: Quality = Quality.REGULAR) -> Product:
    return Product(barcode=barcode, quality=quality)


def parse_barcode(name: str) -> Barcode:
    """Look up a barcode by its identifier (case-insensitive).

    Raises:
        UnknownProductError: if ``name`` is not a known product identifier.
    """
    key = name.strip().lower()
    for barcode in Barcode:
        if barcode.identifier == key:
            return barcode
    raise UnknownProductError(f"Invalid product name provided: {name}")


def parse_quality(name: str) -> Quality:
    key = name.strip().lower()
    for quality in Quality:
        if quality.value == key:
            return quality
    raise UnknownProductError(f"Invalid quality provided: {name}")
