"""Stock keeping for the farm shop.

Two inventory variants share the :class:`Inventory` contract:

* :class:`BasicInventory` keeps a single list of products and only
  supports adding or removing one unit per call.
* :class:`FancyInventory` keeps one list per barcode and supports bulk
  quantities.  Removal always hands out the highest quality unit first;
  among equal qualities the unit stocked earliest wins.

Removal transfers ownership: a removed product is no longer referenced by
the inventory and is handed to the caller (normally a customer's cart).
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from catalog import Barcode, Product, Quality, create_product
from errors import FailedTransactionError, InvalidStockRequestError

logger = logging.getLogger(__name__)


class Inventory:
    """Abstract base for inventory variants."""

    def add_product(self, barcode: Barcode, quality: Quality, quantity: Optional[int] = None) -> None:
        """Stock ``quantity`` new units (one unit when ``quantity`` is None)."""
        raise NotImplementedError

    def exists_product(self, barcode: Barcode) -> bool:
        raise NotImplementedError

    def remove_product(self, barcode: Barcode, quantity: Optional[int] = None) -> List[Product]:
        """Remove up to ``quantity`` units and return those actually removed.

        Returns an empty list when nothing of ``barcode`` is in stock.
        """
        raise NotImplementedError

    def get_all_products(self) -> List[Product]:
        raise NotImplementedError

    @property
    def supports_quantities(self) -> bool:
        return False


class BasicInventory(Inventory):
    """Single-unit inventory backed by one insertion-ordered list."""

    def __init__(self) -> None:
        self._products: List[Product] = []

    def add_product(self, barcode: Barcode, quality: Quality, quantity: Optional[int] = None) -> None:
        if quantity is not None and quantity != 1:
            raise InvalidStockRequestError(
                "Current inventory is not fancy enough. Please supply products one at a time."
            )
        self._products.append(create_product(barcode, quality))

    def exists_product(self, barcode: Barcode) -> bool:
        return any(p.barcode is barcode for p in self._products)

    def remove_product(self, barcode: Barcode, quantity: Optional[int] = None) -> List[Product]:
        if quantity is not None and quantity != 1:
            raise FailedTransactionError(
                "Current inventory is not fancy enough. Please purchase products one at a time."
            )
        for idx, product in enumerate(self._products):
            if product.barcode is barcode:
                del self._products[idx]
                return [product]
        return []

    def get_all_products(self) -> List[Product]:
        return list(self._products)


class FancyInventory(Inventory):
    """Bulk inventory with quality-priority removal.

    Stock is grouped per barcode in declaration order of :class:`Barcode`.
    Within a barcode, products keep the order they were stocked in.
    """

    def __init__(self) -> None:
        self._stock: Dict[Barcode, List[Product]] = {barcode: [] for barcode in Barcode}

    @property
    def supports_quantities(self) -> bool:
        return True

    def add_product(self, barcode: Barcode, quality: Quality, quantity: Optional[int] = None) -> None:
        # quantity < 1 is rejected by the caller; here it simply adds nothing
        count = 1 if quantity is None else quantity
        stack = self._stock[barcode]
        for _ in range(count):
            stack.append(create_product(barcode, quality))

    def exists_product(self, barcode: Barcode) -> bool:
        return bool(self._stock[barcode])

    def remove_product(self, barcode: Barcode, quantity: Optional[int] = None) -> List[Product]:
        count = 1 if quantity is None else quantity
        stack = self._stock[barcode]
        removed: List[Product] = []
        for _ in range(count):
            if not stack:
                break
            removed.append(stack.pop(self._best_index(stack)))
        if quantity is not None and len(removed) < quantity:
            logger.debug(
                "Partial removal",
                extra={"extra": {"product": barcode.identifier, "requested": quantity, "removed": len(removed)}},
            )
        return removed

    def get_all_products(self) -> List[Product]:
        products: List[Product] = []
        for barcode in Barcode:
            products.extend(self._stock[barcode])
        return products

    def get_stocked_quantity(self, barcode: Barcode) -> int:
        return len(self._stock[barcode])

    @staticmethod
    def _best_index(stack: List[Product]) -> int:
        # max() keeps the first maximal element, so ties go to the earliest stocked
        return max(range(len(stack)), key=lambda i: stack[i].quality.ordinal)
