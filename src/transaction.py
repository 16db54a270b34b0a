"""Shopping transactions.

A transaction belongs to one customer and goes through two states:

* **active** - it holds a reference to the customer's cart and every read
  (purchases, totals) reflects the cart as it is right now;
* **finalised** - the cart contents were copied into an immutable tuple
  and the cart was emptied.  Nothing can change a finalised transaction.

Pricing is chosen by :class:`TransactionKind` instead of subclassing:

* ``FLAT`` sums base prices and prints one receipt line per product;
* ``CATEGORISED`` groups purchases by barcode on the receipt;
* ``SPECIAL_SALE`` is categorised and applies a percentage discount per
  barcode.  Discounts are taken verbatim; values outside 0-100 are not
  rejected and simply produce odd totals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Set, Tuple, Union

from cart import Cart
from catalog import Barcode, Product
from receipt import create_active_receipt, create_receipt, format_cents

if TYPE_CHECKING:
    from customers import Customer

logger = logging.getLogger(__name__)


class TransactionKind(Enum):
    FLAT = "flat"
    CATEGORISED = "categorised"
    SPECIAL_SALE = "special_sale"

    @property
    def is_categorised(self) -> bool:
        return self is not TransactionKind.FLAT


@dataclass(frozen=True)
class ActiveState:
    cart: Cart


@dataclass(frozen=True)
class FinalisedState:
    purchases: Tuple[Product, ...]


TransactionState = Union[ActiveState, FinalisedState]


class Transaction:
    """One shopping interaction for a single customer."""

    def __init__(
        self,
        customer: "Customer",
        kind: TransactionKind = TransactionKind.FLAT,
        discounts: Optional[Mapping[Barcode, int]] = None,
    ) -> None:
        if discounts and kind is not TransactionKind.SPECIAL_SALE:
            raise ValueError("Discounts can only be given to a special sale transaction.")
        self._customer = customer
        self._kind = kind
        self._discounts: Dict[Barcode, int] = dict(discounts or {})
        self._state: TransactionState = ActiveState(cart=customer.cart)

    @classmethod
    def categorised(cls, customer: "Customer") -> "Transaction":
        return cls(customer, TransactionKind.CATEGORISED)

    @classmethod
    def special_sale(cls, customer: "Customer", discounts: Optional[Mapping[Barcode, int]] = None) -> "Transaction":
        return cls(customer, TransactionKind.SPECIAL_SALE, discounts)

    # ---- State ----

    @property
    def kind(self) -> TransactionKind:
        return self._kind

    @property
    def state(self) -> TransactionState:
        return self._state

    def get_associated_customer(self) -> "Customer":
        return self._customer

    def is_finalised(self) -> bool:
        return isinstance(self._state, FinalisedState)

    def finalise(self) -> None:
        """Freeze the purchases and empty the customer's cart.

        Calling this on an already finalised transaction does nothing.
        """
        state = self._state
        if isinstance(state, FinalisedState):
            return
        self._state = FinalisedState(purchases=tuple(state.cart.get_contents()))
        state.cart.set_empty()
        logger.debug(
            "Transaction finalised",
            extra={"customer": self._customer.name, "transaction_kind": self._kind.value},
        )

    def get_purchases(self) -> List[Product]:
        state = self._state
        if isinstance(state, FinalisedState):
            return list(state.purchases)
        return state.cart.get_contents()

    # ---- Grouping ----

    def get_purchases_by_type(self) -> Dict[Barcode, List[Product]]:
        """Purchases grouped by barcode, keyed in barcode declaration order."""
        grouped: Dict[Barcode, List[Product]] = {}
        purchases = self.get_purchases()
        for barcode in Barcode:
            matching = [p for p in purchases if p.barcode is barcode]
            if matching:
                grouped[barcode] = matching
        return grouped

    def get_purchased_types(self) -> Set[Barcode]:
        return {p.barcode for p in self.get_purchases()}

    def get_purchase_quantity(self, barcode: Barcode) -> int:
        return sum(1 for p in self.get_purchases() if p.barcode is barcode)

    # ---- Pricing ----

    def get_discount_amount(self, barcode: Barcode) -> int:
        """Discount percentage for ``barcode``; 0 when none was configured."""
        return self._discounts.get(barcode, 0)

    def _undiscounted_subtotal(self, barcode: Barcode) -> int:
        return barcode.base_price * self.get_purchase_quantity(barcode)

    def get_purchase_subtotal(self, barcode: Barcode) -> int:
        subtotal = self._undiscounted_subtotal(barcode)
        if self._kind is TransactionKind.SPECIAL_SALE:
            subtotal -= subtotal * self.get_discount_amount(barcode) // 100
        return subtotal

    def get_total(self) -> int:
        if self._kind is TransactionKind.SPECIAL_SALE:
            return sum(self.get_purchase_subtotal(b) for b in self.get_purchased_types())
        return sum(p.base_price for p in self.get_purchases())

    def get_total_saved(self) -> int:
        if self._kind is not TransactionKind.SPECIAL_SALE:
            return 0
        return sum(
            self._undiscounted_subtotal(b) * self.get_discount_amount(b) // 100
            for b in self.get_purchased_types()
        )

    # ---- Receipts ----

    def get_receipt(self) -> str:
        if not self.is_finalised():
            return create_active_receipt()
        if self._kind is TransactionKind.FLAT:
            return self._flat_receipt()
        return self._categorised_receipt()

    def _flat_receipt(self) -> str:
        entries = [[p.display_name, format_cents(p.base_price)] for p in self.get_purchases()]
        return create_receipt(
            ["Item", "Price"],
            entries,
            format_cents(self.get_total()),
            self._customer.name,
        )

    def _categorised_receipt(self) -> str:
        entries: List[List[str]] = []
        for barcode, products in self.get_purchases_by_type().items():
            entry = [
                barcode.display_name,
                str(len(products)),
                format_cents(products[0].base_price),
                format_cents(self.get_purchase_subtotal(barcode)),
            ]
            discount = self.get_discount_amount(barcode)
            if self._kind is TransactionKind.SPECIAL_SALE and discount > 0:
                entry.append(f"Discount applied! {discount}% off {barcode.display_name}")
            entries.append(entry)

        saved = self.get_total_saved()
        return create_receipt(
            ["Item", "Qty", "Price (ea.)", "Subtotal"],
            entries,
            format_cents(self.get_total()),
            self._customer.name,
            format_cents(saved) if saved > 0 else None,
        )

    def __str__(self) -> str:
        status = "Finalised" if self.is_finalised() else "Active"
        products = ", ".join(str(p) for p in self.get_purchases())
        text = (
            f"Transaction {{Customer: {self._customer.name}"
            f" | Phone Number: {self._customer.phone_number}"
            f" | Address: {self._customer.address}"
            f", Status: {status}, Associated Products: [{products}]"
        )
        if self._kind is TransactionKind.SPECIAL_SALE:
            discounts = ", ".join(f"{b.identifier}={d}" for b, d in self._discounts.items())
            text += f", Discounts: {{{discounts}}}"
        return text + "}"


def create_transaction(
    kind: TransactionKind,
    customer: "Customer",
    discounts: Optional[Mapping[Barcode, int]] = None,
) -> Transaction:
    if kind is TransactionKind.SPECIAL_SALE:
        return Transaction.special_sale(customer, discounts)
    return Transaction(customer, kind)
