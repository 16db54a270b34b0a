# src/farm.py
from __future__ import annotations

import logging
from typing import List, Mapping, Optional

from catalog import Barcode, Product, Quality
from customers import AddressBook, Customer
from errors import FailedTransactionError, InvalidStockRequestError
from inventory import BasicInventory, FancyInventory, Inventory
from metrics import (
    BASKET_SIZE,
    CHECKOUTS_TOTAL,
    PRODUCTS_SOLD_TOTAL,
    PRODUCTS_STOCKED_TOTAL,
    TRANSACTION_OPEN,
)
from sales import TransactionHistory, TransactionManager
from settings import Settings
from transaction import Transaction, TransactionKind, create_transaction

logger = logging.getLogger(__name__)


class Farm:
    """
    Business logic for the farm shop. Ties together the inventory, the
    address book, the open transaction and the sales history, and exposes
    the operations the command layer needs.

    Errors from the components (see :mod:`errors`) propagate unchanged; the
    command layer turns them into messages.
    """

    def __init__(self, inventory: Inventory, address_book: Optional[AddressBook] = None) -> None:
        self._inventory = inventory
        self._address_book = address_book if address_book is not None else AddressBook()
        self._transaction_manager = TransactionManager()
        self._transaction_history = TransactionHistory()

    @classmethod
    def from_settings(cls, settings: Settings) -> "Farm":
        inventory = FancyInventory() if settings.fancy_inventory else BasicInventory()
        return cls(inventory)

    # ---- Components ----

    @property
    def inventory(self) -> Inventory:
        return self._inventory

    @property
    def transaction_manager(self) -> TransactionManager:
        return self._transaction_manager

    @property
    def transaction_history(self) -> TransactionHistory:
        return self._transaction_history

    # ---- Inventory ----

    def stock_product(self, barcode: Barcode, quality: Quality = Quality.REGULAR, quantity: int = 1) -> None:
        """Add ``quantity`` units of ``barcode`` at ``quality``.

        Raises:
            ValueError: if ``quantity`` is below 1.
            InvalidStockRequestError: if ``quantity`` is above 1 and the
                inventory cannot stock in bulk.
        """
        if quantity < 1:
            raise ValueError("Quantity must be at least 1.")
        if quantity > 1 and not self._inventory.supports_quantities:
            raise InvalidStockRequestError(
                "Only a fancy inventory supports adding more than one product at a time."
            )
        if quantity == 1:
            self._inventory.add_product(barcode, quality)
        else:
            self._inventory.add_product(barcode, quality, quantity)
        PRODUCTS_STOCKED_TOTAL.inc(quantity, product=barcode.identifier)
        logger.info(
            "Stock added",
            extra={"extra": {"product": barcode.identifier, "quality": quality.value, "quantity": quantity}},
        )

    def get_all_stock(self) -> List[Product]:
        return self._inventory.get_all_products()

    # ---- Customers ----

    def save_customer(self, customer: Customer) -> None:
        self._address_book.add_customer(customer)

    def get_customer(self, name: str, phone_number: int) -> Customer:
        return self._address_book.get_customer(name, phone_number)

    def get_all_customers(self) -> List[Customer]:
        return self._address_book.get_all_records()

    # ---- Sales ----

    def create_transaction(
        self,
        kind: TransactionKind,
        customer: Customer,
        discounts: Optional[Mapping[Barcode, int]] = None,
    ) -> Transaction:
        return create_transaction(kind, customer, discounts)

    def start_transaction(self, transaction: Transaction) -> None:
        if self._transaction_manager.has_ongoing_transaction():
            raise FailedTransactionError("A transaction is already ongoing.")
        self._transaction_manager.set_ongoing_transaction(transaction)
        TRANSACTION_OPEN.set(1)
        logger.info(
            "Transaction started",
            extra={
                "customer": transaction.get_associated_customer().name,
                "transaction_kind": transaction.kind.value,
            },
        )

    def add_to_cart(self, barcode: Barcode, quantity: Optional[int] = None) -> int:
        """Move up to ``quantity`` units from stock into the open cart.

        Returns the number of units actually reserved: 0 when out of
        stock, fewer than requested when only part is available.

        Raises:
            FailedTransactionError: if no transaction is open, or the
                inventory cannot hand out more than one unit at a time.
        """
        self._check_transaction_ongoing()
        if quantity is None:
            products = self._inventory.remove_product(barcode)
        else:
            products = self._inventory.remove_product(barcode, quantity)
        for product in products:
            self._transaction_manager.register_pending_purchase(product)
        if not products:
            logger.warning("Out of stock", extra={"extra": {"product": barcode.identifier}})
        return len(products)

    def checkout(self) -> bool:
        """Close the open transaction.

        Returns True and records the transaction if anything was bought;
        returns False (and records nothing) for an empty cart.
        """
        self._check_transaction_ongoing()
        transaction = self._transaction_manager.close_current_transaction()
        TRANSACTION_OPEN.set(0)
        purchases = transaction.get_purchases()
        customer = transaction.get_associated_customer().name
        if not purchases:
            CHECKOUTS_TOTAL.inc(outcome="empty")
            logger.info("Checkout with empty cart", extra={"customer": customer})
            return False

        self._transaction_history.record_transaction(transaction)
        CHECKOUTS_TOTAL.inc(outcome="recorded")
        BASKET_SIZE.observe(len(purchases), kind=transaction.kind.value)
        for product in purchases:
            PRODUCTS_SOLD_TOTAL.inc(product=product.barcode.identifier)
        logger.info(
            "Transaction recorded",
            extra={
                "customer": customer,
                "transaction_kind": transaction.kind.value,
                "extra": {"units": len(purchases), "total_cents": transaction.get_total()},
            },
        )
        return True

    def get_last_receipt(self) -> Optional[str]:
        last = self._transaction_history.get_last_transaction()
        return last.get_receipt() if last is not None else None

    def _check_transaction_ongoing(self) -> None:
        if not self._transaction_manager.has_ongoing_transaction():
            raise FailedTransactionError("No customer has started shopping.")
