"""Transaction bookkeeping: the open transaction and the sales log."""

from __future__ import annotations

import logging
from typing import List, Optional

from catalog import Barcode, Product
from errors import FailedTransactionError
from transaction import Transaction, TransactionKind

logger = logging.getLogger(__name__)


class TransactionManager:
    """Holds at most one ongoing transaction.

    A single instance is created per shop session and passed to whoever
    needs it; there is no module-level state.
    """

    def __init__(self) -> None:
        self._ongoing: Optional[Transaction] = None

    def has_ongoing_transaction(self) -> bool:
        return self._ongoing is not None

    @property
    def ongoing_transaction(self) -> Optional[Transaction]:
        return self._ongoing

    def set_ongoing_transaction(self, transaction: Transaction) -> None:
        if self._ongoing is not None:
            raise FailedTransactionError("A transaction is already in progress.")
        self._ongoing = transaction

    def register_pending_purchase(self, product: Product) -> None:
        """Place ``product`` in the ongoing transaction's customer cart."""
        if self._ongoing is None:
            raise FailedTransactionError("No ongoing transaction to register purchase.")
        if self._ongoing.is_finalised():
            raise FailedTransactionError("The ongoing transaction has already been finalised.")
        self._ongoing.get_associated_customer().cart.add_product(product)

    def close_current_transaction(self) -> Transaction:
        """Finalise the ongoing transaction and hand it back.

        Raises:
            FailedTransactionError: if there is no ongoing transaction.
        """
        if self._ongoing is None:
            raise FailedTransactionError("No ongoing transaction to close.")
        transaction = self._ongoing
        transaction.finalise()
        transaction.get_associated_customer().cart.set_empty()
        self._ongoing = None
        return transaction


class TransactionHistory:
    """Append-only log of finalised transactions.

    All statistics are computed by scanning the whole log on demand.
    Amounts are integer cents.
    """

    def __init__(self) -> None:
        self._transactions: List[Transaction] = []

    def record_transaction(self, transaction: Transaction) -> None:
        # Active transactions are ignored rather than rejected
        if transaction.is_finalised():
            self._transactions.append(transaction)

    def get_last_transaction(self) -> Optional[Transaction]:
        return self._transactions[-1] if self._transactions else None

    def get_all_transactions(self) -> List[Transaction]:
        return list(self._transactions)

    def get_gross_earnings(self, barcode: Optional[Barcode] = None) -> int:
        """Total takings, or the base-price takings for one barcode.

        The per-barcode figure sums the base price of every unit sold and
        ignores special sale discounts.
        """
        if barcode is None:
            return sum(t.get_total() for t in self._transactions)
        return sum(
            p.base_price
            for t in self._transactions
            for p in t.get_purchases()
            if p.barcode is barcode
        )

    def get_total_transactions_made(self) -> int:
        return len(self._transactions)

    def get_total_products_sold(self, barcode: Optional[Barcode] = None) -> int:
        if barcode is None:
            return sum(len(t.get_purchases()) for t in self._transactions)
        return sum(
            1
            for t in self._transactions
            for p in t.get_purchases()
            if p.barcode is barcode
        )

    def get_highest_grossing_transaction(self) -> Optional[Transaction]:
        """Transaction with the largest total; the earliest one wins ties."""
        best: Optional[Transaction] = None
        for transaction in self._transactions:
            if best is None or transaction.get_total() > best.get_total():
                best = transaction
        return best

    def get_most_popular_product(self) -> Barcode:
        """Barcode with the most units sold.

        Returns ``Barcode.EGG`` when nothing has been sold.  Ties go to the
        barcode declared first.
        """
        most_popular = Barcode.EGG
        best_count = 0
        for barcode in Barcode:
            count = self.get_total_products_sold(barcode)
            if count > best_count:
                best_count = count
                most_popular = barcode
        return most_popular

    def get_average_spend_per_visit(self) -> float:
        if not self._transactions:
            return 0.0
        return self.get_gross_earnings() / self.get_total_transactions_made()

    def get_average_product_discount(self, barcode: Barcode) -> float:
        """Mean discount percentage per unit of ``barcode`` sold on special.

        Only units sold in special sale transactions with a non-zero
        discount for ``barcode`` count.  Returns 0.0 when there are none.
        """
        weighted = 0
        units = 0
        for transaction in self._transactions:
            if transaction.kind is not TransactionKind.SPECIAL_SALE:
                continue
            discount = transaction.get_discount_amount(barcode)
            if discount > 0:
                quantity = transaction.get_purchase_quantity(barcode)
                weighted += discount * quantity
                units += quantity
        if units == 0:
            return 0.0
        return weighted / units
