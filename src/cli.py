"""
Command-line interface for the farm shop.

This module wires the ``Farm`` class into an interactive text menu.  The
user first picks a mode (inventory, address book, sales or history) and
then issues commands inside it.  All shop errors are caught here and
printed as messages; nothing escapes the loop.  Keeping the CLI separate
from the business logic keeps the latter testable and free from I/O code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional, Sequence

import logging_config
from catalog import Barcode, Quality, parse_barcode, parse_quality
from customers import Customer
from errors import (
    CustomerNotFoundError,
    DuplicateCustomerError,
    FailedTransactionError,
    FarmError,
    InvalidStockRequestError,
)
from farm import Farm
from metrics import generate_metrics_text
from receipt import format_cents
from settings import Settings
from transaction import TransactionKind

logger = logging.getLogger(__name__)

_TRANSACTION_FLAGS: Dict[str, TransactionKind] = {
    "": TransactionKind.FLAT,
    "-c": TransactionKind.CATEGORISED,
    "-categorised": TransactionKind.CATEGORISED,
    "-s": TransactionKind.SPECIAL_SALE,
    "-specialsale": TransactionKind.SPECIAL_SALE,
}


class FarmShell:
    """Menu-driven front end for a :class:`Farm`.

    ``input_fn`` and ``output_fn`` default to :func:`input` and
    :func:`print`; tests pass scripted replacements.
    """

    def __init__(
        self,
        farm: Farm,
        input_fn: Optional[Callable[[str], str]] = None,
        output_fn: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.farm = farm
        self._input = input_fn or input
        self._output = output_fn or print

    @property
    def fancy(self) -> bool:
        return self.farm.inventory.supports_quantities

    def say(self, message: str) -> None:
        self._output(message)

    def ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _command(self, prompt: str) -> List[str]:
        tokens = self.ask(prompt).lower().split()
        return tokens or [""]

    # ---- Main loop ----

    def run(self) -> None:
        self.say("-*- WELCOME TO THE FARM SHOP -*-")
        modes = {
            "inventory": self.inventory_mode,
            "address": self.address_mode,
            "sales": self.sales_mode,
            "history": self.history_mode,
        }
        while True:
            choice = self._command("Mode (inventory/address/sales/history/q): ")[0]
            if choice == "q":
                self.say("Goodbye!")
                break
            handler = modes.get(choice)
            if handler is None:
                self.say("Invalid option. Please try again.")
                continue
            handler()

    # ---- Inventory mode ----

    def inventory_mode(self) -> None:
        while True:
            cmd = self._command("inventory> ")
            if cmd[0] == "q":
                return
            if cmd[0] == "add":
                self.handle_inventory_add(cmd)
            elif cmd[0] == "list":
                stock = self.farm.get_all_stock()
                if not stock:
                    self.say("Inventory is empty.")
                for product in stock:
                    self.say(str(product))
            else:
                self.say("Commands: add <product> [quantity] [quality] | add -o | list | q")

    def handle_inventory_add(self, cmd: Sequence[str]) -> None:
        if len(cmd) == 2 and cmd[1] == "-o":
            self._list_product_options()
            return
        if len(cmd) not in (2, 3, 4):
            self.say("Incorrect number of arguments.")
            return
        quantity = 1
        quality = Quality.REGULAR
        try:
            # optional trailing arguments: a quantity, a quality, or both
            for arg in cmd[2:]:
                if arg.lstrip("-").isdigit():
                    if not self.fancy:
                        self.say("Quantities are not supported by this inventory.")
                        return
                    quantity = int(arg)
                else:
                    quality = parse_quality(arg)
            barcode = parse_barcode(cmd[1])
            self.farm.stock_product(barcode, quality, quantity)
        except (InvalidStockRequestError, ValueError) as e:
            self.say(f"Product could not be added: {e}")
        else:
            self.say("Product added to inventory.")

    # ---- Address book mode ----

    def address_mode(self) -> None:
        while True:
            cmd = self._command("address> ")
            if cmd[0] == "q":
                return
            if cmd[0] == "add":
                self.create_customer()
            elif cmd[0] == "list":
                customers = self.farm.get_all_customers()
                if not customers:
                    self.say("No customers saved.")
                for customer in customers:
                    self.say(str(customer))
            else:
                self.say("Commands: add | list | q")

    def _ask_phone(self) -> Optional[int]:
        try:
            return int(self.ask("Customer phone number: "))
        except ValueError:
            self.say("Please enter a valid phone number.")
            return None

    def create_customer(self) -> None:
        name = self.ask("Customer name: ")
        phone = self._ask_phone()
        if phone is None:
            return
        address = self.ask("Customer address: ")
        try:
            self.farm.save_customer(Customer(name, phone, address))
        except DuplicateCustomerError:
            self.say("A customer with that name and phone number already exists.")
        else:
            self.say("Customer created successfully!")

    # ---- Sales mode ----

    def sales_mode(self) -> None:
        while True:
            cmd = self._command("sales> ")
            if cmd[0] == "q":
                if self.farm.transaction_manager.has_ongoing_transaction():
                    self.say(
                        "You have a transaction in progress. Please check out before "
                        "quitting sales mode or your inventory may be corrupted."
                    )
                    continue
                return
            if cmd[0] == "start":
                self.start_transaction(cmd)
            elif cmd[0] == "add":
                self.handle_sales_add(cmd)
            elif cmd[0] == "checkout":
                self.handle_checkout()
            else:
                self.say("Commands: start [-c|-s] | add <product> [quantity] | checkout | q")

    def start_transaction(self, cmd: Sequence[str]) -> None:
        if len(cmd) > 2:
            self.say("Incorrect number of arguments.")
            return
        kind = _TRANSACTION_FLAGS.get(cmd[1] if len(cmd) == 2 else "")
        if kind is None:
            self.say("Unknown transaction type. Use -c (categorised) or -s (special sale).")
            return
        name = self.ask("Customer name: ")
        phone = self._ask_phone()
        if phone is None:
            return
        try:
            customer = self.farm.get_customer(name, phone)
            discounts = self.ask_discounts() if kind is TransactionKind.SPECIAL_SALE else None
            self.farm.start_transaction(self.farm.create_transaction(kind, customer, discounts))
        except CustomerNotFoundError:
            self.say("Customer not found.")
        except FailedTransactionError:
            self.say("Transaction could not be started: a transaction is already in progress.")
        else:
            self.say("Transaction started.")

    def ask_discounts(self) -> Dict[Barcode, int]:
        """Prompt for per-product discounts until ``q`` or a negative value."""
        self.say("Entering Discount Setting!")
        discounts: Dict[Barcode, int] = {}
        while True:
            name = self.ask("Product name (q to finish): ").lower()
            if name == "q":
                break
            try:
                barcode = parse_barcode(name)
            except InvalidStockRequestError:
                self.say("Please enter a valid product name.")
                continue
            try:
                discount = int(self.ask("Discount (%): "))
            except ValueError:
                self.say("Please enter a whole number.")
                continue
            if discount < 0:
                break
            discounts[barcode] = discount
        summary = ", ".join(f"{b.identifier}={d}%" for b, d in discounts.items())
        self.say(f"Discounts entered as follows: {{{summary}}}")
        return discounts

    def handle_sales_add(self, cmd: Sequence[str]) -> None:
        if len(cmd) == 2 and cmd[1] == "-o":
            self._list_product_options()
            return
        if len(cmd) not in (2, 3):
            self.say("Incorrect number of arguments.")
            return
        quantity: Optional[int] = None
        if len(cmd) == 3:
            if not self.fancy:
                self.say("Quantities are not supported by this inventory.")
                return
            try:
                quantity = int(cmd[2])
            except ValueError:
                self.say("Please enter a valid quantity.")
                return
        try:
            added = self.farm.add_to_cart(parse_barcode(cmd[1]), quantity)
        except InvalidStockRequestError:
            self.say("Please enter a valid product name.")
            return
        except FarmError as e:
            self.say(f"Product could not be added to transaction: {e}")
            return
        requested = 1 if quantity is None else quantity
        if added == 0:
            self.say("Sorry, that's out of stock!")
        elif added < requested:
            self.say(f"We only had {added} {cmd[1]} to give you :(")
        else:
            self.say("Item/s added to cart")

    def handle_checkout(self) -> None:
        try:
            purchased = self.farm.checkout()
        except FailedTransactionError as e:
            self.say(f"Checkout request failed: {e}")
            return
        if purchased:
            self.say(self.farm.get_last_receipt() or "")
        else:
            self.say("Thanks for stopping by!")

    # ---- History mode ----

    def history_mode(self) -> None:
        history = self.farm.transaction_history
        while True:
            cmd = self._command("history> ")
            if cmd[0] == "q":
                return
            if cmd[0] == "stats":
                self.show_stats(cmd)
            elif cmd[0] == "last":
                receipt = self.farm.get_last_receipt()
                self.say(receipt if receipt is not None else "No transactions made!")
            elif cmd[0] == "grossing":
                best = history.get_highest_grossing_transaction()
                self.say(best.get_receipt() if best is not None else "No transactions made!")
            elif cmd[0] == "popular":
                self.say(f"{history.get_most_popular_product().display_name} is the most popular!!")
            elif cmd[0] == "list":
                transactions = history.get_all_transactions()
                if not transactions:
                    self.say("No transactions made!")
                for transaction in transactions:
                    self.say(str(transaction))
            elif cmd[0] == "metrics":
                self.say(generate_metrics_text())
            else:
                self.say("Commands: stats [product] | last | grossing | popular | list | metrics | q")

    def show_stats(self, cmd: Sequence[str]) -> None:
        history = self.farm.transaction_history
        lines = [
            "|--------------------------",
            "|     Stats for all",
            f"| Total Transactions:  {history.get_total_transactions_made()}",
            f"| Average Sale Price:  ${history.get_average_spend_per_visit() / 100:.2f}",
        ]
        if len(cmd) == 2:
            try:
                barcode = parse_barcode(cmd[1])
            except InvalidStockRequestError:
                self.say("Please enter a valid product name.")
                return
            lines += [
                "|--------------------------",
                f"|     Stats for {barcode.display_name}",
                f"| Total Products Sold: {history.get_total_products_sold(barcode)}",
                f"| Gross Earning        {format_cents(history.get_gross_earnings(barcode))}",
                f"| Average Discount:    {history.get_average_product_discount(barcode):.0f}%",
            ]
        else:
            lines += [
                f"| Total Products Sold: {history.get_total_products_sold()}",
                f"| Gross Earning        {format_cents(history.get_gross_earnings())}",
            ]
        lines.append("|--------------------------")
        self.say("\n".join(lines))

    def _list_product_options(self) -> None:
        for barcode in Barcode:
            self.say(barcode.identifier)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="farm-shop", description="Interactive farm shop.")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--fancy", dest="fancy", action="store_true", default=None,
                       help="use the bulk inventory (quantities allowed)")
    group.add_argument("--basic", dest="fancy", action="store_false",
                       help="use the single-unit inventory")
    parser.add_argument("--log-dir", default=None, help="directory for farm_shop.log")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env().with_overrides(
        fancy_inventory=args.fancy,
        log_dir=args.log_dir,
        log_level=args.log_level.upper() if args.log_level else None,
    )
    logging_config.configure_logging(settings.log_dir, settings.numeric_log_level, console=False)
    logger.info("Shop opened", extra={"extra": {"fancy_inventory": settings.fancy_inventory}})
    try:
        FarmShell(Farm.from_settings(settings)).run()
    except (KeyboardInterrupt, EOFError):
        logger.info("Shop closed by interrupt")
        print("\nInterrupted by user. Exiting.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
