"""Customers and the shop's address book."""

from __future__ import annotations

import logging
from typing import List

from cart import Cart
from errors import CustomerNotFoundError, DuplicateCustomerError

logger = logging.getLogger(__name__)


class Customer:
    """A registered shopper.

    Identity is the ``(name, phone_number)`` pair.  The fields stay
    mutable; changing them after the customer is saved does not re-index
    the address book.
    """

    def __init__(self, name: str, phone_number: int, address: str) -> None:
        self.name = name
        self.phone_number = phone_number
        self.address = address
        self._cart = Cart()

    @property
    def cart(self) -> Cart:
        return self._cart

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Customer):
            return NotImplemented
        return self.name == other.name and self.phone_number == other.phone_number

    def __hash__(self) -> int:
        return hash((self.name, self.phone_number))

    def __str__(self) -> str:
        return f"Name: {self.name} | Phone Number: {self.phone_number} | Address: {self.address}"

    def __repr__(self) -> str:
        return f"Customer(name={self.name!r}, phone_number={self.phone_number!r})"


class AddressBook:
    """Flat list of customers with no duplicate ``(name, phone)`` pairs."""

    def __init__(self) -> None:
        self._customers: List[Customer] = []

    def add_customer(self, customer: Customer) -> None:
        if self.contains_customer(customer):
            raise DuplicateCustomerError(f"Duplicate customer: {customer}")
        self._customers.append(customer)
        logger.info("Customer saved", extra={"customer": customer.name})

    def contains_customer(self, customer: Customer) -> bool:
        return customer in self._customers

    def get_all_records(self) -> List[Customer]:
        return list(self._customers)

    def get_customer(self, name: str, phone_number: int) -> Customer:
        """Return the customer saved under ``name`` and ``phone_number``.

        Raises:
            CustomerNotFoundError: if no such customer has been saved.
        """
        for customer in self._customers:
            if customer.name == name and customer.phone_number == phone_number:
                return customer
        raise CustomerNotFoundError(f"Customer not found: {name}, {phone_number}")

    def __len__(self) -> int:
        return len(self._customers)
