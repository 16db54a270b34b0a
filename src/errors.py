"""Exceptions raised by the farm shop bookkeeping core.

Lower-level components (inventory, transaction manager, address book)
raise these; the command layer in :mod:`cli` catches them and turns
them into user-facing messages.
"""


class FarmError(Exception):
    """Base class for every recoverable farm shop error."""


class InvalidStockRequestError(FarmError):
    """The inventory variant in use cannot satisfy the request.

    Raised for example when a basic inventory is asked to stock more than
    one product at a time.
    """


class UnknownProductError(InvalidStockRequestError):
    """A product identifier did not match any known barcode."""


class FailedTransactionError(FarmError):
    """A transaction operation was attempted in the wrong state."""


class CustomerNotFoundError(FarmError):
    """No customer with the requested name and phone number exists."""


class DuplicateCustomerError(FarmError):
    """A customer with the same name and phone number is already saved."""
