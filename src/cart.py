"""A customer's shopping cart."""

from typing import List

from catalog import Product


class Cart:
    """Ordered buffer of products reserved for a customer's current purchase.

    Products are only ever appended; the cart is emptied in one go when
    the owning transaction is finalised.
    """

    def __init__(self) -> None:
        self._contents: List[Product] = []

    def add_product(self, product: Product) -> None:
        self._contents.append(product)

    def get_contents(self) -> List[Product]:
        return list(self._contents)

    def set_empty(self) -> None:
        self._contents.clear()

    def is_empty(self) -> bool:
        return not self._contents

    def __len__(self) -> int:
        return len(self._contents)
