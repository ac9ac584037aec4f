"""Session shopping cart with subscription support."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Callable

from stylecart.catalog.models import Product

if TYPE_CHECKING:
    from stylecart.catalog.gateway import CatalogGateway

logger = logging.getLogger(__name__)

CartListener = Callable[["CartStore"], None]


@dataclass(slots=True)
class CartLine:
    """One product in the cart.

    ``product`` is a display copy taken when the line was added or last
    refreshed. Only ``product_id`` and ``quantity`` carry cart semantics.
    """

    product_id: str
    quantity: int
    product: Product | None = None

    @property
    def subtotal(self) -> Decimal:
        if self.product is None:
            return Decimal("0")
        return self.product.price * self.quantity


class CartStore:
    """Single owner of a shopper's cart for one session.

    Every mutation is a plain synchronous method, so on an asyncio loop each one
    completes before the next dispatched action runs. Listeners are called
    after each mutation that changed state.
    """

    def __init__(self) -> None:
        # dict preserves first-insertion order, which is the display order
        self._lines: dict[str, CartLine] = {}
        self._listeners: list[CartListener] = []

    @property
    def lines(self) -> tuple[CartLine, ...]:
        """Snapshot of current lines in the order products were first added."""

        return tuple(
            CartLine(product_id=line.product_id, quantity=line.quantity, product=line.product)
            for line in self._lines.values()
        )

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines

    def quantity_of(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a change listener and return a callable that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def add_item(self, product: Product) -> None:
        """Add one unit of ``product``; stock is not enforced here."""

        line = self._lines.get(product.id)
        if line is None:
            self._lines[product.id] = CartLine(product_id=product.id, quantity=1, product=product)
        else:
            line.quantity += 1
            line.product = product
        logger.debug("Cart add %s -> qty %s", product.id, self._lines[product.id].quantity)
        self._notify()

    def remove_item(self, product_id: str) -> None:
        """Drop the line for ``product_id``; unknown ids are ignored."""

        if self._lines.pop(product_id, None) is None:
            return
        logger.debug("Cart remove %s", product_id)
        self._notify()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set an absolute quantity. Zero or less removes the line."""

        if quantity <= 0:
            self.remove_item(product_id)
            return
        line = self._lines.get(product_id)
        if line is None or line.quantity == quantity:
            return
        line.quantity = quantity
        logger.debug("Cart set %s -> qty %s", product_id, quantity)
        self._notify()

    def clear(self) -> None:
        if not self._lines:
            return
        self._lines.clear()
        self._notify()

    def total(self) -> Decimal:
        """Sum of quantity times price, recomputed on every call."""

        return sum((line.subtotal for line in self._lines.values()), Decimal("0"))

    def count(self) -> int:
        """Number of units in the cart, used for the header badge."""

        return sum(line.quantity for line in self._lines.values())

    async def refresh(self, gateway: CatalogGateway) -> None:
        """Reload display copies of products from the catalog.

        Ids and quantities are never touched; products the catalog no longer
        returns keep their previous copy.
        """

        product_ids = list(self._lines)
        if not product_ids:
            return
        fresh = {product.id: product for product in await gateway.get_products(product_ids)}
        changed = False
        # lines may have been removed while the request was in flight
        for product_id, product in fresh.items():
            line = self._lines.get(product_id)
            if line is not None and line.product != product:
                line.product = product
                changed = True
        if changed:
            self._notify()


class CartRegistry:
    """Lazily creates one cart per session id."""

    def __init__(self, on_change: Callable[[int], None] | None = None) -> None:
        self._carts: dict[str, CartStore] = {}
        self._on_change = on_change

    def get(self, session_id: str) -> CartStore:
        cart = self._carts.get(session_id)
        if cart is None:
            cart = CartStore()
            self._carts[session_id] = cart
            if self._on_change:
                self._on_change(len(self._carts))
        return cart

    def discard(self, session_id: str) -> None:
        if self._carts.pop(session_id, None) is not None and self._on_change:
            self._on_change(len(self._carts))

    def __len__(self) -> int:
        return len(self._carts)
