"""Checkout: turn the cart into an order record."""

from __future__ import annotations

import logging

from stylecart.cart.store import CartStore
from stylecart.catalog.gateway import CatalogGateway
from stylecart.metrics.prometheus_exporter import orders_placed_total

logger = logging.getLogger(__name__)


class EmptyCartError(ValueError):
    """Raised when checkout is attempted with nothing in the cart."""


async def place_order(cart: CartStore, gateway: CatalogGateway, user_id: str) -> str | None:
    """Send the cart to the backend as an order. No payment is taken.

    Ordered quantities leave the cart only when the backend returned an order
    id, so a failed call can simply be retried. Units added while the request
    was in flight stay in the cart.
    """

    lines = cart.lines
    if not lines:
        raise EmptyCartError("Cart is empty.")
    total = cart.total()
    order_id = await gateway.create_order(user_id, lines, total)
    if order_id is None:
        logger.warning("Order for user %s was not accepted by the backend", user_id)
        return None
    orders_placed_total.inc()
    logger.info(
        "Placed order %s for user %s: %s units, total %s",
        order_id,
        user_id,
        sum(line.quantity for line in lines),
        total,
    )
    for line in lines:
        cart.update_quantity(line.product_id, cart.quantity_of(line.product_id) - line.quantity)
    return order_id
