"""Shopping cart state."""

from .store import CartLine, CartRegistry, CartStore

__all__ = ["CartLine", "CartRegistry", "CartStore"]
