from scancart.store.cart import CartLine, CartStore

__all__ = ["CartLine", "CartStore"]
