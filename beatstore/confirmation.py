from . import store
from .tokens import verify_order_token


def reveal_order(order_id, beat_id, token, secret):
    """Return the order if `token` grants access to it, else None.

    The token must be valid for exactly this (order_id, beat_id) pair, the
    order must exist, and it must be an order for that beat. Callers get the
    same None whichever check failed.
    """
    if not (order_id and beat_id and token):
        return None
    if verify_order_token(token, order_id, beat_id, secret) is None:
        return None
    order = store.get_order(order_id)
    if order is None or order.beat_id != beat_id:
        return None
    return order
