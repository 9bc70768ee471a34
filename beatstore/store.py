"""Database access for the beat catalog and the order ledger.

The order ledger is insert-only. The order id is the primary key, so a second
capture of the same PayPal order is rejected by the database rather than by
anything in this process.
"""
from sqlalchemy.exc import IntegrityError

from app import db
from .exceptions import DuplicateOrderError
from .models import Beat, Order


def list_beats():
    """Return all beats, newest first."""
    return Beat.query.order_by(Beat.created_at.desc()).all()


def get_beat(beat_id):
    return db.session.get(Beat, beat_id)


def get_order(order_id):
    if not order_id:
        return None
    return db.session.get(Order, order_id)


def record_order(**fields):
    """Insert a new order and commit.

    Raises DuplicateOrderError when the order id is already recorded.
    """
    order_id = fields.get('order_id')
    # fast path only; concurrent captures are caught by the primary key below
    if get_order(order_id) is not None:
        raise DuplicateOrderError(f'Order {order_id} has already been recorded')

    order = Order(**fields)
    db.session.add(order)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        if get_order(order_id) is not None:
            raise DuplicateOrderError(f'Order {order_id} has already been recorded')
        raise
    return order


def add_beat(**fields):
    beat = Beat(**fields)
    db.session.add(beat)
    db.session.commit()
    return beat
