from .exceptions import ValidationError
from .tiers import PurchaseTier


def _present(value):
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def validate_create_order(beat_id, total_cents, description):
    """Checks the order creation input and returns the amount as an int."""
    if not (_present(beat_id) and _present(total_cents) and _present(description)):
        raise ValidationError('Missing required fields')
    if isinstance(total_cents, bool):
        raise ValidationError('totalCents must be a positive integer')
    try:
        cents = int(total_cents)
    except (TypeError, ValueError):
        raise ValidationError('totalCents must be a positive integer')
    if cents != total_cents and str(cents) != str(total_cents).strip():
        # rejects 12.5 and "12.50"
        raise ValidationError('totalCents must be a positive integer')
    if cents <= 0:
        raise ValidationError('totalCents must be a positive integer')
    return cents


def validate_capture(order_id, beat_id, purchase_type):
    """Checks the capture input and returns the parsed purchase tier."""
    if not _present(order_id):
        raise ValidationError('Missing orderID')
    if not _present(beat_id):
        raise ValidationError('Missing beatId')
    if not _present(purchase_type):
        raise ValidationError('Missing purchaseType')
    return PurchaseTier.parse(purchase_type)


def cents_to_amount(cents):
    """1999 -> '19.99'"""
    return f'{cents // 100}.{cents % 100:02d}'
