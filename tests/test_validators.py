import pytest

from beatstore.exceptions import ValidationError
from beatstore.tiers import PurchaseTier
from beatstore.validators import cents_to_amount, validate_capture, validate_create_order


def test_create_order_accepts_int_and_numeric_string():
    assert validate_create_order('beat-1', 2999, 'MP3 lease') == 2999
    assert validate_create_order('beat-1', '2999', 'MP3 lease') == 2999


@pytest.mark.parametrize('beat_id, total, description', [
    (None, 2999, 'MP3 lease'),
    ('  ', 2999, 'MP3 lease'),
    ('beat-1', None, 'MP3 lease'),
    ('beat-1', 2999, ''),
])
def test_create_order_missing_fields(beat_id, total, description):
    with pytest.raises(ValidationError, match='Missing required fields'):
        validate_create_order(beat_id, total, description)


@pytest.mark.parametrize('total', [0, -5, 12.5, '12.50', 'abc', True, [2999]])
def test_create_order_rejects_bad_amounts(total):
    with pytest.raises(ValidationError) as excinfo:
        validate_create_order('beat-1', total, 'MP3 lease')
    assert excinfo.value.status_code == 400
    assert excinfo.value.message == 'totalCents must be a positive integer'


@pytest.mark.parametrize('args, message', [
    ((None, 'beat-1', 'mp3'), 'Missing orderID'),
    (('ORDER-1', '', 'mp3'), 'Missing beatId'),
    (('ORDER-1', 'beat-1', None), 'Missing purchaseType'),
])
def test_capture_missing_fields(args, message):
    with pytest.raises(ValidationError, match=message):
        validate_capture(*args)


def test_capture_parses_tier():
    assert validate_capture('ORDER-1', 'beat-1', 'exclusive') is PurchaseTier.EXCLUSIVE


def test_capture_rejects_unknown_tier():
    with pytest.raises(ValidationError, match='Invalid purchaseType'):
        validate_capture('ORDER-1', 'beat-1', 'flac')


@pytest.mark.parametrize('cents, amount', [(1999, '19.99'), (5, '0.05'), (100, '1.00'), (49999, '499.99')])
def test_cents_to_amount(cents, amount):
    assert cents_to_amount(cents) == amount
