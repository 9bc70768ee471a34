"""Purchase tiers and everything that depends on them.

Each table below must cover every tier. `require_total` runs at import time,
so adding a tier without filling in all the tables fails on startup.
"""
from enum import Enum

from .exceptions import ValidationError


class PurchaseTier(str, Enum):
    MP3 = 'mp3'
    WAV = 'wav'
    EXCLUSIVE = 'exclusive'

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f'Invalid purchaseType: {value!r}')


# Beat column holding the price for the tier
PRICE_FIELDS = {
    PurchaseTier.MP3: 'price_mp3_lease_cents',
    PurchaseTier.WAV: 'price_wav_lease_cents',
    PurchaseTier.EXCLUSIVE: 'price_exclusive_cents',
}

# Beat column holding the object-store key delivered for the tier
DOWNLOAD_KEY_FIELDS = {
    PurchaseTier.MP3: 's3_key_mp3',
    PurchaseTier.WAV: 's3_key_wav',
    PurchaseTier.EXCLUSIVE: 's3_key_wav',
}

# Used in the email subject and the PDF title
CONTRACT_TITLES = {
    PurchaseTier.MP3: 'MP3 Lease Contract',
    PurchaseTier.WAV: 'WAV Lease Contract',
    PurchaseTier.EXCLUSIVE: 'Exclusive Contract',
}

# Used in the email body ("attached is your ... contract")
TYPE_LABELS = {
    PurchaseTier.MP3: 'MP3 lease',
    PurchaseTier.WAV: 'WAV lease',
    PurchaseTier.EXCLUSIVE: 'exclusive',
}

# Suffix of the contract filename
LEASE_LABELS = {
    PurchaseTier.MP3: 'mp3-lease',
    PurchaseTier.WAV: 'wav-lease',
    PurchaseTier.EXCLUSIVE: 'exclusive',
}


def require_total(table, name):
    missing = set(PurchaseTier) - set(table)
    if missing:
        raise RuntimeError(f'{name} has no entry for: {sorted(t.value for t in missing)}')


def lookup(table, tier):
    """Return `table[tier]`, refusing anything that is not a PurchaseTier."""
    if not isinstance(tier, PurchaseTier):
        raise TypeError(f'Expected PurchaseTier, got {tier!r}')
    return table[tier]


def price_cents(beat, tier):
    return getattr(beat, lookup(PRICE_FIELDS, tier))


def download_key(beat, tier):
    return getattr(beat, lookup(DOWNLOAD_KEY_FIELDS, tier))


for _name, _table in [
    ('PRICE_FIELDS', PRICE_FIELDS),
    ('DOWNLOAD_KEY_FIELDS', DOWNLOAD_KEY_FIELDS),
    ('CONTRACT_TITLES', CONTRACT_TITLES),
    ('TYPE_LABELS', TYPE_LABELS),
    ('LEASE_LABELS', LEASE_LABELS),
]:
    require_total(_table, _name)
