# beatstore/models.py
import uuid
from datetime import datetime
from app import db


class Beat(db.Model):
    """A track listed in the store. Read-only from the purchase flow."""
    __tablename__ = 'beats'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(200), nullable=False)
    artists = db.Column(db.JSON, nullable=False, default=list)
    beat_key = db.Column(db.String(20), nullable=True)
    bpm = db.Column(db.Integer, nullable=False)
    s3_key_mp3 = db.Column(db.String(255), nullable=False, unique=True)
    s3_key_wav = db.Column(db.String(255), nullable=False, unique=True)
    price_mp3_lease_cents = db.Column(db.Integer, nullable=False)
    price_wav_lease_cents = db.Column(db.Integer, nullable=False)
    price_exclusive_cents = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'artists': list(self.artists or []),
            'beat_key': self.beat_key,
            'bpm': self.bpm,
            's3_key_mp3': self.s3_key_mp3,
            's3_key_wav': self.s3_key_wav,
            'price_mp3_lease_cents': self.price_mp3_lease_cents,
            'price_wav_lease_cents': self.price_wav_lease_cents,
            'price_exclusive_cents': self.price_exclusive_cents,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Beat {self.title}>'


class Order(db.Model):
    """A captured PayPal order. Written once at capture time, never updated."""
    __tablename__ = 'orders'
    # PayPal order id; the primary key keeps a capture from being recorded twice
    order_id = db.Column(db.String(64), primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False)
    # not a foreign key: the catalog may drop a beat, the ledger keeps the order
    beat_id = db.Column(db.String(36), nullable=False, index=True)
    status = db.Column(db.String(32), nullable=False)
    purchase_type = db.Column(db.String(16), nullable=False)
    # Amounts are kept as PayPal's decimal strings
    gross_amount = db.Column(db.String(32), nullable=False)
    paypal_fee = db.Column(db.String(32), nullable=False)
    net_amount = db.Column(db.String(32), nullable=False)
    currency = db.Column(db.String(3), nullable=False)
    payer_email = db.Column(db.String(255), nullable=False)
    recipient_email = db.Column(db.String(255), nullable=False)
    capture_id = db.Column(db.String(64), nullable=False)

    def to_dict(self):
        return {
            'order_id': self.order_id,
            'created_at': self.created_at.isoformat(),
            'beat_id': self.beat_id,
            'status': self.status,
            'purchase_type': self.purchase_type,
            'gross_amount': self.gross_amount,
            'paypal_fee': self.paypal_fee,
            'net_amount': self.net_amount,
            'currency': self.currency,
            'payer_email': self.payer_email,
            'recipient_email': self.recipient_email,
            'capture_id': self.capture_id,
        }

    def __repr__(self):
        return f'<Order {self.order_id} for {self.beat_id}>'
