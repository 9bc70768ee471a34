import io
import pathlib
import sys

import pytest
from botocore.response import StreamingBody


# Ensure repo root is on PYTHONPATH for `import app` / `import config`.
_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from app import create_app, db  # noqa: E402
from config import Config  # noqa: E402
from beatstore.paypal import PayPalApiError  # noqa: E402
from beatstore.storage import MediaStorage  # noqa: E402


TOKEN_SECRET = 'test-order-token-secret'
CHUNK_BYTES = 1024
MP3_KEY = 'beats/night-drive.mp3'
WAV_KEY = 'beats/night-drive.wav'
MP3_BYTES = bytes(range(256)) * 20  # 5120 bytes, five chunks


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    MAIL_DEFAULT_SENDER = 'store@example.com'
    MAIL_SUPPRESS_SEND = True
    ORDER_TOKEN_SECRET = TOKEN_SECRET
    ORDER_TOKEN_TTL_SECONDS = 86400
    FULFILLMENT_TIERS = ['mp3']
    S3_BUCKET = 'test-bucket'
    STREAM_CHUNK_BYTES = CHUNK_BYTES


class FakePayPal:
    """Stands in for PayPalClient; returns canned responses and records calls."""

    def __init__(self):
        self.created = []
        self.captured = []
        self.create_response = ({'id': 'ORDER-1', 'status': 'CREATED'}, 201)
        self.capture_response = None
        self.error = None

    def create_order(self, amount, currency, description, reference_id=None):
        self.created.append((amount, currency, description, reference_id))
        if self.error is not None:
            raise self.error
        return self.create_response

    def capture_order(self, order_id):
        self.captured.append(order_id)
        if self.error is not None:
            raise self.error
        return self.capture_response


class FakeS3Client:
    """The two boto3 S3 calls MediaStorage makes, over in-memory objects."""

    def __init__(self, objects):
        self.objects = objects
        self.requested_ranges = []

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        return f"https://{Params['Bucket']}.s3.amazonaws.com/{Params['Key']}?X-Amz-Expires={ExpiresIn}"

    def get_object(self, Bucket, Key, Range):
        self.requested_ranges.append(Range)
        data = self.objects[Key]
        start, end = (int(x) for x in Range[len('bytes='):].split('-'))
        end = min(end, len(data) - 1)
        chunk = data[start:end + 1]
        return {
            'Body': StreamingBody(io.BytesIO(chunk), len(chunk)),
            'ContentType': 'audio/mpeg',
            'ContentRange': f'bytes {start}-{end}/{len(data)}',
            'ContentLength': len(chunk),
        }


def make_capture_payload(order_id='ORDER-1', status='COMPLETED', capture_status='COMPLETED',
                         email='buyer@example.com', gross='29.99'):
    return {
        'id': order_id,
        'status': status,
        'payer': {
            'email_address': email,
            'name': {'given_name': 'Ada', 'surname': 'Lovelace'},
        },
        'purchase_units': [{
            'reference_id': 'default',
            'payments': {
                'captures': [{
                    'id': 'CAPTURE-1',
                    'status': capture_status,
                    'create_time': '2025-01-05T17:03:11Z',
                    'amount': {'currency_code': 'USD', 'value': gross},
                    'seller_receivable_breakdown': {
                        'gross_amount': {'currency_code': 'USD', 'value': gross},
                        'paypal_fee': {'currency_code': 'USD', 'value': '1.35'},
                        'net_amount': {'currency_code': 'USD', 'value': '28.64'},
                    },
                }],
            },
        }],
    }


@pytest.fixture
def paypal():
    fake = FakePayPal()
    fake.capture_response = (make_capture_payload(), 201)
    return fake


@pytest.fixture
def s3_client():
    return FakeS3Client({MP3_KEY: MP3_BYTES, WAV_KEY: b'RIFF' + bytes(4000)})


@pytest.fixture
def app(paypal, s3_client):
    storage = MediaStorage('test-bucket', chunk_bytes=CHUNK_BYTES, client=s3_client)
    app = create_app(TestingConfig, processor=paypal, storage=storage)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def pipeline(app):
    return app.extensions['beatstore']


@pytest.fixture
def beat(app):
    from beatstore import store
    with app.app_context():
        created = store.add_beat(
            id='beat-1',
            title='Night Drive',
            artists=['jj.aholics', 'Guest'],
            beat_key='F# minor',
            bpm=140,
            s3_key_mp3=MP3_KEY,
            s3_key_wav=WAV_KEY,
            price_mp3_lease_cents=2999,
            price_wav_lease_cents=4999,
            price_exclusive_cents=49999,
        )
        return created.id


@pytest.fixture
def capture_payload():
    return make_capture_payload


@pytest.fixture
def paypal_error():
    return PayPalApiError
