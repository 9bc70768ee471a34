from app import mail
from .paypal import PayPalClient
from .pipeline import PurchasePipeline
from .storage import MediaStorage


def init_app(app, processor=None, storage=None):
    """Build the process-wide PayPal/S3/mail handles and the purchase pipeline.

    The pipeline lives in `app.extensions['beatstore']` for the lifetime of the app.
    """
    config = app.config
    if processor is None:
        processor = PayPalClient(
            config['PAYPAL_CLIENT_ID'],
            config['PAYPAL_CLIENT_SECRET'],
            environment=config['PAYPAL_ENVIRONMENT'],
            timeout=config['PAYPAL_TIMEOUT'],
        )
    if storage is None:
        storage = MediaStorage(
            config['S3_BUCKET'],
            region=config['AWS_REGION'],
            preview_expiry=config['PRESIGN_EXPIRY_SECONDS'],
            chunk_bytes=config['STREAM_CHUNK_BYTES'],
        )

    pipeline = PurchasePipeline(
        processor,
        storage,
        mail,
        token_secret=config.get('ORDER_TOKEN_SECRET'),
        token_ttl=config['ORDER_TOKEN_TTL_SECONDS'],
        download_link_ttl=config['DOWNLOAD_LINK_EXPIRY_SECONDS'],
        fulfillment_tiers=config['FULFILLMENT_TIERS'],
        currency=config['CURRENCY'],
    )
    app.extensions['beatstore'] = pipeline
    return pipeline
