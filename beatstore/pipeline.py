"""Order creation, payment capture and post-purchase fulfillment.

Capture runs in a fixed order inside the request:

    capture at PayPal -> record order -> mint token -> post-commit hooks

Recording the order is the point of no return. Anything after it (token,
contract, download link, email) can fail without turning the response into
an error; failures come back as a FulfillmentOutcome instead.
"""
from collections import namedtuple
from datetime import datetime, timezone

import requests
from flask import current_app

from . import store
from .contracts import ContractInput, format_contract_date, render_contract
from .email import send_contract_email
from .exceptions import FulfillmentWarning, NotFoundError, PaymentError, ProcessorError, ValidationError
from .paypal import PayPalApiError
from .tiers import PurchaseTier, download_key, price_cents
from .tokens import mint_order_token
from .validators import cents_to_amount, validate_capture, validate_create_order

COMPLETED = 'COMPLETED'
FAILED_CAPTURE_STATUSES = {'DECLINED', 'FAILED'}

CreatedOrder = namedtuple('CreatedOrder', ['order_id', 'status', 'payload', 'status_code'])

CaptureDetails = namedtuple('CaptureDetails', [
    'status',
    'capture_id',
    'created_at',
    'payer_email',
    'payer_name',
    'gross_amount',
    'paypal_fee',
    'net_amount',
    'currency',
])

FulfillmentOutcome = namedtuple('FulfillmentOutcome', ['attempted', 'sent', 'error'], defaults=(False, False, None))

CaptureResult = namedtuple('CaptureResult', ['order', 'token', 'fulfillment', 'status_code'])

# Handed to every post-commit hook
PurchaseContext = namedtuple('PurchaseContext', ['order', 'tier', 'capture'])


def _parse_paypal_time(value):
    """'2025-01-05T17:03:11Z' -> naive UTC datetime"""
    moment = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def _money(breakdown, name):
    money = breakdown.get(name)
    if not isinstance(money, dict) or not money.get('value') or not money.get('currency_code'):
        raise PaymentError('malformed capture response')
    return money['value'], money['currency_code']


def first_capture_status(payload):
    """Status of the first capture, or None when the response has no capture."""
    try:
        return payload['purchase_units'][0]['payments']['captures'][0].get('status')
    except (KeyError, IndexError, TypeError, AttributeError):
        return None


def extract_capture(payload):
    """Pull the fields we record out of a PayPal capture response.

    The response is treated as untrusted: any missing piece raises
    PaymentError instead of being filled in.
    """
    try:
        unit = payload['purchase_units'][0]
        capture = unit['payments']['captures'][0]
        breakdown = capture['seller_receivable_breakdown']
        capture_id = capture['id']
        create_time = capture['create_time']
        payer = payload['payer']
        payer_email = payer['email_address']
    except (KeyError, IndexError, TypeError):
        raise PaymentError('malformed capture response')

    if not isinstance(breakdown, dict) or not capture_id or not create_time or not payer_email:
        raise PaymentError('malformed capture response')

    gross, currency = _money(breakdown, 'gross_amount')
    fee, _ = _money(breakdown, 'paypal_fee')
    net, _ = _money(breakdown, 'net_amount')

    try:
        created_at = _parse_paypal_time(create_time)
    except (AttributeError, ValueError):
        raise PaymentError('malformed capture response')

    status = payload.get('status') or capture.get('status')
    if not status:
        raise PaymentError('malformed capture response')

    name = payer.get('name') or {}
    payer_name = ' '.join(part for part in (name.get('given_name'), name.get('surname')) if part)

    return CaptureDetails(
        status=status,
        capture_id=capture_id,
        created_at=created_at,
        payer_email=payer_email,
        payer_name=payer_name or payer_email,
        gross_amount=gross,
        paypal_fee=fee,
        net_amount=net,
        currency=currency,
    )


class PurchasePipeline:
    """Holds the process-wide collaborators and runs the purchase flow.

    One instance is built by `services.init_app` and shared by all requests.
    """

    def __init__(self, processor, storage, mailer, token_secret, token_ttl=86400,
                 download_link_ttl=86400, fulfillment_tiers=(PurchaseTier.MP3,), currency='USD'):
        self.processor = processor
        self.storage = storage
        self.mailer = mailer
        self.token_secret = token_secret
        self.token_ttl = token_ttl
        self.download_link_ttl = download_link_ttl
        self.fulfillment_tiers = frozenset(PurchaseTier(t) for t in fulfillment_tiers)
        self.currency = currency
        self.post_commit_hooks = [self.deliver_contract]

    # --- Order creation ---

    def create_order(self, beat_id, total_cents, description, purchase_type=None):
        cents = validate_create_order(beat_id, total_cents, description)
        if purchase_type:
            self._check_price(beat_id, PurchaseTier.parse(purchase_type), cents)
        try:
            payload, status_code = self.processor.create_order(
                cents_to_amount(cents), self.currency, description, reference_id=beat_id)
        except PayPalApiError as e:
            current_app.logger.error(f'PayPal rejected order creation for beat {beat_id}: {e.status_code}')
            raise ProcessorError(e.status_code, e.payload)
        except requests.exceptions.RequestException as e:
            current_app.logger.error(f'Connection error while creating PayPal order: {e}', exc_info=True)
            raise PaymentError('Failed to create order')

        current_app.logger.info(f"Created PayPal order {payload.get('id')} for beat {beat_id}")
        return CreatedOrder(payload.get('id'), payload.get('status'), payload, status_code)

    def _check_price(self, beat_id, tier, cents):
        beat = store.get_beat(beat_id)
        if beat is None:
            raise NotFoundError(f'Beat {beat_id} not found')
        if price_cents(beat, tier) != cents:
            raise ValidationError('totalCents does not match the price of this beat')

    # --- Capture ---

    def capture_order(self, order_id, beat_id, purchase_type, recipient_email=None):
        tier = validate_capture(order_id, beat_id, purchase_type)

        current_app.logger.info(f'Capturing order {order_id}')
        try:
            payload, status_code = self.processor.capture_order(order_id)
        except PayPalApiError as e:
            current_app.logger.error(f'PayPal rejected capture of {order_id}: {e.status_code}')
            raise PaymentError('Failed to capture order.', status_code=e.status_code, details=e.payload)
        except requests.exceptions.RequestException as e:
            current_app.logger.error(f'Connection error while capturing {order_id}: {e}', exc_info=True)
            raise PaymentError('Failed to capture order.')

        capture_status = first_capture_status(payload)
        if capture_status in FAILED_CAPTURE_STATUSES:
            current_app.logger.warning(f'Capture of {order_id} came back {capture_status}')
            raise PaymentError(f'Payment {capture_status.lower()}', status_code=402, details=payload)
        capture = extract_capture(payload)

        order = store.record_order(
            order_id=order_id,
            created_at=capture.created_at,
            beat_id=beat_id,
            status=capture.status,
            purchase_type=tier.value,
            gross_amount=capture.gross_amount,
            paypal_fee=capture.paypal_fee,
            net_amount=capture.net_amount,
            currency=capture.currency,
            payer_email=capture.payer_email,
            recipient_email=(recipient_email or '').strip() or capture.payer_email,
            capture_id=capture.capture_id,
        )
        current_app.logger.info(f'Recorded order {order_id} ({tier.value}) for beat {beat_id}')

        token = self._mint_token(order)
        fulfillment = self.run_post_commit_hooks(PurchaseContext(order, tier, capture))
        return CaptureResult(order, token, fulfillment, status_code)

    def _mint_token(self, order):
        try:
            return mint_order_token(order.order_id, order.beat_id, self.token_secret, self.token_ttl)
        except Exception:
            current_app.logger.error(f'Could not mint token for order {order.order_id}', exc_info=True)
            return None

    # --- After the order is recorded ---

    def run_post_commit_hooks(self, context):
        """Run every hook, even after one fails; the first failure is reported, never raised."""
        outcome = FulfillmentOutcome()
        failure = None
        for hook in self.post_commit_hooks:
            try:
                result = hook(context)
            except Exception as e:
                current_app.logger.error(
                    f'Fulfillment failed for order {context.order.order_id}: {e}', exc_info=True)
                if failure is None:
                    failure = FulfillmentOutcome(attempted=True, sent=False, error=str(e) or type(e).__name__)
                continue
            if result is not None:
                outcome = result
        return failure or outcome

    def should_fulfill(self, order, tier):
        return order.status == COMPLETED and tier in self.fulfillment_tiers

    def deliver_contract(self, context):
        """Email the license PDF and a download link for the purchased file."""
        order, tier, capture = context
        if not self.should_fulfill(order, tier):
            current_app.logger.info(
                f'No contract email for order {order.order_id} (status {order.status}, tier {tier.value})')
            return FulfillmentOutcome()

        beat = store.get_beat(order.beat_id)
        if beat is None:
            raise FulfillmentWarning(f'Beat {order.beat_id} not found')

        download_url = self.storage.signed_url(download_key(beat, tier), expires_in=self.download_link_ttl)
        pdf, filename = render_contract(tier, ContractInput(
            order_number=order.order_id,
            contract_date=format_contract_date(order.created_at),
            track_name=beat.title,
            customer_name=capture.payer_name,
            customer_email=order.recipient_email,
            price=order.gross_amount,
            purchase_code=capture.capture_id,
            track_id=beat.id,
        ))
        send_contract_email(
            self.mailer,
            order.recipient_email,
            tier,
            beat.title,
            order.order_id,
            download_url,
            pdf,
            filename,
            link_hours=max(1, self.download_link_ttl // 3600),
        )
        current_app.logger.info(f'Sent {tier.value} contract for order {order.order_id} to {order.recipient_email}')
        return FulfillmentOutcome(attempted=True, sent=True)
