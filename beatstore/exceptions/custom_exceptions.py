class BeatStoreError(Exception):
    """Base class for errors the store reports to its callers."""
    status_code = 500

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self):
        body = {'error': self.message}
        if self.details is not None:
            body['details'] = self.details
        return body


class ValidationError(BeatStoreError):
    """Missing or malformed caller input."""
    status_code = 400


class PaymentError(BeatStoreError):
    """PayPal declined the payment or returned something unusable."""
    status_code = 500


class ProcessorError(BeatStoreError):
    """PayPal error passed through to the caller as-is."""

    def __init__(self, status_code, payload):
        super().__init__('PayPal request failed', status_code=status_code, details=payload)
        self.payload = payload

    def to_dict(self):
        return self.payload


class NotFoundError(BeatStoreError):
    status_code = 404


class DuplicateOrderError(BeatStoreError):
    """The order id has already been recorded."""
    status_code = 409


class FulfillmentWarning(BeatStoreError):
    """Post-purchase delivery failed; the purchase itself stands."""


class TokenInvalid(BeatStoreError):
    """Malformed, tampered, mismatched or expired order token."""
    status_code = 404

    def __init__(self, message='This link is invalid or has expired.'):
        super().__init__(message)
