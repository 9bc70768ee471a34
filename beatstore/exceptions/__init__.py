from .custom_exceptions import (
    BeatStoreError,
    ValidationError,
    PaymentError,
    ProcessorError,
    NotFoundError,
    DuplicateOrderError,
    FulfillmentWarning,
    TokenInvalid,
)
