"""Order confirmation tokens.

Format: base64url(json payload) + "." + base64url(hmac_sha256(secret, payload segment))

The payload is readable by anyone holding the token. The signature only
protects it from being altered, and `exp` bounds its lifetime.
"""
import base64
import hashlib
import hmac
import json
import time

from .exceptions import TokenInvalid

DEFAULT_TTL_SECONDS = 86400


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode('ascii').rstrip('=')


def _b64url_decode(s: str) -> bytes:
    pad = '=' * (-len(s) % 4)
    return base64.urlsafe_b64decode((s + pad).encode('ascii'))


def _sign(secret, payload_b64: str) -> bytes:
    if not secret:
        raise RuntimeError('Missing ORDER_TOKEN_SECRET')
    if isinstance(secret, str):
        secret = secret.encode('utf-8')
    return hmac.new(secret, payload_b64.encode('ascii'), hashlib.sha256).digest()


def mint_order_token(order_id, product_id, secret, ttl_seconds=DEFAULT_TTL_SECONDS, now=None):
    """Create a token binding `order_id` to `product_id` until now + ttl."""
    if now is None:
        now = time.time()
    payload = {'orderId': order_id, 'productId': product_id, 'exp': int(now) + int(ttl_seconds)}
    payload_b64 = _b64url(json.dumps(payload, separators=(',', ':')).encode('utf-8'))
    return f'{payload_b64}.{_b64url(_sign(secret, payload_b64))}'


def decode_order_token(token, expected_order_id, expected_product_id, secret, now=None):
    """Return the token claims or raise TokenInvalid.

    Every failure raises the same exception with the same message.
    """
    if not secret:
        raise TokenInvalid()
    try:
        parts = token.split('.')
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise TokenInvalid()
        payload_b64, sig_b64 = parts

        # compared in encoded form so that the unused trailing bits of the
        # last base64 character are covered too
        expected_sig = _b64url(_sign(secret, payload_b64)).encode('ascii')
        actual_sig = sig_b64.encode('ascii')
        if len(actual_sig) != len(expected_sig):
            raise TokenInvalid()
        if not hmac.compare_digest(actual_sig, expected_sig):
            raise TokenInvalid()

        claims = json.loads(_b64url_decode(payload_b64).decode('utf-8'))
        if not isinstance(claims, dict):
            raise TokenInvalid()
        order_id = claims.get('orderId')
        product_id = claims.get('productId')
        exp = claims.get('exp')
        if not order_id or not product_id or not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise TokenInvalid()

        if order_id != expected_order_id or product_id != expected_product_id:
            raise TokenInvalid()

        if now is None:
            now = time.time()
        if now > exp:
            raise TokenInvalid()
        return claims
    except TokenInvalid:
        raise
    except (ValueError, TypeError, AttributeError, UnicodeError):
        # bad base64, bad json, non-string token
        raise TokenInvalid()


def verify_order_token(token, expected_order_id, expected_product_id, secret, now=None):
    """Return the claims if the token is valid for this order/product pair, else None."""
    try:
        return decode_order_token(token, expected_order_id, expected_product_id, secret, now=now)
    except TokenInvalid:
        return None
