# beatstore/paypal.py
import requests

PRODUCTION_URL = 'https://api-m.paypal.com'
SANDBOX_URL = 'https://api-m.sandbox.paypal.com'


class PayPalApiError(Exception):
    """Non-2xx answer from PayPal; keeps PayPal's status code and JSON body."""

    def __init__(self, status_code, payload):
        super().__init__(f'PayPal API error {status_code}')
        self.status_code = status_code
        self.payload = payload


def _json_or_raw(response):
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return {'raw': response.text}


class PayPalClient:
    """Thin client for the PayPal Orders v2 REST API.

    Holds only credentials; every call fetches its own OAuth token, so one
    instance can be shared by all requests.
    """

    def __init__(self, client_id, client_secret, environment='SANDBOX', timeout=30, session=None):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = PRODUCTION_URL if (environment or '').upper() == 'PRODUCTION' else SANDBOX_URL
        self.timeout = timeout
        self.session = session or requests

    def _access_token(self):
        response = self.session.post(
            f'{self.base_url}/v1/oauth2/token',
            auth=(self.client_id, self.client_secret),
            data={'grant_type': 'client_credentials'},
            headers={'Accept': 'application/json'},
            timeout=self.timeout,
        )
        if response.status_code != 200:
            raise PayPalApiError(response.status_code, _json_or_raw(response))
        return response.json()['access_token']

    def _post(self, path, body=None, prefer='return=minimal'):
        headers = {
            'Authorization': f'Bearer {self._access_token()}',
            'Content-Type': 'application/json',
            'Prefer': prefer,
        }
        response = self.session.post(f'{self.base_url}{path}', json=body, headers=headers, timeout=self.timeout)
        payload = _json_or_raw(response)
        if not 200 <= response.status_code < 300:
            raise PayPalApiError(response.status_code, payload)
        return payload, response.status_code

    def create_order(self, amount, currency, description, reference_id=None):
        """Create a CAPTURE-intent order. Returns (payload, status_code)."""
        purchase_unit = {
            'amount': {'currency_code': currency, 'value': amount},
            'description': description,
        }
        if reference_id:
            purchase_unit['reference_id'] = reference_id
        body = {'intent': 'CAPTURE', 'purchase_units': [purchase_unit]}
        return self._post('/v2/checkout/orders', body)

    def capture_order(self, order_id):
        """Capture an approved order. Returns (payload, status_code).

        Asks for the full representation so payer and fee breakdown are included.
        """
        return self._post(f'/v2/checkout/orders/{order_id}/capture', prefer='return=representation')
