import pytest

from beatstore.paypal import PRODUCTION_URL, SANDBOX_URL, PayPalApiError, PayPalClient


class FakeResponse:
    def __init__(self, status_code, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else ''
        self.content = b'x' if payload is not None or text else b''

    def json(self):
        if self._payload is None:
            raise ValueError('no json')
        return self._payload


class FakeSession:
    """Answers the token request, then replays `responses` for API calls."""

    def __init__(self, *responses, token_response=None):
        self.calls = []
        self.token_response = token_response or FakeResponse(200, {'access_token': 'A21AA-token'})
        self.responses = list(responses)

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if url.endswith('/v1/oauth2/token'):
            return self.token_response
        return self.responses.pop(0)


def test_environment_selects_base_url():
    assert PayPalClient('id', 'secret', environment='PRODUCTION').base_url == PRODUCTION_URL
    assert PayPalClient('id', 'secret', environment='sandbox').base_url == SANDBOX_URL
    assert PayPalClient('id', 'secret', environment=None).base_url == SANDBOX_URL


def test_create_order_request():
    session = FakeSession(FakeResponse(201, {'id': 'ORDER-1', 'status': 'CREATED'}))
    client = PayPalClient('id', 'secret', session=session, timeout=5)

    payload, status = client.create_order('29.99', 'USD', 'Night Drive - MP3 lease', reference_id='beat-1')

    assert (payload, status) == ({'id': 'ORDER-1', 'status': 'CREATED'}, 201)
    token_url, token_kwargs = session.calls[0]
    assert token_url == f'{SANDBOX_URL}/v1/oauth2/token'
    assert token_kwargs['auth'] == ('id', 'secret')
    assert token_kwargs['data'] == {'grant_type': 'client_credentials'}

    url, kwargs = session.calls[1]
    assert url == f'{SANDBOX_URL}/v2/checkout/orders'
    assert kwargs['headers']['Authorization'] == 'Bearer A21AA-token'
    assert kwargs['headers']['Prefer'] == 'return=minimal'
    assert kwargs['timeout'] == 5
    assert kwargs['json'] == {
        'intent': 'CAPTURE',
        'purchase_units': [{
            'amount': {'currency_code': 'USD', 'value': '29.99'},
            'description': 'Night Drive - MP3 lease',
            'reference_id': 'beat-1',
        }],
    }


def test_capture_asks_for_full_representation():
    session = FakeSession(FakeResponse(201, {'id': 'ORDER-1', 'status': 'COMPLETED'}))
    client = PayPalClient('id', 'secret', session=session)

    payload, status = client.capture_order('ORDER-1')

    assert status == 201
    url, kwargs = session.calls[1]
    assert url == f'{SANDBOX_URL}/v2/checkout/orders/ORDER-1/capture'
    assert kwargs['headers']['Prefer'] == 'return=representation'
    assert kwargs['json'] is None


def test_api_error_keeps_status_and_body():
    session = FakeSession(FakeResponse(422, {'name': 'UNPROCESSABLE_ENTITY'}))
    client = PayPalClient('id', 'secret', session=session)

    with pytest.raises(PayPalApiError) as excinfo:
        client.capture_order('ORDER-1')
    assert excinfo.value.status_code == 422
    assert excinfo.value.payload == {'name': 'UNPROCESSABLE_ENTITY'}


def test_non_json_error_body():
    session = FakeSession(FakeResponse(502, text='Bad Gateway'))
    client = PayPalClient('id', 'secret', session=session)

    with pytest.raises(PayPalApiError) as excinfo:
        client.create_order('1.00', 'USD', 'x')
    assert excinfo.value.payload == {'raw': 'Bad Gateway'}


def test_auth_failure():
    session = FakeSession(token_response=FakeResponse(401, {'error': 'invalid_client'}))
    client = PayPalClient('id', 'wrong', session=session)

    with pytest.raises(PayPalApiError) as excinfo:
        client.create_order('1.00', 'USD', 'x')
    assert excinfo.value.status_code == 401
    assert len(session.calls) == 1
