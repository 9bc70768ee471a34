# beatstore/routes.py
from flask import request, jsonify, current_app, Response, stream_with_context

from . import beatstore_bp
from . import store
from .confirmation import reveal_order
from .exceptions import BeatStoreError, TokenInvalid, ValidationError


def _pipeline():
    return current_app.extensions['beatstore']


def _json_body():
    """Parsed JSON object from the request, or ValidationError."""
    if not request.get_data():
        raise ValidationError('Empty request body')
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Invalid JSON body')
    return data


@beatstore_bp.errorhandler(BeatStoreError)
def handle_store_error(e):
    return jsonify(e.to_dict()), e.status_code


# --- Catalog ---

@beatstore_bp.route('/beats')
def list_beats():
    """Lists all beats, newest first."""
    try:
        beats = store.list_beats()
    except Exception as e:
        current_app.logger.error(f'Error while listing beats: {e}', exc_info=True)
        return jsonify({'error': 'Failed to list beats'}), 500
    return jsonify([beat.to_dict() for beat in beats])


@beatstore_bp.route('/beats/<path:s3_key>/preview')
def preview(s3_key):
    """Returns a short-lived presigned URL for a preview file."""
    try:
        url = _pipeline().storage.signed_url(s3_key)
    except Exception as e:
        current_app.logger.error(f'Preview generation failed for {s3_key}: {e}', exc_info=True)
        return jsonify({'error': 'Preview generation failed'}), 500
    return jsonify({'url': url})


@beatstore_bp.route('/beats/<path:s3_key>/stream')
def stream(s3_key):
    """Streams one chunk of an MP3 preview; the player asks for the next range itself."""
    if s3_key.lower().endswith('.wav'):
        return Response('WAV files not available for streaming', status=400)

    try:
        obj = _pipeline().storage.ranged_stream(s3_key, request.headers.get('Range'))
    except Exception as e:
        current_app.logger.error(f'Streaming failed for {s3_key}: {e}', exc_info=True)
        return Response('Internal Server Error', status=500)

    headers = {
        'Accept-Ranges': 'bytes',
        'Cache-Control': 'no-store',
    }
    if obj.content_range:
        headers['Content-Range'] = obj.content_range
    if obj.content_length:
        headers['Content-Length'] = str(obj.content_length)

    def generate():
        try:
            for chunk in obj.body.iter_chunks():
                yield chunk
        finally:
            obj.body.close()

    return Response(stream_with_context(generate()), status=206, headers=headers, mimetype='audio/mpeg')


# --- Purchase ---

@beatstore_bp.route('/order', methods=['POST'])
def create_order():
    """Creates a PayPal order for a beat; the client approves it in the PayPal popup."""
    data = _json_body()
    current_app.logger.info(f'Received order data: {data}')
    try:
        created = _pipeline().create_order(
            data.get('beatId'),
            data.get('totalCents'),
            data.get('description'),
            purchase_type=data.get('purchaseType'),
        )
    except BeatStoreError:
        raise
    except Exception as e:
        current_app.logger.error(f'Create order error: {e}', exc_info=True)
        return jsonify({'error': 'Failed to create order'}), 500
    return jsonify(created.payload), created.status_code


@beatstore_bp.route('/order/capture', methods=['POST'])
def capture_order():
    """Captures an approved order, records it and sends the contract email."""
    data = _json_body()
    try:
        result = _pipeline().capture_order(
            data.get('orderID'),
            data.get('beatId'),
            data.get('purchaseType'),
            recipient_email=data.get('email'),
        )
    except BeatStoreError:
        raise
    except Exception as e:
        current_app.logger.error(f'Capture error: {e}', exc_info=True)
        return jsonify({'error': 'Failed to capture order.'}), 500

    return jsonify({
        'orderId': result.order.order_id,
        'token': result.token,
        'order': result.order.to_dict(),
        'contractEmailSent': result.fulfillment.sent,
        'contractEmailError': result.fulfillment.error,
    }), result.status_code


@beatstore_bp.route('/confirmation')
def confirmation():
    """Shows order details to whoever holds the token issued at capture."""
    order = reveal_order(
        request.args.get('orderId', ''),
        request.args.get('beatId', ''),
        request.args.get('token', ''),
        _pipeline().token_secret,
    )
    if order is None:
        raise TokenInvalid()
    return jsonify({'order': order.to_dict()})
