"""
RPC Routes
==========

One endpoint per procedure name. Responses are {"result": ...} or
{"error": {"code", "message", "fields"}} with a matching HTTP status.
CORS for these paths is set up per app by the Atelier extension.
"""

from flask import current_app, jsonify, request

from ..core.logging_service import logger
from . import rpc_bp
from .errors import RpcError
from .router import CallContext


@rpc_bp.route('/<procedure>', methods=['POST'])
def call_procedure(procedure):
    """Run a procedure with the JSON body's `input` object."""
    router = current_app.extensions['atelier'].router
    data = request.get_json(silent=True)
    payload = data.get('input') if isinstance(data, dict) else data
    if payload is None:
        payload = {}

    try:
        if not isinstance(payload, dict):
            raise RpcError('Input must be a JSON object', code='BAD_REQUEST')
        result = router.call(procedure, payload, CallContext.from_session())
        return jsonify({'result': result})
    except RpcError as e:
        logger.log_api_call('rpc', procedure, 'POST', e.status_code, e.to_dict())
        return jsonify({'error': e.to_dict()}), e.status_code
    except Exception as e:
        logger.log_error_with_traceback('rpc', e, {'procedure': procedure})
        error = RpcError('Internal server error')
        return jsonify({'error': error.to_dict()}), error.status_code
