"""Errors crossing the RPC boundary."""

STATUS_CODES = {
    'BAD_REQUEST': 400,
    'UNAUTHORIZED': 401,
    'NOT_FOUND': 404,
    'INTERNAL_SERVER_ERROR': 500,
}


class RpcError(Exception):
    """A procedure failed; serialized as {"error": {...}} on the wire."""

    def __init__(self, message, code='INTERNAL_SERVER_ERROR', fields=None, status_code=None):
        super().__init__(message)
        self.message = message
        self.code = code if code in STATUS_CODES else 'INTERNAL_SERVER_ERROR'
        self.fields = fields or {}
        self.status_code = status_code or STATUS_CODES[self.code]

    def to_dict(self):
        return {'code': self.code, 'message': self.message, 'fields': self.fields}

    @classmethod
    def from_dict(cls, data, status_code=None):
        data = data or {}
        return cls(
            data.get('message') or 'Request failed',
            code=data.get('code') or 'INTERNAL_SERVER_ERROR',
            fields=data.get('fields'),
            status_code=status_code,
        )


class MutationError(RpcError):
    """A write was rejected: unknown slug, invalid payload or backend failure."""

    @classmethod
    def wrap(cls, error):
        if isinstance(error, cls):
            return error
        return cls(error.message, code=error.code, fields=error.fields, status_code=error.status_code)
