"""Custom exceptions for the Comerciante point-of-sale application."""

class ComercianteError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class ValidationError(ComercianteError):
    """Raised when input is rejected before any write is attempted."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)

class BusinessLogicError(ComercianteError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)

class NotFoundError(ComercianteError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class InsufficientStockError(BusinessLogicError):
    """Raised when a sale would drive a product's stock below zero."""
    def __init__(self, product_name, required, available):
        message = f"Estoque insuficiente para {product_name}: solicitado {required}, disponível {available}"
        super().__init__(message, status_code=409, payload={
            'required': int(required),
            'available': int(available),
        })

class ConstraintError(ComercianteError):
    """Raised when the store rejects a write (bad reference, duplicate)."""
    def __init__(self, message="Constraint violation", payload=None):
        super().__init__(message, 409, payload)

class StoreIOError(ComercianteError):
    """Raised when the underlying storage is unreachable or corrupt."""
    def __init__(self, message="Storage unavailable", payload=None):
        super().__init__(message, 503, payload)

class SchemaError(ComercianteError):
    """Raised when table creation fails. Fatal at start-up."""
    def __init__(self, message="Schema initialization failed"):
        super().__init__(message, 500)

class UnauthorizedError(ComercianteError):
    """Raised when the login gate rejects a request."""
    def __init__(self, message="Unauthorized access"):
        super().__init__(message, 401)
