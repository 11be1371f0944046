"""
Custom exceptions for the application
"""

class BaseAppException(Exception):
    """Base application exception"""
    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class NotFoundError(BaseAppException):
    """Raised when a resource is not found"""
    pass


class ValidationError(BaseAppException):
    """Raised when validation fails"""
    def __init__(self, message: str, details: str = None, error_code: str = None):
        super().__init__(message, details)
        self.error_code = error_code


class ConflictError(BaseAppException):
    """Raised when a unique value (email, username, token) already exists"""
    pass


class BusinessLogicError(BaseAppException):
    """Raised when business logic constraints are violated"""
    pass


class AlreadyConfirmedError(BusinessLogicError):
    """Raised when a confirmed waitlist entry is asked for a new token"""
    def __init__(self, message: str = "Email is already confirmed", details: str = None):
        super().__init__(message, details)


class DatabaseError(BaseAppException):
    """Raised when database operations fail"""
    pass
