"""
Custom exceptions for the Lumière storefront
"""


class StorefrontException(Exception):
    """Base exception for all storefront errors"""
    def __init__(self, message: str, code: str = "STOREFRONT_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationException(StorefrontException):
    """Exception raised for missing or malformed input"""
    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(
            message=message,
            code="VALIDATION_ERROR"
        )


class NotFoundException(StorefrontException):
    """Exception raised when a referenced entity does not exist"""
    def __init__(self, entity: str, identifier: str = None, message: str = None, code: str = "NOT_FOUND"):
        self.entity = entity
        self.identifier = identifier
        super().__init__(message=message or f"{entity} not found", code=code)


class BusinessRuleViolation(StorefrontException):
    """Exception raised when a request is well-formed but not allowed"""
    def __init__(self, message: str, code: str = "BUSINESS_RULE_VIOLATION"):
        super().__init__(message=message, code=code)


class DiscountNotFound(NotFoundException):
    """No discount code matches"""
    def __init__(self, code: str):
        super().__init__(
            entity="Discount code",
            identifier=code,
            message="Invalid discount code",
            code="DISCOUNT_NOT_FOUND"
        )


class DiscountInactive(BusinessRuleViolation):
    """The discount code has been switched off"""
    def __init__(self, code: str):
        self.discount_code = code
        super().__init__(
            message="This discount code is not active",
            code="DISCOUNT_INACTIVE"
        )


class DiscountExpired(BusinessRuleViolation):
    """The discount code's expiry instant has passed"""
    def __init__(self, code: str):
        self.discount_code = code
        super().__init__(
            message="This discount code has expired",
            code="DISCOUNT_EXPIRED"
        )


class DiscountBelowMinimum(BusinessRuleViolation):
    """The order subtotal does not reach the code's minimum"""
    def __init__(self, code: str, minimum, currency: str):
        self.discount_code = code
        self.minimum = minimum
        super().__init__(
            message=f"Minimum order amount is {minimum} {currency}",
            code="DISCOUNT_BELOW_MINIMUM"
        )


class DiscountUsesExhausted(BusinessRuleViolation):
    """The discount code has reached its usage limit"""
    def __init__(self, code: str):
        self.discount_code = code
        super().__init__(
            message="This discount code has reached its usage limit",
            code="DISCOUNT_USES_EXHAUSTED"
        )


class NoShippingConfigured(BusinessRuleViolation):
    """No active shipping country exists"""
    def __init__(self):
        super().__init__(
            message="Shipping is not configured for any country",
            code="NO_SHIPPING_CONFIGURED"
        )


class EmptyCart(BusinessRuleViolation):
    """An order was placed without line items"""
    def __init__(self):
        super().__init__(
            message="Cannot place an order with an empty cart",
            code="EMPTY_CART"
        )


class InvalidTransition(StorefrontException):
    """Exception raised when a lifecycle field cannot move to the requested value"""
    def __init__(self, field: str, current: str, target: str):
        self.field = field
        self.current = current
        self.target = target
        super().__init__(
            message=f"Cannot change {field} from '{current}' to '{target}'",
            code="INVALID_TRANSITION"
        )


class PersistenceException(StorefrontException):
    """Exception raised when a store read or write fails"""
    def __init__(self, message: str, operation: str = "unknown"):
        self.operation = operation
        super().__init__(
            message=f"Persistence error during {operation}: {message}",
            code="PERSISTENCE_ERROR"
        )
