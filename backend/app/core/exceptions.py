"""Domain errors raised by the billing storage layer.

The request layer maps each class to a status code; store-level errors never
cross this boundary untranslated.
"""


class BillingError(Exception):
    """Base exception for billing domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BillingError):
    """Malformed input, rejected before any mutation."""
    pass


class NotFoundError(BillingError):
    """A referenced id does not exist."""
    pass


class ReferencedEntityError(BillingError):
    """Delete blocked because other records still point at the entity."""
    pass


class QuotaExceededError(BillingError):
    """The user's plan quota is used up."""
    pass


class SubscriptionExpiredError(BillingError):
    """The user's time-boxed bundle has expired."""
    pass


class ConsistencyError(BillingError):
    """An internal invariant did not hold after a mutation."""
    pass
