"""
Domain exceptions for order intake.

The pricing engine itself never raises; these cover the I/O layers
around it (price table loading, validation, storage, uploads).
"""


class RefinishError(Exception):
    """Base class for all refinish tool errors."""


class PriceTableError(RefinishError, ValueError):
    """A price table file could not be parsed into a valid table."""


class OrderValidationError(RefinishError, ValueError):
    """Submitted order form failed validation."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Order validation failed: {fields}")


class OrderNotFoundError(RefinishError, LookupError):
    """No order exists for the given id or short id."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Order '{key}' not found")


class UploadRejectedError(RefinishError, ValueError):
    """An uploaded file (or batch of files) was rejected."""


class ShortIdExhaustedError(RefinishError, RuntimeError):
    """Could not generate an unused short id within the retry budget."""


class BotCheckFailedError(RefinishError):
    """The submitted bot-check token was rejected."""

    def __init__(self):
        super().__init__("Security verification failed")
