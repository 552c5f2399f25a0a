"""Error taxonomy for analytics-layer operations."""


class AnalyticsValidationError(ValueError):
    """Raised when analytics input is malformed, before any data access.

    Attributes:
        field_name: Input field that failed validation.
        value: Rejected raw value.
    """

    def __init__(self, message: str, field_name: str, value: object | None = None):
        super().__init__(message)
        self.field_name = field_name
        self.value = value


class AnalyticsServiceError(RuntimeError):
    """Raised when the analytics data store cannot serve a request."""
