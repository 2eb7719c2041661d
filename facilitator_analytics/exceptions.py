class InvalidInputError(ValueError):
    """Raised when query input fails schema validation."""


class QueryExecutionError(RuntimeError):
    """Raised when the analytical database rejects or fails a query."""

    def __init__(self, message: str, query_name: str = None):
        super().__init__(message)
        self.query_name = query_name


class FacilitatorConfigError(ValueError):
    """Raised when the facilitator registry file is missing or malformed."""
