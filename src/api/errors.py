# src/api/errors.py

"""The single error type raised by the catalog API client."""


class ApiError(Exception):
    """Any failure talking to the product API.

    Precondition violations, transport errors, non-2xx statuses and
    malformed bodies all surface as this one type. Callers branch on
    ``status_code`` (``None`` when no HTTP response was involved) and
    never on subclasses.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.endpoint = endpoint

    @property
    def is_not_found(self) -> bool:
        """True for an explicit HTTP 404."""
        return self.status_code == 404

    def __repr__(self) -> str:
        return (
            f"ApiError(message={self.message!r}, "
            f"status_code={self.status_code!r}, "
            f"endpoint={self.endpoint!r})"
        )
