class AciError(Exception):
    """Base class for all APIC client errors."""


class AuthenticationError(AciError):
    """Raised when login or token refresh against the APIC fails."""


class TransportError(AciError):
    """Raised when a connection could not be established or completed after all retries."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class DecodeError(AciError):
    """Raised when a response body could not be read or parsed after all retries."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class HTTPStatusError(AciError):
    """Raised when a retryable HTTP status (500-504, 405) persists after all retries."""

    def __init__(self, status: int, attempts: int = 0):
        super().__init__(f"HTTP request failed: status code {status}")
        self.status = status
        self.attempts = attempts


class APIError(AciError):
    """Raised when the response body carries an APIC error code, even on a 2xx status."""

    def __init__(self, code: str, raw_body: str, response=None):
        super().__init__(f"APIC error {code}: {raw_body}")
        self.code = code
        self.raw_body = raw_body
        self.response = response
