"""
Custom exceptions for nhr
"""


class NhrError(Exception):
    """Base exception for all nhr errors"""

    pass


class ConstructionError(NhrError):
    """
    Raised when a request cannot be built.

    This includes:
    - Malformed request URL
    - JSON body that cannot be serialized
    - Request that cannot be prepared for sending

    These are programmer errors: the input handed to the library was invalid.
    """

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message)


class TransportError(NhrError):
    """Raised when sending the request fails at the network level"""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message)


class ResponseError(NhrError):
    """Response decoding errors"""

    pass


class ResponseStatusError(ResponseError):
    """Raised when the response status code is not the expected success code"""

    def __init__(self, status_code: int, expected_status: int = 200):
        self.status_code = status_code
        self.expected_status = expected_status
        super().__init__(
            f"request status code not {expected_status}, actually status code is {status_code}"
        )


class ResponseReadError(ResponseError):
    """Raised when the response body cannot be read"""

    pass


class ResponseDecodeError(ResponseError):
    """
    Raised when the response body cannot be decoded into the target.

    This includes:
    - Malformed JSON
    - JSON document whose shape does not fit the target
    """

    def __init__(self, message: str, raw_body: bytes | None = None):
        self.raw_body = raw_body
        super().__init__(message)


class ConfigurationError(NhrError):
    """Raised when a configuration source is missing or invalid"""

    def __init__(self, message: str, config_key: str | None = None):
        self.config_key = config_key
        if config_key:
            super().__init__(f"Configuration error for '{config_key}': {message}")
        else:
            super().__init__(f"Configuration error: {message}")
