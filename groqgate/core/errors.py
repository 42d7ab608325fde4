"""Project error hierarchy."""


class GroqGateError(Exception):
    """Base error."""


class RequestBodyDecodeError(GroqGateError):
    """Raised when an inbound JSON body cannot be decoded."""


class UpstreamUnreachableError(GroqGateError):
    """Raised when the upstream call fails at the transport level."""


class UpstreamDecodeError(GroqGateError):
    """Raised when the upstream body is not valid JSON."""
