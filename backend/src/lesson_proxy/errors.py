"""Error taxonomy shared by the proxy server and the form orchestrator."""


class GenerationError(Exception):
    """Base class; each subclass maps to exactly one HTTP status."""

    error_kind: str = "generation_error"
    status_code: int | None = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(GenerationError):
    error_kind = "invalid_request"
    status_code = 400


class UpstreamTimeout(GenerationError):
    error_kind = "upstream_timeout"
    status_code = 503


class UpstreamError(GenerationError):
    error_kind = "upstream_error"
    status_code = 500


class NetworkError(GenerationError):
    """The client could not reach the proxy at all."""

    error_kind = "network_error"


def error_for_status(status_code: int, message: str) -> GenerationError:
    if status_code == InvalidRequest.status_code:
        return InvalidRequest(message)
    if status_code == UpstreamTimeout.status_code:
        return UpstreamTimeout(message)
    return UpstreamError(message)
