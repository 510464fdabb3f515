class GatewayError(RuntimeError):
    """Base error for every gateway failure. ``status_code`` is the HTTP
    status the server answers with when the error reaches a route."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class MissingInput(GatewayError):
    status_code = 400
    public_message = "Missing data"


class ServiceUnavailable(GatewayError):
    public_message = "Service not configured"


class UpstreamError(GatewayError):
    public_message = "Upstream service failed"

    def __init__(self, message: str | None = None, upstream_status: int | None = None,
                 upstream_body: str = ""):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body


class EmptyResult(GatewayError):
    public_message = "No result generated"


class TransportError(GatewayError):
    public_message = "Could not reach upstream service"


class TranscriptionTimeout(GatewayError):
    status_code = 504
    public_message = "Transcription did not finish in time"
