"""Failure classes for the receipt pipeline.

Each error knows the HTTP status and the message the client sees; the router
turns them into `{"error": message}` bodies.
"""

MSG_REQUEST_SHAPE = 'Please provide "id", "time", and "url" in the request body'
MSG_PAYLOAD_SHAPE = "The JSON data from the API must be an object with key-value pairs"
MSG_UNREACHABLE = "Unable to reach the specified API"
MSG_INTERNAL = "An error occurred while processing your request"


class ReceiptError(Exception):
    status_code = 500
    message = MSG_INTERNAL

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RequestShapeError(ReceiptError):
    status_code = 400
    message = MSG_REQUEST_SHAPE


class PayloadShapeError(ReceiptError):
    status_code = 400
    message = MSG_PAYLOAD_SHAPE


class UpstreamError(ReceiptError):
    """Remote answered with a non-2xx status; its status is passed through."""

    def __init__(self, status: int, body: str):
        self.status_code = status
        self.body = body
        super().__init__(f"Error from API: {body}")


class UnreachableError(ReceiptError):
    status_code = 503
    message = MSG_UNREACHABLE


class MalformedPayloadError(ReceiptError):
    # surfaced to the client as a generic internal failure
    status_code = 500
    message = MSG_INTERNAL

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__()


class InternalError(ReceiptError):
    status_code = 500
    message = MSG_INTERNAL
