"""Error taxonomy for the email endpoints.

Each error carries the HTTP status it maps to and a public message. The
exception handlers in ``coldmail.main`` turn them into JSON bodies.
"""


class EmailServiceError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500
    public_message = "Internal Server Error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail or self.public_message)


class ValidationError(EmailServiceError):
    """A required input field is missing or has the wrong shape."""

    status_code = 400
    public_message = "Invalid request"


class RemoteServiceError(EmailServiceError):
    """The completion service call failed or returned no content."""

    status_code = 500

    def __init__(self, detail: str = "", *, provider_status: int | None = None) -> None:
        self.provider_status = provider_status
        super().__init__(detail)


class MalformedResponseError(EmailServiceError):
    """The completion text could not be read as the expected structure.

    ``raw_content`` is kept for the request log and never returned to callers.
    """

    status_code = 500
    public_message = "Model returned an unreadable response"

    def __init__(self, detail: str = "", *, raw_content: str = "") -> None:
        self.raw_content = raw_content
        super().__init__(detail)
