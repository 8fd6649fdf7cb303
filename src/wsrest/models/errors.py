from typing import Any, Optional

from httpx import HTTPStatusError


class WSHTTPError(HTTPStatusError):
    """Raised when the server answers with a non-2xx status.

    Keeps the original httpx request and response, and adds the status code
    and the decoded JSON body when one could be read.
    """

    def __init__(self, error: HTTPStatusError, json_payload: Optional[Any] = None):
        super().__init__(str(error), request=error.request, response=error.response)
        self.status_code = error.response.status_code
        self.json_payload = json_payload

    def __str__(self) -> str:
        message = super().__str__()
        if self.json_payload is None:
            return message
        return f"{message}\nResponse body: {self.json_payload}"


class WSParsingError(ValueError):
    """Raised when a response body cannot be turned into JSON or a model."""

    def __init__(self, message: str, *, key_path: Optional[str] = None):
        self.message = message
        self.key_path = key_path
        super().__init__(self.message)
