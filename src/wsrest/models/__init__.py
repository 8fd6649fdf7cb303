from .errors import WSHTTPError, WSParsingError

__all__ = [
    "WSHTTPError",
    "WSParsingError",
]
