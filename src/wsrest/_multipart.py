from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ._utils.constants import DEFAULT_MIME_TYPE


@dataclass
class WSMultiPartData:
    """One named file part of a multipart upload."""

    name: str
    data: bytes
    file_name: str
    mime_type: str = DEFAULT_MIME_TYPE


def multipart_files(
    parts: Sequence[WSMultiPartData],
) -> list[tuple[str, tuple[str, bytes, str]]]:
    """Build the ``files`` argument httpx expects, keeping part order."""
    return [(part.name, (part.file_name, part.data, part.mime_type)) for part in parts]


PRIMITIVE_TYPES = (str, bytes, int, float, type(None))


def _field_value(value: Any) -> Any:
    # httpx renders primitives itself, the same way it renders form bodies
    if isinstance(value, PRIMITIVE_TYPES):
        return value
    return str(value)


def multipart_fields(params: Mapping[str, Any]) -> dict[str, Any]:
    """Turn request parameters into multipart form fields.

    Lists and tuples become repeated fields. Values that are not primitives
    are sent as their string form, as in a form-encoded body.
    """
    fields: dict[str, Any] = {}
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            fields[key] = [_field_value(item) for item in value]
        else:
            fields[key] = _field_value(value)
    return fields
