from typing import Any, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from .models.errors import WSParsingError

T = TypeVar("T")

KEY_PATH_SEPARATOR = "."


def value_at_key_path(json: Any, key_path: Optional[str]) -> Any:
    """Walk ``json`` along a dotted key-path such as ``"data.items"``.

    Numeric segments index into lists. An empty or missing key-path returns
    ``json`` itself.
    """
    if not key_path:
        return json

    node = json
    for segment in key_path.split(KEY_PATH_SEPARATOR):
        if isinstance(node, dict) and segment in node:
            node = node[segment]
        elif isinstance(node, list) and segment.lstrip("-").isdigit():
            try:
                node = node[int(segment)]
            except IndexError as e:
                raise WSParsingError(
                    f"Index '{segment}' out of range in key-path '{key_path}'",
                    key_path=key_path,
                ) from e
        else:
            raise WSParsingError(
                f"Key-path '{key_path}' not found in response (missing '{segment}')",
                key_path=key_path,
            )
    return node


def parse_object(json: Any, model: type[T], key_path: Optional[str] = None) -> T:
    node = value_at_key_path(json, key_path)
    try:
        return TypeAdapter(model).validate_python(node)
    except ValidationError as e:
        raise WSParsingError(
            f"Could not parse {getattr(model, '__name__', model)}: {e}",
            key_path=key_path,
        ) from e


def parse_collection(
    json: Any, model: type[T], key_path: Optional[str] = None
) -> list[T]:
    node = value_at_key_path(json, key_path)
    if not isinstance(node, list):
        raise WSParsingError(
            f"Expected a list at key-path '{key_path or ''}', got {type(node).__name__}",
            key_path=key_path,
        )
    try:
        return TypeAdapter(list[model]).validate_python(node)  # type: ignore[valid-type]
    except ValidationError as e:
        raise WSParsingError(
            f"Could not parse list of {getattr(model, '__name__', model)}: {e}",
            key_path=key_path,
        ) from e
