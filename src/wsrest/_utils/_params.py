from typing import Any, Mapping, Optional

Params = dict[str, Any]


def merge_params(
    params: Optional[Mapping[str, Any]], mandatory: Mapping[str, Any]
) -> Params:
    """Merge call parameters with mandatory ones.

    Keys present in ``params`` keep their value; mandatory keys only fill the
    gaps.
    """
    merged: Params = dict(mandatory)
    merged.update(params or {})
    return merged


def is_absolute_url(url: str) -> bool:
    return url.startswith(("http://", "https://"))


def join_url(base_url: str, url: str) -> str:
    if is_absolute_url(url):
        return url
    return f"{base_url}{url}"
