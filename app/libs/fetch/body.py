from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode

_WHITESPACE = frozenset("\t\n\r\f\v")


def is_binary(content: bytes) -> bool:
    """A body is binary when it is not UTF-8, embeds NUL, or has control characters."""
    if b"\x00" in content:
        return True
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        return True
    return any(not char.isprintable() and char not in _WHITESPACE for char in text)


def _is_list_key(key: str) -> bool:
    return key.endswith("[]")


def collect_pairs(pairs: Iterator[tuple[str, Any]] | list[tuple[str, Any]]) -> dict[str, Any]:
    """Fold key/value pairs into a flat mapping.

    ``name[]`` keys gather every value in order, any other key keeps its first
    occurrence.
    """
    result: dict[str, Any] = {}
    for key, value in pairs:
        if _is_list_key(key):
            result.setdefault(key, []).append(value)
        elif key not in result:
            result[key] = value
    return result


def iter_flattened(source: Any, prefix: str = "") -> Iterator[tuple[str, Any]]:
    if isinstance(source, Mapping):
        items = ((str(key), value, False) for key, value in source.items())
    elif isinstance(source, list):
        items = ((str(index), value, True) for index, value in enumerate(source))
    else:
        yield prefix, source
        return

    for key, value, positional in items:
        if not prefix:
            composed = key
        elif positional:
            composed = f"{prefix}[]"
        else:
            composed = f"{prefix}.{key}"

        if isinstance(value, (Mapping, list)):
            yield from iter_flattened(value, composed)
        else:
            yield composed, value


def flatten(source: Any) -> dict[str, Any]:
    """Flatten nested JSON data into dotted / bracket-suffixed keys.

    >>> flatten({"a": {"b": 1, "c": [2, 3]}})
    {'a.b': 1, 'a.c[]': [2, 3]}
    """
    return collect_pairs(iter_flattened(source))


def parse_form(content: str) -> dict[str, Any]:
    return collect_pairs(parse_qsl(content, keep_blank_values=True))


def _iter_query(data: Any, prefix: str = "") -> Iterator[tuple[str, str]]:
    if isinstance(data, Mapping):
        items = data.items()
    else:
        items = enumerate(data)
    for key, value in items:
        composed = f"{prefix}[{key}]" if prefix else str(key)
        if isinstance(value, (Mapping, list, tuple)):
            yield from _iter_query(value, composed)
        elif value is None:
            continue
        elif isinstance(value, bool):
            yield composed, "1" if value else "0"
        else:
            yield composed, str(value)


def build_query(data: Mapping[str, Any] | list[Any]) -> str:
    """URL-encode nested data using ``parent[child]`` keys for nested values."""
    return urlencode(list(_iter_query(data)))
