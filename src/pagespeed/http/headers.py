"""Read-only, case-insensitive view over raw ASGI header pairs."""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value. Stores the raw
    byte pairs and decodes on access.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        self._raw = tuple((bytes(name), bytes(value)) for name, value in raw)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value.decode("latin-1")
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def without(self, *names: str) -> list[tuple[bytes, bytes]]:
        """Raw pairs minus every header in *names* (for re-sending)."""
        drop = {name.lower().encode("latin-1") for name in names}
        return [(name, value) for name, value in self._raw if name.lower() not in drop]


def content_charset(content_type: str | None, default: str = "utf-8") -> str:
    """The ``charset`` parameter of a Content-Type value, or *default*."""
    if not content_type:
        return default
    for param in content_type.split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return default


def is_html(content_type: str | None) -> bool:
    return bool(content_type) and "text/html" in content_type.lower()
