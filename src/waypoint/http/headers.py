"""Mutable, case-insensitive HTTP headers.

Implements ``MutableMapping[str, str]``. One value per name: setting a
header that already exists replaces it (last write wins). The original
spelling of the most recent write is kept for serialization.
"""

from collections.abc import Iterable, Iterator, Mapping, MutableMapping


class Headers(MutableMapping[str, str]):
    """Case-insensitive header map.

    Keys are compared case-insensitively; iteration yields the spelling
    used by the last write::

        headers = Headers({"Content-Type": "text/plain"})
        headers["content-type"]          # "text/plain"
        headers["CONTENT-TYPE"] = "x"    # replaces, spelling now "CONTENT-TYPE"
    """

    __slots__ = ("_store",)

    def __init__(
        self,
        initial: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self._store: dict[str, tuple[str, str]] = {}
        if initial is None:
            return
        items = initial.items() if isinstance(initial, Mapping) else initial
        for name, value in items:
            self[name] = value

    def __getitem__(self, key: str) -> str:
        return self._store[key.lower()][1]

    def __setitem__(self, key: str, value: str) -> None:
        self._store[key.lower()] = (key, value)

    def __delitem__(self, key: str) -> None:
        del self._store[key.lower()]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return key.lower() in self._store

    def __iter__(self) -> Iterator[str]:
        for name, _ in self._store.values():
            yield name

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        items = ", ".join(f"{name!r}: {value!r}" for name, value in self._store.values())
        return f"Headers({{{items}}})"

    def clear(self) -> None:
        self._store.clear()

    def raw(self) -> list[tuple[str, str]]:
        """Header pairs in insertion order, as last written."""
        return list(self._store.values())
