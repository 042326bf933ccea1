"""Fixed-size database keys and byte helpers."""

from __future__ import annotations

from collections.abc import Iterator

KEY_LEN = 32


def is_equal(a: bytes | bytearray | Key, b: bytes | bytearray | Key) -> bool:
    """Return True when both byte sequences have the same length and content."""
    return bytes(a) == bytes(b)


def _strip_0x(text: str) -> str:
    return text[2:] if text.startswith("0x") else text


class Key:
    """A 32-byte key, right-aligned when built from shorter input."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | Key = b"") -> None:
        self._data = bytearray(KEY_LEN)
        if data:
            self.set_bytes(data)

    def set_bytes(self, data: bytes | bytearray | Key) -> None:
        """Copy ``data`` into the tail of the key; longer input keeps its last 32 bytes."""
        raw = bytes(data)
        if len(raw) > KEY_LEN:
            raw = raw[-KEY_LEN:]
        self._data[KEY_LEN - len(raw):] = raw

    def hex(self) -> str:
        """Return the key as lower-case hex prefixed with ``0x``."""
        return "0x" + self._data.hex()

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"Key({self.hex()})"

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return KEY_LEN

    def __iter__(self) -> Iterator[int]:
        return iter(bytes(self._data))

    def __getitem__(self, index):
        return bytes(self._data)[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Key, bytes, bytearray)):
            return is_equal(self, other)
        return NotImplemented

    __hash__ = None  # keys are mutable through set_bytes


def bytes_to_key(data: bytes | bytearray) -> Key:
    """Build a key from raw bytes."""
    return Key(data)


def string_to_key(text: str) -> Key:
    """Build a key from the UTF-8 bytes of ``text``, dropping a leading ``0x``."""
    return bytes_to_key(_strip_0x(text).encode())


def hex_to_key(text: str) -> Key:
    """Build a key from ``text`` after removing a ``0x`` prefix (the characters are not hex-decoded)."""
    return string_to_key(_strip_0x(text))