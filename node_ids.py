"""
Node identifiers for the shortest-path engine.

The engine treats identifiers as opaque hashable values. Grid front-ends
encode a cell (x, y) either as an "x-y" string key or as a single integer
with x in the high 16 bits and y in the low 16 bits; the helpers here
implement both schemes.
"""

from typing import Callable, Hashable, Tuple

NodeId = Hashable

# Maps a grid cell (x, y) to a node identifier.
CellEncoder = Callable[[int, int], NodeId]

_COORD_MAX = 0xFFFF


def dash_key(x: int, y: int) -> str:
    """Encode a cell as an "x-y" string key."""
    return f"{x}-{y}"


def parse_dash_key(key: str) -> Tuple[int, int]:
    """Decode an "x-y" key back into (x, y)."""
    parts = key.split("-")
    if len(parts) != 2:
        raise ValueError(f"Malformed cell key: {key!r}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Malformed cell key: {key!r}") from None


def pack_cell(x: int, y: int) -> int:
    """
    Pack a cell into one integer: x in the high 16 bits, y in the low 16.

    Both coordinates must fit in an unsigned 16-bit value.
    """
    if not (0 <= x <= _COORD_MAX and 0 <= y <= _COORD_MAX):
        raise ValueError(f"Cell ({x}, {y}) does not fit in 16-bit coordinates")
    return (x << 16) | y


def unpack_cell(packed: int) -> Tuple[int, int]:
    """Split a packed cell back into (x, y)."""
    if packed < 0 or packed > 0xFFFFFFFF:
        raise ValueError(f"Packed cell out of range: {packed}")
    return packed >> 16, packed & _COORD_MAX
