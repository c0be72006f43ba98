"""
Header codec for phase sheet files.

A phase sheet starts with two int32 words followed by a fixed-size header:

    |-- flag --||-- size --||-- RawHeader --||-- payload --|

    flag    - (int32) Endianness flag. 0 means little endian, -1 means big
              endian. Both values read the same in either byte order.
    size    - (int32) Size of RawHeader in bytes, in the detected order.
              Checked against RAW_HEADER_SIZE to catch layout drift.
    header  - RawHeader fields in the order of HEADER_FIELDS, unpadded.
    payload - grid_count (x, y, z) float32 triples, see payload.py.

The cosmology block at the front of the header is copied as raw bytes and
never interpreted here.

Example:
    >>> from phase_sheet.io.header import read_header
    >>> hd = read_header("sheet000.dat")
    >>> hd.grid_width, hd.segment_width, hd.n
"""

from __future__ import annotations

import enum
import logging
import struct
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from phase_sheet.errors import FormatError

if TYPE_CHECKING:
    from phase_sheet.core.bounds import CellBounds

logger = logging.getLogger(__name__)


COSMO_SIZE = 32

# (name, struct code, item count). Order is the on-disk order.
HEADER_FIELDS: tuple[tuple[str, str, int], ...] = (
    ("cosmo", f"{COSMO_SIZE}s", 1),
    ("count", "q", 1),
    ("count_width", "q", 1),
    ("segment_width", "q", 1),
    ("grid_width", "q", 1),
    ("grid_count", "q", 1),
    ("idx", "q", 1),
    ("cells", "q", 1),
    ("mass", "d", 1),
    ("total_width", "d", 1),
    ("origin", "f", 3),
    ("width", "f", 3),
    ("velocity_origin", "f", 3),
    ("velocity_width", "f", 3),
)

_FIELD_FORMAT = "".join(
    code if n == 1 else f"{n}{code}" for _, code, n in HEADER_FIELDS
)

# Standard sizes, no alignment: "<" and ">" both give the same value.
RAW_HEADER_SIZE = struct.calcsize("<" + _FIELD_FORMAT)
PREFIX_SIZE = 8
PAYLOAD_OFFSET = PREFIX_SIZE + RAW_HEADER_SIZE
VECTOR_SIZE = 3 * 4


class ByteOrder(enum.Enum):
    LITTLE = "<"
    BIG = ">"

    @property
    def flag(self) -> int:
        """Value of the leading int32 that selects this order."""
        return 0 if self is ByteOrder.LITTLE else -1

    @property
    def prefix(self) -> str:
        return self.value

    @property
    def vector_dtype(self) -> str:
        """numpy dtype string for one float32 vector component."""
        return f"{self.value}f4"


def endianness(flag: int) -> ByteOrder:
    """Convert an endianness flag to a byte order."""
    if flag == 0:
        return ByteOrder.LITTLE
    if flag == -1:
        return ByteOrder.BIG
    raise FormatError(f"Unrecognized endianness flag {flag}.")


Vec3 = tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class RawHeader:
    """
    The header exactly as stored on disk. Instances are immutable; use
    dataclasses.replace() to derive a modified copy.

    Attributes:
        cosmo: Opaque cosmology block, COSMO_SIZE bytes.
        count, count_width: Particle count and its cube root.
        segment_width: Side of the sub-cube handed to callers.
        grid_width: Side of the full cube stored in the file.
        grid_count: Number of stored vectors, grid_width**3.
        idx: Index of this sheet.
        cells: Number of sheets per side of the domain decomposition.
        mass: Particle mass.
        total_width: Width of the whole simulation box.
        origin, width: Bounding box of the positions in this sheet.
        velocity_origin, velocity_width: Bounding box in velocity space.
    """
    cosmo: bytes = bytes(COSMO_SIZE)
    count: int = 0
    count_width: int = 0
    segment_width: int = 0
    grid_width: int = 0
    grid_count: int = 0
    idx: int = 0
    cells: int = 0
    mass: float = 0.0
    total_width: float = 0.0
    origin: Vec3 = (0.0, 0.0, 0.0)
    width: Vec3 = (0.0, 0.0, 0.0)
    velocity_origin: Vec3 = (0.0, 0.0, 0.0)
    velocity_width: Vec3 = (0.0, 0.0, 0.0)

    def pack(self, order: ByteOrder) -> bytes:
        """Encode the header fields in the given byte order."""
        if len(self.cosmo) != COSMO_SIZE:
            raise ValueError(
                f"cosmo block must be {COSMO_SIZE} bytes, got {len(self.cosmo)}"
            )
        values: list = []
        for name, _, n in HEADER_FIELDS:
            value = getattr(self, name)
            if n == 1:
                values.append(value)
            else:
                values.extend(value)
        return struct.pack(order.prefix + _FIELD_FORMAT, *values)

    @classmethod
    def unpack(cls, data: bytes, order: ByteOrder) -> "RawHeader":
        """Decode RAW_HEADER_SIZE bytes in the given byte order."""
        if len(data) != RAW_HEADER_SIZE:
            raise FormatError(
                f"Expected {RAW_HEADER_SIZE} header bytes, found {len(data)}."
            )
        flat = struct.unpack(order.prefix + _FIELD_FORMAT, data)
        kwargs = {}
        i = 0
        for name, _, n in HEADER_FIELDS:
            if n == 1:
                kwargs[name] = flat[i]
            else:
                kwargs[name] = tuple(flat[i:i + n])
            i += n
        return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class Header(RawHeader):
    """
    RawHeader plus the counts derived from it.

    ``count`` is recomputed from ``count_width`` and ``n`` from
    ``segment_width`` whenever a Header is built. Headers are frozen, so the
    derived fields cannot drift from the raw ones.
    """
    n: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "count", self.count_width ** 3)
        object.__setattr__(self, "n", self.segment_width ** 3)

    @classmethod
    def from_raw(cls, raw: RawHeader) -> "Header":
        return cls(**{f.name: getattr(raw, f.name) for f in fields(RawHeader)})

    def raw(self) -> RawHeader:
        return RawHeader(**{f.name: getattr(self, f.name) for f in fields(RawHeader)})

    def cell_bounds(self, cells: int) -> "CellBounds":
        from phase_sheet.core.bounds import cell_bounds

        return cell_bounds(self, cells)


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    """
    Read exactly ``size`` bytes.

    A read that succeeds but comes back short means the file itself is
    truncated, so it is reported as corrupt data (FormatError). Failures of
    the underlying read call still propagate as OSError.
    """
    data = stream.read(size)
    if len(data) != size:
        raise FormatError(
            f"Sheet is truncated (corrupt data, not an I/O failure): {what} needs "
            f"{size} bytes, found {len(data)}."
        )
    return data


def parse_header(stream: BinaryIO) -> tuple[Header, ByteOrder]:
    """
    Decode the flag, size word and header from an open binary stream.

    On return the stream is positioned at PAYLOAD_OFFSET.

    Raises:
        FormatError: Bad flag, wrong header size or a truncated header.
        OSError: The stream could not be read or seeked.
    """
    # Order doesn't matter for this read, the valid flags are symmetric.
    (flag,) = struct.unpack("<i", _read_exact(stream, 4, "endianness flag"))
    order = endianness(flag)

    (header_size,) = struct.unpack(order.prefix + "i", _read_exact(stream, 4, "header size"))
    if header_size != RAW_HEADER_SIZE:
        logger.warning("Header size mismatch: expected %d, found %d", RAW_HEADER_SIZE, header_size)
        raise FormatError(
            f"Expected sheet header size of {RAW_HEADER_SIZE}, found {header_size}."
        )

    stream.seek(PREFIX_SIZE)
    raw = RawHeader.unpack(_read_exact(stream, RAW_HEADER_SIZE, "header"), order)
    return Header.from_raw(raw), order


def open_sheet(path: str | Path) -> tuple[Header, ByteOrder, BinaryIO]:
    """
    Open a sheet and decode its header, leaving the file open.

    The returned handle is positioned at the start of the payload and must be
    closed by the caller. If decoding fails the handle is closed before the
    exception propagates.
    """
    f = open(path, "rb")
    try:
        hd, order = parse_header(f)
    except BaseException:
        f.close()
        raise
    logger.debug(
        "Decoded header of %s: order=%s grid_width=%d segment_width=%d",
        path, order.name, hd.grid_width, hd.segment_width,
    )
    return hd, order, f


def decode_header(path: str | Path) -> tuple[Header, ByteOrder]:
    """Decode the header of the sheet at ``path`` and close the file."""
    hd, order, f = open_sheet(path)
    f.close()
    return hd, order


def read_header(path: str | Path) -> Header:
    """Read only the header of the sheet at ``path``."""
    hd, _ = decode_header(path)
    return hd
