"""Models of the AVX2 gather and 64-bit lane permute on four doubles."""

import struct
import sys

LANES = 4
_VALID_SCALES = (1, 2, 4, 8)
_DOUBLE = struct.Struct("<d")

GATHER_BASE = tuple(float(v) for v in range(1, 29)) + (0.0,) * 4
GATHER_INDICES = (0, 8, 12, 36)
GATHER_SCALE = 4
PERMUTE_VALUES = (9.0, 22.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0)
PERMUTE_IMM8 = 0b11000111


def gather_pd(base, indices, scale):
    """Load four doubles from byte offsets ``index * scale`` into ``base``."""
    if scale not in _VALID_SCALES:
        raise ValueError(f"scale must be one of {_VALID_SCALES}, got {scale}")
    indices = list(indices)
    if len(indices) != LANES:
        raise ValueError(f"expected {LANES} indices, got {len(indices)}")
    raw = struct.pack(f"<{len(base)}d", *base)
    result = []
    for index in indices:
        offset = index * scale
        if offset < 0 or offset + _DOUBLE.size > len(raw):
            raise IndexError(f"byte offset {offset} outside {len(raw)}-byte base")
        result.append(_DOUBLE.unpack_from(raw, offset)[0])
    return tuple(result)


def permute4x64_pd(values, imm8):
    """Select each output lane ``i`` from lane ``(imm8 >> 2i) & 3`` of ``values``."""
    if not 0 <= imm8 <= 0xFF:
        raise ValueError(f"imm8 must be in 0..255, got {imm8}")
    values = tuple(values)[:LANES]
    if len(values) != LANES:
        raise ValueError(f"expected at least {LANES} values")
    return tuple(values[(imm8 >> (2 * lane)) & 3] for lane in range(LANES))


def _print_lanes(values):
    print("".join(f"{value:.5f} " for value in values))


def main(argv=None):
    """Print the gather example, then the permute input and output."""
    if argv is None:
        argv = sys.argv[1:]
    if list(argv):
        print("usage: simd")
        return 1
    _print_lanes(gather_pd(GATHER_BASE, GATHER_INDICES, GATHER_SCALE))
    _print_lanes(PERMUTE_VALUES[:LANES])
    _print_lanes(permute4x64_pd(PERMUTE_VALUES, PERMUTE_IMM8))
    return 0