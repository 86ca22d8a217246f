"""Generators for sample input data and a secret user key."""

import re
import struct
import sys
from pathlib import Path

from hpckit.crand import GlibcRandom

DATA_CHUNK_SIZE = 1024
SECRET_KEY_LENGTH = 8
DEFAULT_KEY_SEED = 3899
_USERKEY_FORMAT = "<8h"


def sample_data(length):
    """Return ``length`` bytes of sample data; ``length`` must divide by 8."""
    if length % 8 != 0:
        raise ValueError(
            f"The specified length ({length}) must be evenly divisible by 8"
        )
    return bytes(
        (start * DATA_CHUNK_SIZE + offset) & 0xFF
        for start in range(0, max(length, 0), DATA_CHUNK_SIZE)
        for offset in range(min(DATA_CHUNK_SIZE, length - start))
    )


def generate_userkey(seed=DEFAULT_KEY_SEED):
    """Return eight signed 16-bit words drawn from a seeded ``rand()``."""
    gen = GlibcRandom(seed)
    words = []
    for _ in range(SECRET_KEY_LENGTH):
        value = gen.rand() & 0xFFFF
        words.append(value - 0x10000 if value & 0x8000 else value)
    return tuple(words)


def write_sample_data(path, length):
    """Write sample data of ``length`` bytes to ``path``."""
    data = sample_data(length)
    Path(path).write_bytes(data)
    return len(data)


def write_userkey(path):
    """Write the default user key to ``path`` as little-endian words."""
    Path(path).write_bytes(struct.pack(_USERKEY_FORMAT, *generate_userkey()))


def _atoi(text):
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def main_data(argv=None):
    """Command line: ``<output-file> <output-file-length>``."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    if len(argv) != 2:
        print("usage: generate-data <output-file> <output-file-length>")
        return 1
    try:
        write_sample_data(argv[0], _atoi(argv[1]))
    except OSError:
        print(f"Failed opening {argv[0]} for writing", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


def main_userkey(argv=None):
    """Command line: ``<output-file>``."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    if len(argv) != 1:
        print("usage: generate-userkey <output-file>")
        return 1
    try:
        write_userkey(argv[0])
    except OSError:
        print(f"Error opening {argv[0]} for writing", file=sys.stderr)
        return 1
    return 0