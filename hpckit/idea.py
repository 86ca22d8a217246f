"""IDEA-style block encryption and decryption of whole files.

Data is processed in independent 8-byte chunks with a 52-word key schedule
derived from a 64-bit user key of eight 16-bit words.
"""

import struct
import sys
from enum import Enum
from pathlib import Path

CHUNK_SIZE = 8
KEY_LENGTH = 52
USERKEY_LENGTH = 8
ROUNDS = 8

_MASK16 = 0xFFFF
_MODULUS = 0x10001
_BLOCK_FORMAT = "<4H"
_USERKEY_FORMAT = "<8h"
USERKEY_BYTES = struct.calcsize(_USERKEY_FORMAT)


class Action(Enum):
    """What to do with the input file."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


def inverse(x):
    """Multiplicative inverse of ``x`` modulo 65537; 0 and 1 map to themselves."""
    if x <= 1:
        return x
    t1 = _MODULUS // x
    y = _MODULUS % x
    if y == 1:
        return (1 - t1) & _MASK16
    t0 = 1
    while True:
        q = x // y
        x = x % y
        t0 += q * t1
        if x == 1:
            return t0
        q = y // x
        y = y % x
        t1 += q * t0
        if y == 1:
            return (1 - t1) & _MASK16


def _check_userkey(userkey):
    userkey = list(userkey)
    if len(userkey) != USERKEY_LENGTH:
        raise ValueError(
            f"user key must have {USERKEY_LENGTH} words, got {len(userkey)}"
        )
    return userkey


def encrypt_key(userkey):
    """Expand an 8-word user key into the 52-word encryption schedule."""
    key = [word & _MASK16 for word in _check_userkey(userkey)]
    for i in range(CHUNK_SIZE, KEY_LENGTH):
        j = i % CHUNK_SIZE
        if j < 6:
            word = (key[i - 7] >> 9) | (key[i - 6] << 7)
        elif j == 6:
            word = (key[i - 7] >> 9) | (key[i - 14] << 7)
        else:
            word = (key[i - 15] >> 9) | (key[i - 14] << 7)
        key.append(word & _MASK16)
    return key


def decrypt_key(userkey):
    """Derive the 52-word decryption schedule from an 8-word user key."""
    z = encrypt_key(userkey)
    key = [0] * KEY_LENGTH

    key[51] = inverse(z[3])
    key[50] = -z[2] & _MASK16
    key[49] = -z[1] & _MASK16
    key[48] = inverse(z[0])

    j = 47
    k = 4
    for _ in range(7):
        key[j] = z[k + 1]
        key[j - 1] = z[k]
        key[j - 2] = inverse(z[k + 5])
        key[j - 3] = -z[k + 3] & _MASK16
        key[j - 4] = -z[k + 4] & _MASK16
        key[j - 5] = inverse(z[k + 2])
        j -= 6
        k += 6

    key[j] = z[k + 1]
    key[j - 1] = z[k]
    key[j - 2] = inverse(z[k + 5])
    key[j - 3] = -z[k + 4] & _MASK16
    key[j - 4] = -z[k + 3] & _MASK16
    key[j - 5] = inverse(z[k + 2])
    return key


def _mul(a, b):
    return ((a * b) % _MODULUS) & _MASK16


def transform_block(block, key):
    """Encrypt or decrypt one 8-byte block with a 52-word key schedule."""
    block = bytes(block)
    if len(block) != CHUNK_SIZE:
        raise ValueError(f"block must be {CHUNK_SIZE} bytes, got {len(block)}")
    if len(key) != KEY_LENGTH:
        raise ValueError(f"key must have {KEY_LENGTH} words, got {len(key)}")

    x1, x2, x3, x4 = struct.unpack(_BLOCK_FORMAT, block)
    subkeys = iter(key)
    for _ in range(ROUNDS):
        x1 = _mul(x1, next(subkeys))
        x2 = (x2 + next(subkeys)) & _MASK16
        x3 = (x3 + next(subkeys)) & _MASK16
        x4 = _mul(x4, next(subkeys))

        t2 = _mul(x1 ^ x3, next(subkeys))
        t1 = _mul((t2 + (x2 ^ x4)) & _MASK16, next(subkeys))
        t2 = (t1 + t2) & _MASK16

        x1 ^= t1
        x4 ^= t2
        t2 ^= x2
        x2 = x3 ^ t1
        x3 = t2

    x1 = _mul(x1, next(subkeys))
    x3 = (x3 + next(subkeys)) & _MASK16
    x2 = (x2 + next(subkeys)) & _MASK16
    x4 = _mul(x4, next(subkeys))
    return struct.pack(_BLOCK_FORMAT, x1, x3, x2, x4)


def transform(data, key):
    """Encrypt or decrypt a byte string whose length is a multiple of 8."""
    data = bytes(data)
    if len(data) % CHUNK_SIZE != 0:
        raise ValueError(
            "Invalid encryption: length of plain must be an even multiple of "
            f"{CHUNK_SIZE} but is {len(data)}"
        )
    return b"".join(
        transform_block(data[start:start + CHUNK_SIZE], key)
        for start in range(0, len(data), CHUNK_SIZE)
    )


def read_userkey(path):
    """Read a user key file of eight little-endian signed 16-bit words."""
    raw = Path(path).read_bytes()
    if len(raw) != USERKEY_BYTES:
        raise ValueError(
            f"Invalid user key file length {len(raw)}, must be {USERKEY_BYTES}"
        )
    return struct.unpack(_USERKEY_FORMAT, raw)


def run(action, input_path, output_path, key_path):
    """Transform ``input_path`` into ``output_path``; return the bytes written."""
    action = Action(action)
    data = Path(input_path).read_bytes()
    userkey = read_userkey(key_path)
    key = encrypt_key(userkey) if action is Action.ENCRYPT else decrypt_key(userkey)
    if len(data) % CHUNK_SIZE != 0:
        raise ValueError(
            f"Invalid input file length {len(data)}, must be evenly divisible "
            f"by {CHUNK_SIZE}"
        )
    result = transform(data, key)
    Path(output_path).write_bytes(result)
    return len(result)


def _parse_action(word):
    for action in Action:
        if word.startswith(action.value):
            return action
    return None


def main(argv=None):
    """Command line: ``<encrypt|decrypt> <file.in> <file.out> <key.file>``."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    if len(argv) != 4:
        print("usage: idea <encrypt|decrypt> <file.in> <file.out> <key.file>")
        return 1

    action = _parse_action(argv[0])
    if action is None:
        print(
            f"The action specified ('{argv[0]}') is not valid. Must be either "
            "'encrypt' or 'decrypt'",
            file=sys.stderr,
        )
        return 1

    try:
        run(action, argv[1], argv[2], argv[3])
    except OSError as exc:
        print(f"Unable to access {exc.filename}: {exc.strerror}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0