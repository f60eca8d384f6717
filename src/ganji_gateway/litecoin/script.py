"""Null-data (OP_RETURN) script building and parsing.

Litecoin Core's ``createrawtransaction`` emits ``OP_RETURN <push>`` for a
``"data"`` output, using a direct push for payloads up to 75 bytes and
``OP_PUSHDATA1`` above that. Parsing walks the push opcodes instead of
skipping a fixed prefix so both encodings round-trip.
"""

from __future__ import annotations

import enum
import struct


class OpCode(int, enum.Enum):
    """Opcodes that can appear in a null-data script."""

    OP_0 = 0x00
    OP_PUSHDATA1 = 0x4C
    OP_PUSHDATA2 = 0x4D
    OP_PUSHDATA4 = 0x4E
    OP_RETURN = 0x6A


# Largest length encodable in the opcode byte itself
_MAX_DIRECT_PUSH = 0x4B


class ScriptParseError(ValueError):
    """Raised when a null-data script is malformed."""


def push_data(data: bytes) -> bytes:
    """Encode a data push operation using minimal encoding rules.

    Args:
        data: Arbitrary data bytes.

    Returns:
        The opcode(s) + data for a minimal push of *data*.
    """
    length = len(data)
    if length == 0:
        return bytes([OpCode.OP_0])
    if length <= _MAX_DIRECT_PUSH:
        return bytes([length]) + data
    if length <= 0xFF:
        return bytes([OpCode.OP_PUSHDATA1, length]) + data
    if length <= 0xFFFF:
        return bytes([OpCode.OP_PUSHDATA2]) + struct.pack("<H", length) + data
    return bytes([OpCode.OP_PUSHDATA4]) + struct.pack("<I", length) + data


def nulldata_script(data: bytes) -> bytes:
    """Build ``OP_RETURN <push data>``."""
    return bytes([OpCode.OP_RETURN]) + push_data(data)


def _read_push(script: bytes, pos: int) -> tuple[bytes, int]:
    opcode = script[pos]
    pos += 1
    if opcode == OpCode.OP_0:
        return b"", pos
    if opcode <= _MAX_DIRECT_PUSH:
        length = opcode
    elif opcode == OpCode.OP_PUSHDATA1:
        if pos + 1 > len(script):
            raise ScriptParseError("truncated OP_PUSHDATA1 length")
        length = script[pos]
        pos += 1
    elif opcode == OpCode.OP_PUSHDATA2:
        if pos + 2 > len(script):
            raise ScriptParseError("truncated OP_PUSHDATA2 length")
        (length,) = struct.unpack_from("<H", script, pos)
        pos += 2
    elif opcode == OpCode.OP_PUSHDATA4:
        if pos + 4 > len(script):
            raise ScriptParseError("truncated OP_PUSHDATA4 length")
        (length,) = struct.unpack_from("<I", script, pos)
        pos += 4
    else:
        msg = f"unexpected opcode 0x{opcode:02x} in null-data script"
        raise ScriptParseError(msg)

    end = pos + length
    if end > len(script):
        msg = f"push of {length} bytes overruns script"
        raise ScriptParseError(msg)
    return script[pos:end], end


def extract_nulldata(script_hex: str) -> bytes:
    """Return the bytes pushed after ``OP_RETURN``.

    Multiple pushes are concatenated; a bare ``OP_RETURN`` yields ``b""``.

    Raises:
        ScriptParseError: If the script is not a well-formed null-data script.
    """
    try:
        script = bytes.fromhex(script_hex)
    except ValueError as exc:
        raise ScriptParseError("script is not valid hex") from exc

    if not script or script[0] != OpCode.OP_RETURN:
        raise ScriptParseError("script does not start with OP_RETURN")

    payload = bytearray()
    pos = 1
    while pos < len(script):
        chunk, pos = _read_push(script, pos)
        payload.extend(chunk)
    return bytes(payload)
