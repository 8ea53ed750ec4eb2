"""ABI encoding of constructor arguments.

Only static types are supported: ``address``, ``bool``, ``uint<N>``,
``int<N>`` and ``bytes<N>``. Each value is encoded as one 32-byte word
and the words are concatenated in argument order.
"""

import re
from typing import Any, List, Sequence

from cds.domain.models import normalize_address
from cds.application.services.exceptions import AbiEncodingError

WORD_SIZE = 32

_INT_TYPE = re.compile(r"^(u?)int(\d*)$")
_BYTES_TYPE = re.compile(r"^bytes(\d+)$")


def _encode_int(abi_type: str, value: Any, signed: bool, bits: int) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise AbiEncodingError(f"{abi_type} expects an int, got {value!r}")
    if signed:
        low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    else:
        low, high = 0, 2**bits - 1
    if not low <= value <= high:
        raise AbiEncodingError(f"{value} is out of range for {abi_type}")
    return (value % 2 ** (WORD_SIZE * 8)).to_bytes(WORD_SIZE, "big")


def _encode_bytes(abi_type: str, value: Any, size: int) -> bytes:
    if isinstance(value, str):
        text = value[2:] if value.startswith("0x") else value
        try:
            value = bytes.fromhex(text)
        except ValueError as e:
            raise AbiEncodingError(f"{abi_type} expects hex, got {value!r}") from e
    if not isinstance(value, (bytes, bytearray)):
        raise AbiEncodingError(f"{abi_type} expects bytes, got {value!r}")
    if len(value) > size:
        raise AbiEncodingError(f"{len(value)} bytes do not fit in {abi_type}")
    return bytes(value).ljust(WORD_SIZE, b"\x00")


def encode_value(abi_type: str, value: Any) -> bytes:
    """Encode one value as a 32-byte word.

    Raises:
        AbiEncodingError: If the type is unsupported or the value does not fit
    """
    if abi_type == "address":
        try:
            address = normalize_address(value)
        except ValueError as e:
            raise AbiEncodingError(str(e)) from e
        return bytes.fromhex(address[2:]).rjust(WORD_SIZE, b"\x00")

    if abi_type == "bool":
        if not isinstance(value, bool):
            raise AbiEncodingError(f"bool expects True or False, got {value!r}")
        return int(value).to_bytes(WORD_SIZE, "big")

    match = _INT_TYPE.match(abi_type)
    if match:
        bits = int(match.group(2) or 256)
        if bits % 8 or not 8 <= bits <= 256:
            raise AbiEncodingError(f"Invalid integer type: {abi_type}")
        return _encode_int(abi_type, value, signed=not match.group(1), bits=bits)

    match = _BYTES_TYPE.match(abi_type)
    if match:
        size = int(match.group(1))
        if not 1 <= size <= WORD_SIZE:
            raise AbiEncodingError(f"Invalid fixed bytes type: {abi_type}")
        return _encode_bytes(abi_type, value, size)

    raise AbiEncodingError(f"Unsupported constructor argument type: {abi_type}")


def encode_constructor_args(types: Sequence[str], values: Sequence[Any]) -> str:
    """Encode constructor arguments as a hex string without 0x prefix.

    Args:
        types: ABI types of the constructor inputs
        values: Argument values, one per type

    Returns:
        Hex string to append to the creation bytecode

    Raises:
        AbiEncodingError: On arity mismatch or an unencodable value
    """
    if len(types) != len(values):
        raise AbiEncodingError(
            f"Constructor takes {len(types)} argument(s), got {len(values)}"
        )
    words: List[bytes] = [encode_value(t, v) for t, v in zip(types, values)]
    return b"".join(words).hex()
