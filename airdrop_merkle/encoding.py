"""Canonical leaf encoding for (address, amount) allocation records.

Packed layout (the default)::

    uint16_be(len(address_utf8)) || address_utf8 || uint{N}_be(amount)

where N is ``TreeConfig.amount_bits`` (128 unless configured otherwise).
The concat layout hashes ``address_utf8 || decimal(amount)`` instead,
matching claim contracts that format the pair as a string.
"""

import re
from typing import Union

from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_abi.packed import encode_packed

from airdrop_merkle.config import DEFAULT_CONFIG, TreeConfig
from airdrop_merkle.errors import EncodingError
from airdrop_merkle.hashing import hash_bytes

BECH32_RE = re.compile(r'^[a-z0-9]+1[qpzry9x8gf2tvdw0s3jn54khce6mua7l]{6,}$')
DECIMAL_RE = re.compile(r'^[0-9]+$')

# 2**256 has 78 decimal digits, the widest amount any layout can hold
MAX_AMOUNT_DIGITS = 78


def validate_address(address: str, config: TreeConfig = DEFAULT_CONFIG) -> str:
    """Check an address structurally and return it unchanged."""
    if not isinstance(address, str):
        raise EncodingError(f'Address must be a string, got {type(address).__name__}')
    if not address:
        raise EncodingError('Address must not be empty')
    if any(ch.isspace() for ch in address):
        raise EncodingError(f'Address {address!r} contains whitespace')
    if config.address_format == 'bech32' and not BECH32_RE.match(address):
        raise EncodingError(f'Address {address!r} is not a bech32 address')
    return address


def parse_amount(value: Union[int, str]) -> int:
    """
    Convert an amount to a non-negative integer.

    Accepts Python ints and decimal digit strings. Floats, booleans, signs,
    separators and exponents are rejected, as are strings with more
    significant digits than a 256-bit amount can have.
    """
    if isinstance(value, bool):
        raise EncodingError(f'Amount must be an integer, got {value!r}')
    if isinstance(value, int):
        amount = value
    elif isinstance(value, str):
        text = value.strip()
        if not DECIMAL_RE.match(text):
            raise EncodingError(f'Amount {value!r} is not a non-negative decimal integer')
        if len(text.lstrip('0')) > MAX_AMOUNT_DIGITS:
            raise EncodingError(f'Amount has more than {MAX_AMOUNT_DIGITS} significant digits')
        amount = int(text)
    else:
        raise EncodingError(f'Amount must be an integer or decimal string, got {type(value).__name__}')
    if amount.bit_length() > 256:
        raise EncodingError('Amount is wider than 256 bits')
    if amount < 0:
        raise EncodingError(f'Amount must not be negative, got {amount}')
    return amount


def leaf_preimage(address: str, amount: Union[int, str], config: TreeConfig = DEFAULT_CONFIG) -> bytes:
    """
    Build the exact bytes that are hashed into a leaf.

    Args:
        address: Recipient address
        amount: Allocation as int or decimal string
        config: Tree configuration selecting layout and amount width

    Returns:
        Canonical pre-image bytes
    """
    address = validate_address(address, config)
    amount = parse_amount(amount)
    if amount >= 1 << config.amount_bits:
        raise EncodingError(f'Amount {amount} does not fit in {config.amount_bits} bits')

    if config.leaf_layout == 'concat':
        return address.encode('utf-8') + str(amount).encode('ascii')

    address_bytes = address.encode('utf-8')
    try:
        return encode_packed(
            ['uint16', 'string', f'uint{config.amount_bits}'],
            [len(address_bytes), address, amount],
        )
    except AbiEncodingError as exc:
        raise EncodingError(f'Cannot encode record ({address!r}, {amount}): {exc}') from exc


def encode_leaf(address: str, amount: Union[int, str], config: TreeConfig = DEFAULT_CONFIG) -> bytes:
    """Hash one allocation record into its leaf digest."""
    return hash_bytes(leaf_preimage(address, amount, config), config)
