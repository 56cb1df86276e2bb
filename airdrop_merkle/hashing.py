"""Hash primitives shared by tree construction and proof verification."""

import hashlib
from typing import Callable, Dict

from eth_utils import decode_hex, keccak

from airdrop_merkle.config import DEFAULT_CONFIG, TreeConfig

DIGEST_SIZE = 32


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    return keccak(data)


HASH_FUNCTIONS: Dict[str, Callable[[bytes], bytes]] = {
    'sha256': sha256,
    'keccak256': keccak256,
}


def hash_bytes(data: bytes, config: TreeConfig = DEFAULT_CONFIG) -> bytes:
    """Hash arbitrary bytes with the configured function."""
    return HASH_FUNCTIONS[config.hash_name](data)


def hash_pair(left: bytes, right: bytes, config: TreeConfig = DEFAULT_CONFIG) -> bytes:
    """
    Hash two sibling nodes into their parent.

    Positional mode keeps the tree order, so callers must pass the left child
    first. Sorted mode orders the pair byte-wise before hashing, which makes
    the result independent of argument order.

    Args:
        left: Digest of the left child
        right: Digest of the right child
        config: Tree configuration

    Returns:
        Parent digest
    """
    if config.sorted_pairs and left > right:
        left, right = right, left
    return hash_bytes(left + right, config)


def bytes_to_hex(data: bytes) -> str:
    """Lowercase hex without a 0x prefix, as used on the command line."""
    return data.hex()


def hex_to_digest(value: str) -> bytes:
    """
    Decode a hex digest, accepting an optional 0x prefix.

    Raises ValueError if the string is not hex or does not decode to
    DIGEST_SIZE bytes.
    """
    try:
        digest = decode_hex(value.strip())
    except (TypeError, ValueError, AttributeError) as exc:
        raise ValueError(f'Invalid hex digest {value!r}') from exc
    if len(digest) != DIGEST_SIZE:
        raise ValueError(f'Digest must be {DIGEST_SIZE} bytes, got {len(digest)}')
    return digest
