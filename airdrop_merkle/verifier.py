"""Proof verification and the proof wire format.

On the wire a proof is a JSON array of steps, ordered from the leaf level
upwards::

    [{"hash": "<64 lowercase hex chars>", "side": "left" | "right"}, ...]

``side`` tells on which side of the running digest the sibling is placed
before hashing. With sorted pair hashing the side cannot change the result,
so bare hex strings are accepted as steps in that mode only.
"""

import json
from typing import Any, Dict, List, Sequence, Union

from airdrop_merkle.config import DEFAULT_CONFIG, TreeConfig
from airdrop_merkle.errors import MalformedProofError
from airdrop_merkle.hashing import DIGEST_SIZE, bytes_to_hex, hash_pair, hex_to_digest
from airdrop_merkle.tree import Proof, ProofStep, Side


def _check_digest(value: Any, what: str) -> bytes:
    if not isinstance(value, (bytes, bytearray)) or len(value) != DIGEST_SIZE:
        raise MalformedProofError(f'{what} must be {DIGEST_SIZE} bytes')
    return bytes(value)


def _check_side(value: Any, position: int) -> Side:
    try:
        return Side(value)
    except ValueError:
        raise MalformedProofError(f'Proof step {position} has invalid side flag {value!r}') from None


def compute_root(leaf: bytes, proof: Sequence[ProofStep], config: TreeConfig = DEFAULT_CONFIG) -> bytes:
    """
    Fold a proof over a leaf and return the resulting root.

    Args:
        leaf: Leaf digest
        proof: Sibling steps from the leaf level upwards
        config: Tree configuration used when the proof was generated

    Returns:
        Recomputed root digest
    """
    current = _check_digest(leaf, 'Leaf')
    for position, step in enumerate(proof):
        try:
            sibling, side = step
        except (TypeError, ValueError):
            raise MalformedProofError(f'Proof step {position} must be a (sibling, side) pair') from None
        sibling = _check_digest(sibling, f'Proof step {position} sibling')
        if _check_side(side, position) is Side.RIGHT:
            current = hash_pair(current, sibling, config)
        else:
            current = hash_pair(sibling, current, config)
    return current


def verify(
    leaf: bytes,
    proof: Sequence[ProofStep],
    claimed_root: bytes,
    config: TreeConfig = DEFAULT_CONFIG,
) -> bool:
    """Return True if *proof* links *leaf* to *claimed_root*."""
    claimed_root = _check_digest(claimed_root, 'Root')
    return compute_root(leaf, proof, config) == claimed_root


def proof_to_wire(proof: Sequence[ProofStep]) -> List[Dict[str, str]]:
    """Convert a proof into JSON-ready dicts."""
    return [{'hash': bytes_to_hex(step.sibling), 'side': Side(step.side).value} for step in proof]


def proof_from_wire(data: Union[str, Sequence[Any]], config: TreeConfig = DEFAULT_CONFIG) -> Proof:
    """
    Parse a proof from its wire form.

    Args:
        data: JSON text or an already decoded list of steps
        config: Tree configuration; bare hex steps need sorted pair hashing

    Returns:
        Parsed proof
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise MalformedProofError(f'Proof is not valid JSON: {exc}') from exc
    if not isinstance(data, list):
        raise MalformedProofError('Proof must be a JSON array')

    proof: Proof = []
    for position, item in enumerate(data):
        if isinstance(item, dict):
            if 'side' not in item:
                raise MalformedProofError(f'Proof step {position} is missing its side flag')
            raw_hash, side = item.get('hash'), _check_side(item['side'], position)
        elif isinstance(item, str) and config.sorted_pairs:
            raw_hash, side = item, Side.RIGHT
        elif isinstance(item, str):
            raise MalformedProofError(
                f'Proof step {position} is missing its side flag (bare hashes need sorted pair order)'
            )
        else:
            raise MalformedProofError(f'Proof step {position} must be an object or hex string')

        if not isinstance(raw_hash, str):
            raise MalformedProofError(f'Proof step {position} is missing its hash')
        try:
            sibling = hex_to_digest(raw_hash)
        except ValueError as exc:
            raise MalformedProofError(f'Proof step {position}: {exc}') from exc
        proof.append(ProofStep(sibling, side))
    return proof
