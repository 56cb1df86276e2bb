"""Merkle roots and inclusion proofs for airdrop allocation lists."""

__version__ = '0.1.0'

from airdrop_merkle.config import DEFAULT_CONFIG, TreeConfig
from airdrop_merkle.encoding import encode_leaf, leaf_preimage
from airdrop_merkle.errors import (
    EmptyTreeError,
    EncodingError,
    FileReadError,
    MalformedProofError,
    MerkleError,
    NotFoundError,
    ParseError,
)
from airdrop_merkle.loader import Record, find_record, load_records
from airdrop_merkle.tree import MerkleTree, ProofStep, Side
from airdrop_merkle.verifier import compute_root, proof_from_wire, proof_to_wire, verify

__all__ = [
    'DEFAULT_CONFIG',
    'EmptyTreeError',
    'EncodingError',
    'FileReadError',
    'MalformedProofError',
    'MerkleError',
    'MerkleTree',
    'NotFoundError',
    'ParseError',
    'ProofStep',
    'Record',
    'Side',
    'TreeConfig',
    'compute_root',
    'encode_leaf',
    'find_record',
    'leaf_preimage',
    'load_records',
    'proof_from_wire',
    'proof_to_wire',
    'verify',
]
