"""Array-backed Merkle tree over allocation leaves.

Levels are built bottom-up: level 0 holds the leaves in input order and each
following level pairs adjacent nodes left to right. When a level has an odd
number of nodes, the last node is paired with a copy of itself.
"""

import logging
from enum import Enum
from typing import Iterable, List, NamedTuple, Sequence, Tuple, Union

from airdrop_merkle.config import DEFAULT_CONFIG, TreeConfig
from airdrop_merkle.encoding import encode_leaf
from airdrop_merkle.errors import EmptyTreeError, EncodingError, NotFoundError
from airdrop_merkle.hashing import DIGEST_SIZE, bytes_to_hex, hash_pair

logger = logging.getLogger(__name__)


class Side(str, Enum):
    """Position of a sibling relative to the node on the proof path."""

    LEFT = 'left'
    RIGHT = 'right'


class ProofStep(NamedTuple):
    sibling: bytes
    side: Side


Proof = List[ProofStep]


class MerkleTree:
    """
    Immutable Merkle tree.

    Usage:
        tree = MerkleTree.build(leaves)
        root = tree.root()
        proof = tree.proof_for(0)
    """

    def __init__(self, levels: Tuple[Tuple[bytes, ...], ...], config: TreeConfig = DEFAULT_CONFIG) -> None:
        self._levels = levels
        self.config = config

    @classmethod
    def build(cls, leaves: Sequence[bytes], config: TreeConfig = DEFAULT_CONFIG) -> 'MerkleTree':
        """
        Build a tree from leaf digests in the given order.

        Args:
            leaves: Leaf digests, DIGEST_SIZE bytes each
            config: Tree configuration (hash and pair order)

        Returns:
            The built tree
        """
        if not leaves:
            raise EmptyTreeError('Cannot build tree from empty leaves')
        for i, leaf in enumerate(leaves):
            if not isinstance(leaf, bytes) or len(leaf) != DIGEST_SIZE:
                raise EncodingError(f'Leaf {i} must be {DIGEST_SIZE} bytes')

        levels = [tuple(leaves)]
        while len(levels[-1]) > 1:
            current = levels[-1]
            next_level = []
            for i in range(0, len(current), 2):
                left = current[i]
                right = current[i + 1] if i + 1 < len(current) else left
                next_level.append(hash_pair(left, right, config))
            levels.append(tuple(next_level))

        logger.debug('Built tree over %d leaves, depth %d', len(leaves), len(levels) - 1)
        return cls(tuple(levels), config)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Tuple[str, Union[int, str]]],
        config: TreeConfig = DEFAULT_CONFIG,
    ) -> 'MerkleTree':
        """Encode (address, amount) records into leaves and build the tree."""
        leaves = []
        for i, (address, amount) in enumerate(records):
            try:
                leaves.append(encode_leaf(address, amount, config))
            except EncodingError as exc:
                raise EncodingError(f'Entry {i}: {exc}') from exc
        return cls.build(leaves, config)

    @property
    def levels(self) -> Tuple[Tuple[bytes, ...], ...]:
        return self._levels

    @property
    def leaves(self) -> Tuple[bytes, ...]:
        return self._levels[0]

    @property
    def leaf_count(self) -> int:
        return len(self._levels[0])

    @property
    def depth(self) -> int:
        return len(self._levels) - 1

    def root(self) -> bytes:
        return self._levels[-1][0]

    def root_hex(self) -> str:
        return bytes_to_hex(self.root())

    def index_of(self, leaf: bytes) -> int:
        """Return the index of the first occurrence of *leaf*."""
        try:
            return self._levels[0].index(leaf)
        except ValueError:
            raise NotFoundError(f'Leaf {bytes_to_hex(leaf)} is not in the tree') from None

    def proof_for(self, index: int) -> Proof:
        """
        Collect the sibling path from the leaf at *index* up to the root.

        Each step records the sibling digest and whether it sits to the left
        or right of the path node. An unpaired last node is its own right
        sibling.
        """
        if not 0 <= index < self.leaf_count:
            raise IndexError(f'Leaf index {index} out of range for {self.leaf_count} leaves')

        proof: Proof = []
        position = index
        for level in self._levels[:-1]:
            if position % 2 == 0:
                sibling_position = position + 1
                if sibling_position >= len(level):
                    sibling_position = position
                proof.append(ProofStep(level[sibling_position], Side.RIGHT))
            else:
                proof.append(ProofStep(level[position - 1], Side.LEFT))
            position //= 2
        return proof

    def __len__(self) -> int:
        return self.leaf_count

    def __repr__(self) -> str:
        return f'MerkleTree(leaves={self.leaf_count}, root={self.root_hex()})'
