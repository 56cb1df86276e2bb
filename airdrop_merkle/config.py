"""Tree configuration: the byte-level contract between builders and verifiers.

Two implementations agree on a root only if they agree on every field here,
so the defaults are the canonical encoding and must not change without a
version bump.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Union

WIRE_VERSION = 1

HASH_NAMES = ('sha256', 'keccak256')
LEAF_LAYOUTS = ('packed', 'concat')
PAIR_ORDERS = ('positional', 'sorted')
ADDRESS_FORMATS = ('bech32', 'any')


@dataclass(frozen=True)
class TreeConfig:
    """
    Encoding and hashing choices for leaves and internal nodes.

    Attributes:
        hash_name: 256-bit hash applied to leaves and node pairs
        leaf_layout: "packed" (length-prefixed address + fixed-width amount)
            or "concat" (address string followed by decimal amount)
        pair_order: "positional" hashes left || right as laid out in the tree,
            "sorted" hashes the byte-wise smaller child first
        address_format: "bech32" for a structural bech32 check, "any" for
            any non-empty string without whitespace
        amount_bits: width of the big-endian amount field in the packed layout
    """

    hash_name: str = 'sha256'
    leaf_layout: str = 'packed'
    pair_order: str = 'positional'
    address_format: str = 'bech32'
    amount_bits: int = 128

    def __post_init__(self) -> None:
        if self.hash_name not in HASH_NAMES:
            raise ValueError(f'Unsupported hash {self.hash_name!r}, expected one of {HASH_NAMES}')
        if self.leaf_layout not in LEAF_LAYOUTS:
            raise ValueError(f'Unsupported leaf layout {self.leaf_layout!r}, expected one of {LEAF_LAYOUTS}')
        if self.pair_order not in PAIR_ORDERS:
            raise ValueError(f'Unsupported pair order {self.pair_order!r}, expected one of {PAIR_ORDERS}')
        if self.address_format not in ADDRESS_FORMATS:
            raise ValueError(
                f'Unsupported address format {self.address_format!r}, expected one of {ADDRESS_FORMATS}'
            )
        if isinstance(self.amount_bits, bool) or not isinstance(self.amount_bits, int):
            raise ValueError(f'amount_bits must be an integer, got {self.amount_bits!r}')
        if self.amount_bits % 8 or not 8 <= self.amount_bits <= 256:
            raise ValueError(f'amount_bits must be a multiple of 8 between 8 and 256, got {self.amount_bits}')

    @property
    def sorted_pairs(self) -> bool:
        return self.pair_order == 'sorted'

    def describe(self) -> Dict[str, Union[str, int]]:
        """Return the settings as a plain dict, tagged with the wire version."""
        data: Dict[str, Union[str, int]] = {'version': WIRE_VERSION}
        data.update(asdict(self))
        return data


DEFAULT_CONFIG = TreeConfig()
