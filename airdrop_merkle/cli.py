"""
Command-line interface: build Merkle roots and proofs for airdrop allocation lists.

Exit codes:
    0  success, or the proof verified
    1  the proof did not verify
    2  usage error
    3  file could not be read or written
    4  malformed input (allocation file, address, amount or proof)
    5  address and amount not present in the allocation list
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from airdrop_merkle import __version__
from airdrop_merkle.config import ADDRESS_FORMATS, HASH_NAMES, LEAF_LAYOUTS, PAIR_ORDERS, TreeConfig
from airdrop_merkle.encoding import encode_leaf
from airdrop_merkle.errors import (
    EXIT_OK,
    EXIT_PROOF_INVALID,
    FileReadError,
    MalformedProofError,
    MerkleError,
)
from airdrop_merkle.hashing import bytes_to_hex, hex_to_digest
from airdrop_merkle.loader import Record, find_record, load_records
from airdrop_merkle.tree import MerkleTree
from airdrop_merkle.verifier import proof_from_wire, proof_to_wire, verify

logger = logging.getLogger(__name__)


def _load_tree(path: str, config: TreeConfig) -> Tuple[List[Record], MerkleTree]:
    records = load_records(path)
    logger.info('Loaded %d entries', len(records))
    tree = MerkleTree.from_records(records, config)
    logger.info('Merkle root: %s', tree.root_hex())
    logger.info('Tree depth: %d', tree.depth)
    return records, tree


def _dump(data: Any, pretty: bool) -> str:
    return json.dumps(data, indent=2 if pretty else None)


def generate_json_output(records: List[Record], tree: MerkleTree) -> Dict[str, Any]:
    """Describe the whole tree: root, settings and a proof for every allocation."""
    allocations = []
    for i, record in enumerate(records):
        allocations.append({
            'address': record.address,
            'amount': str(record.amount),
            'leaf': bytes_to_hex(tree.leaves[i]),
            'proof': proof_to_wire(tree.proof_for(i)),
        })

    return {
        'root_hash': tree.root_hex(),
        'config': tree.config.describe(),
        'leaf_count': tree.leaf_count,
        'allocations': allocations,
    }


def cmd_generate_root(args: argparse.Namespace, config: TreeConfig) -> int:
    _, tree = _load_tree(args.file, config)
    print(tree.root_hex())
    return EXIT_OK


def cmd_generate_proofs(args: argparse.Namespace, config: TreeConfig) -> int:
    records, tree = _load_tree(args.file, config)
    index = find_record(records, args.address, args.amount)
    logger.info('Found allocation at index %d', index)
    print(_dump(proof_to_wire(tree.proof_for(index)), args.pretty))
    return EXIT_OK


def cmd_verify_proofs(args: argparse.Namespace, config: TreeConfig) -> int:
    _, tree = _load_tree(args.file, config)
    if args.root is not None:
        try:
            root = hex_to_digest(args.root)
        except ValueError as e:
            raise MalformedProofError(f'Invalid root: {e}') from e
    else:
        root = tree.root()

    leaf = encode_leaf(args.address, args.amount, config)
    proof = proof_from_wire(args.proofs, config)
    valid = verify(leaf, proof, root, config)
    logger.info('Leaf %s against root %s: %s', bytes_to_hex(leaf), bytes_to_hex(root), valid)
    print('true' if valid else 'false')
    return EXIT_OK if valid else EXIT_PROOF_INVALID


def cmd_export_tree(args: argparse.Namespace, config: TreeConfig) -> int:
    records, tree = _load_tree(args.file, config)
    json_str = _dump(generate_json_output(records, tree), args.pretty)

    if args.output:
        try:
            Path(args.output).write_text(json_str, encoding='utf-8')
        except OSError as e:
            raise FileReadError(f"Cannot write '{args.output}': {e}") from e
        logger.info('Output written to %s', args.output)
    else:
        print(json_str)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='airdrop-merkle',
        description='Generate Merkle roots and proofs for airdrop allocation lists',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output on stderr')
    parser.add_argument('--hash', dest='hash_name', choices=HASH_NAMES, default='sha256',
                        help='Hash function for leaves and nodes (default: sha256)')
    parser.add_argument('--leaf-layout', choices=LEAF_LAYOUTS, default='packed',
                        help='Leaf byte layout (default: packed)')
    parser.add_argument('--pair-order', choices=PAIR_ORDERS, default='positional',
                        help='Child order when hashing a pair (default: positional)')
    parser.add_argument('--address-format', choices=ADDRESS_FORMATS, default='bech32',
                        help='Address check applied to every record (default: bech32)')
    parser.add_argument('--amount-bits', type=int, choices=range(8, 257, 8), default=128,
                        metavar='BITS', help='Width of the packed amount field (default: 128)')

    commands = parser.add_subparsers(dest='command', metavar='command')
    commands.required = True

    root_cmd = commands.add_parser('generateRoot', help='Print the Merkle root of an allocation file')
    root_cmd.add_argument('-f', '--file', required=True, help='Allocation file (JSON, or CSV by suffix)')
    root_cmd.set_defaults(handler=cmd_generate_root)

    proofs_cmd = commands.add_parser('generateProofs', help='Print the proof for one allocation')
    proofs_cmd.add_argument('-f', '--file', required=True, help='Allocation file (JSON, or CSV by suffix)')
    proofs_cmd.add_argument('--address', required=True, help='Recipient address')
    proofs_cmd.add_argument('--amount', required=True, help='Allocated amount (decimal integer)')
    proofs_cmd.add_argument('-p', '--pretty', action='store_true', help='Pretty print JSON')
    proofs_cmd.set_defaults(handler=cmd_generate_proofs)

    verify_cmd = commands.add_parser('verifyProofs', help='Verify a proof for one allocation')
    verify_cmd.add_argument('-f', '--file', required=True, help='Allocation file (JSON, or CSV by suffix)')
    verify_cmd.add_argument('--address', required=True, help='Recipient address')
    verify_cmd.add_argument('--amount', required=True, help='Allocated amount (decimal integer)')
    verify_cmd.add_argument('--proofs', required=True, help='Proof as a JSON array')
    verify_cmd.add_argument('--root', help="Verify against this hex root instead of the file's root")
    verify_cmd.set_defaults(handler=cmd_verify_proofs)

    export_cmd = commands.add_parser('exportTree', help='Write the root and every proof as JSON')
    export_cmd.add_argument('-f', '--file', required=True, help='Allocation file (JSON, or CSV by suffix)')
    export_cmd.add_argument('-o', '--output', help='Output JSON file path')
    export_cmd.add_argument('-p', '--pretty', action='store_true', help='Pretty print JSON')
    export_cmd.set_defaults(handler=cmd_export_tree)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, run one command and return its exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    config = TreeConfig(
        hash_name=args.hash_name,
        leaf_layout=args.leaf_layout,
        pair_order=args.pair_order,
        address_format=args.address_format,
        amount_bits=args.amount_bits,
    )

    try:
        return args.handler(args, config)
    except MerkleError as e:
        print(f'Error: {e}', file=sys.stderr)
        return e.exit_code
