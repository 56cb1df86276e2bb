"""Proof verification and the proof wire format."""

import json

import pytest

from airdrop_merkle import (
    MalformedProofError,
    MerkleTree,
    ProofStep,
    Side,
    TreeConfig,
    compute_root,
    proof_from_wire,
    proof_to_wire,
    verify,
)


@pytest.fixture
def tree(make_leaves):
    return MerkleTree.build(make_leaves(5))


def test_compute_root_matches_tree(tree):
    assert compute_root(tree.leaves[3], tree.proof_for(3)) == tree.root()


def test_wrong_leaf_fails(tree):
    assert verify(tree.leaves[1], tree.proof_for(0), tree.root()) is False


def test_wrong_root_fails(tree):
    assert verify(tree.leaves[0], tree.proof_for(0), b'\x00' * 32) is False


def test_single_byte_mutation_fails(tree):
    """Flipping any byte of any sibling breaks the proof."""
    for index in range(tree.leaf_count):
        proof = tree.proof_for(index)
        for step_no, step in enumerate(proof):
            for byte_no in range(32):
                sibling = bytearray(step.sibling)
                sibling[byte_no] ^= 0x01
                mutated = list(proof)
                mutated[step_no] = ProofStep(bytes(sibling), step.side)
                assert not verify(tree.leaves[index], mutated, tree.root())


def test_flipped_side_fails(tree):
    proof = tree.proof_for(0)
    flipped = [ProofStep(step.sibling, Side.LEFT if step.side is Side.RIGHT else Side.RIGHT) for step in proof]
    assert not verify(tree.leaves[0], flipped, tree.root())


def test_flipped_side_ignored_when_sorted(make_leaves):
    config = TreeConfig(pair_order='sorted')
    tree = MerkleTree.build(make_leaves(4), config)
    proof = tree.proof_for(1)
    flipped = [ProofStep(step.sibling, Side.RIGHT) for step in proof]
    assert verify(tree.leaves[1], flipped, tree.root(), config)


def test_side_as_string(tree):
    proof = [(step.sibling, step.side.value) for step in tree.proof_for(2)]
    assert verify(tree.leaves[2], proof, tree.root())


@pytest.mark.parametrize('side', [None, 'up', '', 1])
def test_invalid_side(tree, side):
    proof = [(step.sibling, side) for step in tree.proof_for(0)]
    with pytest.raises(MalformedProofError):
        verify(tree.leaves[0], proof, tree.root())


def test_wrong_digest_lengths(tree):
    proof = tree.proof_for(0)
    with pytest.raises(MalformedProofError):
        verify(tree.leaves[0][:31], proof, tree.root())
    with pytest.raises(MalformedProofError):
        verify(tree.leaves[0], proof, tree.root() + b'\x00')
    with pytest.raises(MalformedProofError):
        verify(tree.leaves[0], [ProofStep(b'\x01' * 20, Side.LEFT)], tree.root())


def test_step_must_be_pair(tree):
    with pytest.raises(MalformedProofError):
        verify(tree.leaves[0], [b'\x01' * 32], tree.root())


def test_wire_format(tree):
    wire = proof_to_wire(tree.proof_for(4))
    assert wire[0] == {'hash': tree.leaves[4].hex(), 'side': 'right'}
    assert wire[-1]['side'] == 'left'
    assert all(step['hash'] == step['hash'].lower() for step in wire)
    assert proof_from_wire(json.dumps(wire)) == tree.proof_for(4)
    assert proof_from_wire(wire) == tree.proof_for(4)


def test_wire_accepts_0x_prefix(tree):
    wire = [{'hash': '0x' + step['hash'], 'side': step['side']} for step in proof_to_wire(tree.proof_for(1))]
    assert verify(tree.leaves[1], proof_from_wire(wire), tree.root())


def test_bare_hashes_need_sorted_pairs(make_leaves):
    leaves = make_leaves(3)
    bare = [step['hash'] for step in proof_to_wire(MerkleTree.build(leaves).proof_for(0))]
    with pytest.raises(MalformedProofError):
        proof_from_wire(bare)

    config = TreeConfig(pair_order='sorted')
    tree = MerkleTree.build(leaves, config)
    bare = [step['hash'] for step in proof_to_wire(tree.proof_for(0))]
    assert verify(leaves[0], proof_from_wire(bare, config), tree.root(), config)


@pytest.mark.parametrize(
    'data',
    [
        'not json',
        '{"hash": "00"}',
        [{'hash': '00' * 32}],
        [{'hash': '00' * 32, 'side': 'middle'}],
        [{'hash': '00' * 31, 'side': 'left'}],
        [{'hash': 'zz' * 32, 'side': 'left'}],
        [{'side': 'left'}],
        [42],
    ],
)
def test_malformed_wire(data):
    with pytest.raises(MalformedProofError):
        proof_from_wire(data)


def test_empty_wire_proof():
    assert proof_from_wire('[]') == []
