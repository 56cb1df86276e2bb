import hashlib
import json

import pytest


@pytest.fixture
def alice():
    return 'wasm1k9ts0rn2f2ua8xvqdx7l6mzjwsd5j3p2gv0rzd'


@pytest.fixture
def bob():
    return 'wasm1uy9ucvgerneekxpnfwyfnsxlv6kd6xkdjqge5e'


@pytest.fixture
def carol():
    return 'wasm1a7fg0sh2d4m5c6j8xqrz3ntvwpl9kyue2hdz8c'


@pytest.fixture
def make_leaves():
    """Factory for distinct 32-byte digests standing in for encoded records."""
    def _make(count):
        return [hashlib.sha256(bytes([i])).digest() for i in range(count)]
    return _make


@pytest.fixture
def allocation_file(tmp_path, alice, bob):
    path = tmp_path / 'airdrop.json'
    path.write_text(json.dumps([
        {'address': alice, 'amount': '100'},
        {'address': bob, 'amount': '1010'},
    ]))
    return path
