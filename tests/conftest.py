import os
import sys

import pytest


# Ensure the repository root is on sys.path for tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from revote import crypto  # noqa: E402
from revote.ledger import ConfidentialRevote  # noqa: E402


FEE = 100
LAYER2 = ["arbitrum", "optimism", "starknet"]


@pytest.fixture
def ledger():
    return ConfidentialRevote(creation_fee=FEE)


@pytest.fixture
def keys(ledger):
    """One ElGamal keypair per named participant, in the ledger's group"""
    params = ledger.network_key.params
    return {name: crypto.elgamal_keygen(params) for name in ("alice", "bob", "carol", "dave")}


@pytest.fixture
def layer2_poll(ledger):
    return ledger.create_poll("alice", "what's the best layer2?", LAYER2, FEE)


@pytest.fixture
def ballot(ledger):
    def make(option: int):
        return crypto.encrypt(ledger.network_key, option, ledger.option_bits)

    return make


@pytest.fixture
def read_tally(ledger, keys):
    def read(poll_id: int, who: str = "alice"):
        pub, priv = keys[who]
        return [crypto.decrypt(priv, c) for c in ledger.get_results(poll_id, pub)]

    return read
