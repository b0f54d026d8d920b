import pytest

from revote import crypto
from revote.errors import InsufficientFee, InvalidOptionCount, PollNotFound

from conftest import FEE, LAYER2


def test_poll_ids_start_at_zero_and_increase(ledger):
    ids = [ledger.create_poll("alice", f"q{i}", ["yes", "no"], FEE) for i in range(3)]
    assert ids == [0, 1, 2]
    assert [p.id for p in ledger.get_polls()] == [0, 1, 2]


def test_poll_record_and_zero_tally(ledger, keys, layer2_poll):
    poll = ledger.get_poll_by_id(layer2_poll)
    assert poll.creator == "alice"
    assert poll.question == "what's the best layer2?"
    assert poll.options == tuple(LAYER2)
    assert poll.fee_paid == FEE
    assert len(poll.tally) == len(poll.options)
    pub, priv = keys["alice"]
    assert [crypto.decrypt(priv, c) for c in ledger.get_results(layer2_poll, pub)] == [0, 0, 0]


def test_fee_below_minimum_is_rejected(ledger):
    assert ledger.poll_creation_fee() == FEE
    with pytest.raises(InsufficientFee):
        ledger.create_poll("alice", "q", ["a", "b"], FEE - 1)
    assert ledger.get_polls() == []


def test_overpaying_is_accepted_and_recorded(ledger):
    poll_id = ledger.create_poll("alice", "q", ["a", "b"], FEE * 3)
    assert ledger.get_poll_by_id(poll_id).fee_paid == FEE * 3


@pytest.mark.parametrize("options", [[], ["only"], [str(i) for i in range(257)]])
def test_option_count_outside_bounds_is_rejected(ledger, options):
    with pytest.raises(InvalidOptionCount):
        ledger.create_poll("alice", "q", options, FEE)
    assert ledger.get_polls() == []


def test_failed_creation_does_not_consume_an_id(ledger):
    with pytest.raises(InsufficientFee):
        ledger.create_poll("alice", "q", ["a", "b"], 0)
    assert ledger.create_poll("alice", "q", ["a", "b"], FEE) == 0


@pytest.mark.parametrize("poll_id", [-1, 1, 99, "0", True, False])
def test_unknown_poll_is_not_found(ledger, layer2_poll, poll_id):
    with pytest.raises(PollNotFound):
        ledger.get_poll_by_id(poll_id)


def test_polls_by_creator(ledger):
    ledger.create_poll("alice", "q0", ["a", "b"], FEE)
    ledger.create_poll("bob", "q1", ["a", "b"], FEE)
    ledger.create_poll("alice", "q2", ["a", "b"], FEE)
    assert ledger.get_polls_by_creator("alice") == [0, 2]
    assert ledger.get_polls_by_creator("bob") == [1]
    assert ledger.get_polls_by_creator("carol") == []
