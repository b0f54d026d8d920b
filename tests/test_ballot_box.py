import pytest

from revote import crypto
from revote.ballot_box import BallotBox
from revote.errors import BallotNotFound, DoubleVotingNotAllowed


@pytest.fixture
def box():
    return BallotBox()


@pytest.fixture
def ct():
    pub, _ = crypto.elgamal_keygen()
    return crypto.encrypt(pub, 1, 8)


def test_record_and_get(box, ct):
    ballot = box.record(0, "bob", ct)
    assert ballot.has_voted is True
    assert box.get(0, "bob") == ballot
    assert box.has_voted(0, "bob")
    assert not box.has_voted(1, "bob")


def test_second_ballot_same_poll_is_rejected(box, ct):
    box.record(0, "bob", ct)
    with pytest.raises(DoubleVotingNotAllowed):
        box.record(0, "bob", ct)
    # still a PermissionError for callers catching builtins
    with pytest.raises(PermissionError):
        box.ensure_can_vote(0, "bob")
    assert box.get(0, "bob").encrypted_option == ct


def test_same_voter_other_poll_is_allowed(box, ct):
    box.record(0, "bob", ct)
    box.record(3, "bob", ct)
    box.record(1, "carol", ct)
    assert box.poll_ids_voted_on("bob") == [0, 3]
    assert box.poll_ids_voted_on("carol") == [1]
    assert box.poll_ids_voted_on("dave") == []


def test_missing_ballot(box):
    with pytest.raises(BallotNotFound):
        box.get(0, "nobody")
