from dataclasses import replace

from revote import crypto
from revote.registry import Poll
from revote.tally import TallyEngine


def _decrypt_all(ledger, keys, tally):
    pub, priv = keys["alice"]
    return [crypto.decrypt(priv, ledger.provider.reencrypt(c, pub)) for c in tally]


def _poll(ledger, n):
    zero = tuple(ledger.provider.encrypt(0, ledger.tally_bits) for _ in range(n))
    return Poll(id=0, creator="alice", question="q", options=tuple(map(str, range(n))), tally=zero, fee_paid=0)


def test_update_is_one_hot(ledger, keys, ballot):
    engine = TallyEngine(ledger.provider, ledger.option_bits)
    poll = _poll(ledger, 4)
    tally = engine.update(poll, ballot(2))
    assert len(tally) == 4
    assert _decrypt_all(ledger, keys, tally) == [0, 0, 1, 0]


def test_update_touches_every_counter(ledger, ballot):
    engine = TallyEngine(ledger.provider, ledger.option_bits)
    poll = _poll(ledger, 3)
    tally = engine.update(poll, ballot(0))
    # every slot is a fresh ciphertext, chosen or not
    assert all(new != old for new, old in zip(tally, poll.tally))


def test_update_does_not_mutate_the_poll(ledger, ballot):
    engine = TallyEngine(ledger.provider, ledger.option_bits)
    poll = _poll(ledger, 2)
    before = poll.tally
    engine.update(poll, ballot(1))
    assert poll.tally is before


def test_out_of_range_option_is_counted_nowhere(ledger, keys, ballot):
    engine = TallyEngine(ledger.provider, ledger.option_bits)
    poll = _poll(ledger, 3)
    tally = engine.update(poll, ballot(7))
    assert _decrypt_all(ledger, keys, tally) == [0, 0, 0]


def test_accumulation_conserves_vote_count(ledger, keys, ballot):
    engine = TallyEngine(ledger.provider, ledger.option_bits)
    poll = _poll(ledger, 3)
    choices = [2, 0, 2, 1, 2, 0]
    for c in choices:
        poll = replace(poll, tally=engine.update(poll, ballot(c)))
    counts = _decrypt_all(ledger, keys, poll.tally)
    assert counts == [2, 1, 3]
    assert sum(counts) == len(choices)
