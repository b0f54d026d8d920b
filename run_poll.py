"""Reference runner that walks through a confidential poll in-process.

Run this script from the repository root: alice creates a poll, bob, carol
and dave vote, and each of them reads the tally and their own ballot with
their own key.
"""

from revote import crypto, errors
from revote.ledger import ConfidentialRevote


def _print_heading(msg: str):
    print()
    print(msg)


def _print_kv(key: str, value: str):
    print(f"  {key}: {value}")


def _show_results(ledger, poll, who, keys):
    pub, priv = keys[who]
    counts = [crypto.decrypt(priv, c) for c in ledger.get_results(poll.id, pub)]
    _print_kv(f"tally seen by {who}", dict(zip(poll.options, counts)))


def main():
    ledger = ConfidentialRevote()
    keys = {name: crypto.elgamal_keygen(ledger.network_key.params) for name in ("alice", "bob", "carol", "dave")}

    _print_heading("[Create] alice opens a poll")
    fee = ledger.poll_creation_fee()
    poll_id = ledger.create_poll("alice", "what's the best layer2?", ["arbitrum", "optimism", "starknet"], fee)
    poll = ledger.get_poll_by_id(poll_id)
    _print_kv("poll", poll_id)
    _print_kv("question", poll.question)
    _print_kv("options", ", ".join(poll.options))
    _print_kv("polls by alice", ledger.get_polls_by_creator("alice"))

    choices = [("bob", 0), ("carol", 2), ("dave", 2)]
    for voter, option in choices:
        _print_heading(f"[Vote] {voter} votes {poll.options[option]}")
        ballot = crypto.encrypt(ledger.network_key, option, ledger.option_bits)
        ledger.vote(voter, poll_id, ballot)
        _show_results(ledger, poll, voter, keys)

    _print_heading("[Vote] bob tries to vote again")
    try:
        ledger.vote("bob", poll_id, crypto.encrypt(ledger.network_key, 0, ledger.option_bits))
    except errors.DoubleVotingNotAllowed as e:
        _print_kv("rejected", e)
    _show_results(ledger, poll, "bob", keys)

    _print_heading("[Own ballot] each voter reads their own vote")
    for voter, _ in choices:
        pub, priv = keys[voter]
        ct = ledger.get_vote_by_poll_and_voter(voter, poll_id, pub)
        _print_kv(voter, poll.options[crypto.decrypt(priv, ct)])

    _print_heading("[Key binding] carol tries to read bob's copy of the tally")
    bob_view = ledger.get_results(poll_id, keys["bob"][0])
    try:
        crypto.decrypt(keys["carol"][1], bob_view[0])
    except errors.IncorrectKeyPair as e:
        _print_kv("rejected", e)


if __name__ == "__main__":
    main()
