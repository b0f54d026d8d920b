from __future__ import annotations

from typing import List

from .ballot_box import Ballot
from .crypto import Ciphertext, CryptoProvider, ElGamalPublicKey
from .registry import Poll


class ResultAccessController:
    """Reencrypts stored ciphertexts under a key chosen by the reader

    Confidentiality comes from the reencryption itself: only the holder of
    the private key matching ``requester_key`` can decrypt the output.
    Nothing here mutates polls or ballots.
    """

    def __init__(self, provider: CryptoProvider):
        self._provider = provider

    def results(self, poll: Poll, requester_key: ElGamalPublicKey) -> List[Ciphertext]:
        return [self._provider.reencrypt(counter, requester_key) for counter in poll.tally]

    def own_vote(self, ballot: Ballot, requester_key: ElGamalPublicKey) -> Ciphertext:
        return self._provider.reencrypt(ballot.encrypted_option, requester_key)
