"""The confidential revote ledger.

``ConfidentialRevote`` is the single shared state machine: polls, ballots and
their encrypted tallies. ``create_poll`` and ``vote`` are serialized under one
lock and either apply completely or not at all. Reads snapshot committed state
and never mutate it.

Caller identity and the fee paid are supplied by the host; they are not
authenticated here.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Sequence

from . import config
from .ballot_box import BallotBox
from .crypto import Ciphertext, CryptoProvider, ElGamalPublicKey
from .disclosure import ResultAccessController
from .errors import InvalidCiphertext, RevoteError
from .registry import Poll, PollRegistry
from .tally import TallyEngine

logger = logging.getLogger(__name__)


class ConfidentialRevote:
    def __init__(
        self,
        provider: CryptoProvider | None = None,
        creation_fee: int = config.POLL_CREATION_FEE,
        option_bits: int = config.OPTION_BITS,
        tally_bits: int = config.TALLY_BITS,
    ):
        if option_bits > tally_bits:
            raise ValueError("option width cannot exceed tally width")
        self.provider = provider or CryptoProvider()
        self.option_bits = option_bits
        self.tally_bits = tally_bits
        self._lock = threading.Lock()
        self._registry = PollRegistry(self.provider, creation_fee, option_bits, tally_bits)
        self._ballots = BallotBox()
        self._engine = TallyEngine(self.provider, option_bits)
        self._access = ResultAccessController(self.provider)

    @property
    def network_key(self) -> ElGamalPublicKey:
        """Key voters encrypt their option index under"""

        return self.provider.public_key

    ## --- mutations ------------------------------------------------------

    def create_poll(self, caller: str, question: str, options: Sequence[str], paid_fee: int) -> int:
        try:
            with self._lock:
                return self._registry.create(caller, question, options, paid_fee)
        except RevoteError as e:
            logger.warning("Rejected poll from %s: %s (%s)", caller, e.code, e)
            raise

    def vote(self, caller: str, poll_id: int, encrypted_option: Ciphertext):
        """Record the caller's ballot and fold it into the poll's tally

        Checks run first and the new tally is computed before anything is
        written, so a rejected or failed vote leaves ballots and tally as
        they were.
        """

        try:
            with self._lock:
                poll = self._registry.get(poll_id)
                self._ballots.ensure_can_vote(poll_id, caller)
                self._check_ballot(encrypted_option)

                tally = self._engine.update(poll, encrypted_option)

                self._registry.commit_tally(poll_id, tally)
                self._ballots.record(poll_id, caller, encrypted_option)
        except RevoteError as e:
            logger.warning("Rejected ballot from %s on poll %s: %s (%s)", caller, poll_id, e.code, e)
            raise

        logger.info("Ballot accepted from %s on poll %d", caller, poll_id)

    def _check_ballot(self, ct: Ciphertext):
        # Metadata only; the plaintext range cannot be checked without decrypting.
        if not isinstance(ct, Ciphertext):
            raise InvalidCiphertext("ballot must be a ciphertext")
        if not self.provider.owns(ct):
            raise InvalidCiphertext("ballot is not encrypted under the network key")
        if ct.bits != self.option_bits:
            raise InvalidCiphertext(
                f"ballot must be a {self.option_bits}-bit ciphertext, got {ct.bits} bits"
            )

    ## --- reads ----------------------------------------------------------

    def poll_creation_fee(self) -> int:
        return self._registry.creation_fee

    def get_polls(self) -> List[Poll]:
        with self._lock:
            return self._registry.all()

    def get_poll_by_id(self, poll_id: int) -> Poll:
        with self._lock:
            return self._registry.get(poll_id)

    def get_polls_by_creator(self, creator: str) -> List[int]:
        with self._lock:
            return self._registry.ids_by_creator(creator)

    def get_poll_ids_voted_on(self, voter: str) -> List[int]:
        with self._lock:
            return self._ballots.poll_ids_voted_on(voter)

    def get_results(self, poll_id: int, requester_key: ElGamalPublicKey) -> List[Ciphertext]:
        """Current tally, one ciphertext per option, reencrypted under requester_key"""

        poll = self.get_poll_by_id(poll_id)
        return self._access.results(poll, requester_key)

    def get_vote_by_poll_and_voter(
        self, caller: str, poll_id: int, requester_key: ElGamalPublicKey
    ) -> Ciphertext:
        """The caller's own ballot, reencrypted under requester_key"""

        # Self-view only: the ballot is looked up by the caller's own identity.
        with self._lock:
            self._registry.get(poll_id)
            ballot = self._ballots.get(poll_id, caller)
        return self._access.own_vote(ballot, requester_key)
