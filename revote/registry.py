from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

from .crypto import Ciphertext, CryptoProvider
from .errors import InsufficientFee, InvalidOptionCount, PollNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Poll:
    """A stored poll

    Attributes
    - id: sequence index, assigned at creation and never reused
    - creator: identity of the caller that created it
    - question: free text
    - options: ordered option labels, fixed at creation
    - tally: one encrypted counter per option, same order as options
    - fee_paid: amount the creator paid
    """

    id: int
    creator: str
    question: str
    options: Tuple[str, ...]
    tally: Tuple[Ciphertext, ...]
    fee_paid: int


class PollRegistry:
    """Append-only store of polls indexed 0..n-1"""

    def __init__(self, provider: CryptoProvider, creation_fee: int, option_bits: int, tally_bits: int):
        self._provider = provider
        self._polls: List[Poll] = []
        self.creation_fee = creation_fee
        self._max_options = 1 << option_bits
        self._tally_bits = tally_bits

    def create(self, creator: str, question: str, options: Sequence[str], paid_fee: int) -> int:
        options = tuple(options)
        if not 2 <= len(options) <= self._max_options:
            raise InvalidOptionCount(
                f"A poll needs between 2 and {self._max_options} options, got {len(options)}"
            )
        if paid_fee < self.creation_fee:
            raise InsufficientFee(f"Paid {paid_fee}, poll creation fee is {self.creation_fee}")

        poll_id = len(self._polls)
        zero = tuple(self._provider.encrypt(0, self._tally_bits) for _ in options)
        self._polls.append(
            Poll(
                id=poll_id,
                creator=creator,
                question=question,
                options=options,
                tally=zero,
                fee_paid=paid_fee,
            )
        )
        logger.info("Poll %d created by %s with %d options", poll_id, creator, len(options))
        return poll_id

    def get(self, poll_id: int) -> Poll:
        if isinstance(poll_id, bool) or not isinstance(poll_id, int) or not 0 <= poll_id < len(self._polls):
            raise PollNotFound(f"Poll {poll_id} not found")
        return self._polls[poll_id]

    def all(self) -> List[Poll]:
        return list(self._polls)

    def ids_by_creator(self, creator: str) -> List[int]:
        return [poll.id for poll in self._polls if poll.creator == creator]

    def commit_tally(self, poll_id: int, tally: Tuple[Ciphertext, ...]):
        """Swap in a new tally vector of the same length"""

        poll = self.get(poll_id)
        if len(tally) != len(poll.options):
            raise ValueError("tally length must match the option count")
        self._polls[poll_id] = replace(poll, tally=tuple(tally))
