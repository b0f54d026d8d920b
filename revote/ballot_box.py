from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .crypto import Ciphertext
from .errors import BallotNotFound, DoubleVotingNotAllowed


@dataclass(frozen=True)
class Ballot:
    poll_id: int
    voter: str
    encrypted_option: Ciphertext
    has_voted: bool = True


class BallotBox:
    """Ballots keyed by (poll_id, voter); at most one per key, never removed"""

    def __init__(self):
        self._ballots: Dict[Tuple[int, str], Ballot] = {}

    def has_voted(self, poll_id: int, voter: str) -> bool:
        ballot = self._ballots.get((poll_id, voter))
        return ballot is not None and ballot.has_voted

    def ensure_can_vote(self, poll_id: int, voter: str):
        if self.has_voted(poll_id, voter):
            raise DoubleVotingNotAllowed()

    def record(self, poll_id: int, voter: str, encrypted_option: Ciphertext) -> Ballot:
        self.ensure_can_vote(poll_id, voter)
        ballot = Ballot(poll_id=poll_id, voter=voter, encrypted_option=encrypted_option)
        self._ballots[(poll_id, voter)] = ballot
        return ballot

    def get(self, poll_id: int, voter: str) -> Ballot:
        try:
            return self._ballots[(poll_id, voter)]
        except KeyError:
            raise BallotNotFound(f"{voter} has not voted on poll {poll_id}") from None

    def poll_ids_voted_on(self, voter: str) -> List[int]:
        return sorted(pid for (pid, v) in self._ballots if v == voter)
