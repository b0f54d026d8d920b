"""revote package - confidential multi-option polls

Ballots are encrypted option indices. Every ballot updates every option
counter under encryption, and tallies are only ever handed out reencrypted
under a key the reader supplies.
"""

from .errors import (
    BallotNotFound,
    DoubleVotingNotAllowed,
    IncorrectKeyPair,
    InsufficientFee,
    InvalidCiphertext,
    InvalidOptionCount,
    PollNotFound,
    RevoteError,
)
from .ledger import ConfidentialRevote

__all__ = [
    "ConfidentialRevote",
    "RevoteError",
    "InsufficientFee",
    "InvalidOptionCount",
    "PollNotFound",
    "BallotNotFound",
    "DoubleVotingNotAllowed",
    "InvalidCiphertext",
    "IncorrectKeyPair",
]
