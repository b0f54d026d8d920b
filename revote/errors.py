"""Error taxonomy for the confidential revote ledger.

Every failure aborts the operation that raised it with no partial effect.
Each error carries a stable ``code`` callers can branch on and the HTTP
``status`` the server answers with. They also derive from the builtin a
caller would naturally catch (ValueError, LookupError, PermissionError).
"""

from __future__ import annotations


class RevoteError(Exception):
    code = "revote_error"
    status = 400
    default_message = "operation rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class InsufficientFee(RevoteError, ValueError):
    code = "insufficient_fee"
    status = 402
    default_message = "Paid fee is below the poll creation fee"


class InvalidOptionCount(RevoteError, ValueError):
    code = "invalid_option_count"
    default_message = "A poll needs at least two options"


class PollNotFound(RevoteError, LookupError):
    code = "poll_not_found"
    status = 404
    default_message = "Poll not found"


class BallotNotFound(RevoteError, LookupError):
    code = "ballot_not_found"
    status = 404
    default_message = "No ballot recorded for this voter"


class DoubleVotingNotAllowed(RevoteError, PermissionError):
    code = "double_voting_not_allowed"
    status = 403
    default_message = "Double voting is not allowed"


class InvalidCiphertext(RevoteError, ValueError):
    code = "invalid_ciphertext"
    default_message = "Ciphertext is not a valid encrypted option"


class IncorrectKeyPair(RevoteError, ValueError):
    code = "incorrect_key_pair"
    default_message = "incorrect key pair for the given ciphertext"
