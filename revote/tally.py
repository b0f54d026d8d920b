from __future__ import annotations

import logging
from typing import Tuple

from .crypto import Ciphertext, CryptoProvider
from .registry import Poll

logger = logging.getLogger(__name__)


class TallyEngine:
    """Oblivious one-hot accumulation of encrypted ballots

    For a ballot Enc(v) and every option index i the engine computes
    b_i = Enc(v == i) and adds it to counter i. Exactly one b_i holds 1 when
    v is a valid index, none does otherwise, and nothing here can tell which:
    every counter receives an addition on every ballot.
    """

    def __init__(self, provider: CryptoProvider, option_bits: int):
        self._provider = provider
        self._option_bits = option_bits

    def update(self, poll: Poll, encrypted_option: Ciphertext) -> Tuple[Ciphertext, ...]:
        """Return the poll's tally with the ballot folded in

        Pure: the caller commits the returned vector together with the
        ballot record, so a failure here leaves stored state untouched.
        Counter overflow past the tally width is not detected.
        """

        provider = self._provider
        updated = []
        for i, counter in enumerate(poll.tally):
            b_i = provider.eq(encrypted_option, provider.encrypt(i, self._option_bits))
            updated.append(provider.add(counter, b_i))

        logger.debug("Tally of poll %d updated across %d options", poll.id, len(updated))
        return tuple(updated)
