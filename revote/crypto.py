from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass
from functools import lru_cache
from math import isqrt
from typing import Dict, Tuple

from .errors import IncorrectKeyPair

logger = logging.getLogger(__name__)

# RFC 2409 1024-bit MODP Group (Oakley Group 2) prime p
# Source for prime: https://datatracker.ietf.org/doc/html/rfc2409#section-6.2
_P_HEX = (
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE65381"
    "FFFFFFFFFFFFFFFF"
)

# Width of the encrypted bit produced by an equality test.
BOOL_BITS = 1


@dataclass(frozen=True)
class ElGamalParams:
    """ElGamal group params

    Attributes
    - p: safe prime modulus
    - q: large prime such that p = 2q + 1
    - g: generator of the subgroup of order q (here: g=2)
    """

    p: int
    q: int
    g: int


@dataclass(frozen=True)
class ElGamalPublicKey:
    """ElGamal public key

    Attributes
    - params: the group parameters
    - y: public component y = g^x mod p
    """

    params: ElGamalParams
    y: int

    @property
    def fingerprint(self) -> str:
        """Short stable identifier binding ciphertexts to this key"""

        h = hashlib.sha256()
        for part in (self.params.p, self.params.g, self.y):
            h.update(str(part).encode())
            h.update(b"|")
        return h.hexdigest()[:32]


@dataclass(frozen=True)
class ElGamalPrivateKey:
    """ElGamal private key

    Attributes
    - params: the group parameters
    - x: secret exponent in [1..q-1]
    """

    params: ElGamalParams
    x: int

    @property
    def public_key(self) -> ElGamalPublicKey:
        return ElGamalPublicKey(params=self.params, y=pow(self.params.g, self.x, self.params.p))


@dataclass(frozen=True)
class Ciphertext:
    """Fixed-width encrypted integer

    Attributes
    - c1, c2: exponential ElGamal pair (g^r, y^r * g^m)
    - bits: declared plaintext width, plaintexts live in [0, 2^bits)
    - key_id: fingerprint of the public key the pair is encrypted under
    """

    c1: int
    c2: int
    bits: int
    key_id: str


def elgamal_params_default() -> ElGamalParams:
    """Return default RFC 2409 Oakley group-2 parameters

    The group is a safe prime with generator g=2. We compute q = (p-1)//2.
    """

    p = int(_P_HEX, 16)
    q = (p - 1) // 2
    g = 2

    return ElGamalParams(p=p, q=q, g=g)


def elgamal_keygen(params: ElGamalParams | None = None) -> Tuple[ElGamalPublicKey, ElGamalPrivateKey]:
    """Generate an ElGamal public and privates keys from the given parameters

    Uses the Python secrets module for strong randomness.
    """

    if params is None:
        params = elgamal_params_default()

    x = _rand_scalar(params.q)
    y = pow(params.g, x, params.p)

    return ElGamalPublicKey(params=params, y=y), ElGamalPrivateKey(params=params, x=x)


def _rand_scalar(q: int) -> int:
    """Return a random scalar in [1 to q-1]"""

    return secrets.randbelow(q - 1) + 1


def encrypt(pub: ElGamalPublicKey, m: int, bits: int, r: int | None = None) -> Ciphertext:
    """Encrypt an integer of the given width using ElGamal exponent encoding

    Args
    - pub: public key
    - m: message in [0, 2^bits)
    - bits: declared width of the plaintext
    - r: optional randomness (for testing); sampled uniformly in [1 to q-1] if None
    """

    if not 0 <= m < (1 << bits):
        raise ValueError(f"Message {m} does not fit in {bits} bits.")
    params = pub.params

    if r is None:
        r = _rand_scalar(params.q)

    c1 = pow(params.g, r, params.p)
    c2 = (pow(pub.y, r, params.p) * pow(params.g, m, params.p)) % params.p

    return Ciphertext(c1=c1, c2=c2, bits=bits, key_id=pub.fingerprint)


def _plaintext_element(priv: ElGamalPrivateKey, ct: Ciphertext) -> int:
    """Strip the key mask and return g^m without solving for m"""

    params = priv.params
    s = pow(ct.c1, priv.x, params.p)
    # Inverse modulo p (p is prime). Using Fermat: s^(p-2) mod p
    s_inv = pow(s, params.p - 2, params.p)

    return (ct.c2 * s_inv) % params.p


def decrypt(priv: ElGamalPrivateKey, ct: Ciphertext) -> int:
    """Decrypt a ciphertext and return its integer plaintext

    Raises IncorrectKeyPair when the ciphertext was produced for another key,
    and ValueError when the plaintext lies outside the declared width (the
    counter overflowed its width).
    """

    pub = priv.public_key
    if ct.key_id != pub.fingerprint:
        raise IncorrectKeyPair()

    m_elem = _plaintext_element(priv, ct)
    m = discrete_log(priv.params.g, m_elem, priv.params.p, (1 << ct.bits) - 1)
    if m is None:
        raise ValueError(f"Ciphertext does not decrypt to a {ct.bits}-bit value.")

    return m


def ciphertext_mul(a: Ciphertext, b: Ciphertext, p: int) -> Ciphertext:
    """Homomorphic multiplication of two ElGamal ciphertexts modulo p
    i.e,. math on encrypted data without first decrypting

    Enc(m1) * Enc(m2) = Enc(m1 + m2). The result takes the wider width.
    """

    if a.key_id != b.key_id:
        raise IncorrectKeyPair("ciphertexts are encrypted under different keys")

    return Ciphertext(
        c1=(a.c1 * b.c1) % p,
        c2=(a.c2 * b.c2) % p,
        bits=max(a.bits, b.bits),
        key_id=a.key_id,
    )


def ciphertext_div(a: Ciphertext, b: Ciphertext, p: int) -> Ciphertext:
    """Enc(m1) / Enc(m2) = Enc(m1 - m2)"""

    if a.key_id != b.key_id:
        raise IncorrectKeyPair("ciphertexts are encrypted under different keys")

    return Ciphertext(
        c1=(a.c1 * pow(b.c1, p - 2, p)) % p,
        c2=(a.c2 * pow(b.c2, p - 2, p)) % p,
        bits=max(a.bits, b.bits),
        key_id=a.key_id,
    )


def discrete_log_small(base: int, value: int, p: int, max_k: int) -> int | None:
    """Brute-force discrete log for small ranges (0 to max_k)

    Returns k if base^k = value (mod p), else None
    """

    cur = 1
    if value == 1:
        return 0

    for k in range(1, max_k + 1):
        cur = (cur * base) % p
        if cur == value:
            return k

    return None


@lru_cache(maxsize=8)
def _baby_steps(base: int, p: int, m: int) -> Tuple[Dict[int, int], int]:
    """Table base^j -> j for j in [0, m), plus base^{-m} mod p"""

    baby: Dict[int, int] = {}
    cur = 1
    for j in range(m):
        baby.setdefault(cur, j)
        cur = (cur * base) % p

    base_m_inv = pow(pow(base, m, p), p - 2, p)
    return baby, base_m_inv


def discrete_log_bsgs(base: int, value: int, p: int, max_k: int) -> int | None:
    """Baby-step giant-step discrete log: find k <= max_k with base^k = value (mod p)

    The baby-step table only depends on (base, p, max_k) and is cached, so
    repeated decryptions of counters of the same width are cheap.
    """

    if value == 1:
        return 0

    m = isqrt(max_k) + 1
    baby, base_m_inv = _baby_steps(base, p, m)

    gamma = value
    for i in range(m + 1):
        if gamma in baby:
            k = i * m + baby[gamma]
            return k if k <= max_k else None
        gamma = (gamma * base_m_inv) % p

    return None


def discrete_log(base: int, value: int, p: int, max_k: int) -> int | None:
    """Choose an appropriate discrete-log routine based on max_k."""

    if max_k <= 256:
        return discrete_log_small(base, value, p, max_k)

    return discrete_log_bsgs(base, value, p, max_k)


class CryptoProvider:
    """Homomorphic primitives over integers encrypted under a network key

    Voters encrypt ballots under ``public_key``. The provider evaluates
    addition and equality on those ciphertexts and reencrypts results under a
    key supplied by the reader. The network private key never leaves this
    object and no method returns a plaintext.
    """

    def __init__(self, params: ElGamalParams | None = None):
        self._pub, self._priv = elgamal_keygen(params)
        logger.info("Network key generated: %s", self._pub.fingerprint)

    @property
    def public_key(self) -> ElGamalPublicKey:
        return self._pub

    @property
    def params(self) -> ElGamalParams:
        return self._pub.params

    def owns(self, ct: Ciphertext) -> bool:
        return ct.key_id == self._pub.fingerprint

    def _check(self, ct: Ciphertext):
        if not self.owns(ct):
            raise IncorrectKeyPair("ciphertext is not encrypted under the network key")

    def encrypt(self, m: int, bits: int) -> Ciphertext:
        return encrypt(self._pub, m, bits)

    def add(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        """Enc(a + b), computed purely on ciphertexts"""

        self._check(a)
        self._check(b)
        return ciphertext_mul(a, b, self.params.p)

    def eq(self, a: Ciphertext, b: Ciphertext) -> Ciphertext:
        """Encrypted bit: Enc(1) when a and b hold the same plaintext, Enc(0) otherwise

        The difference Enc(a - b) is blinded by a random exponent, so only
        whether it is zero can be read from it, never a or b themselves.
        """

        self._check(a)
        self._check(b)
        p, q = self.params.p, self.params.q
        diff = ciphertext_div(a, b, p)
        k = _rand_scalar(q)
        blinded = Ciphertext(
            c1=pow(diff.c1, k, p), c2=pow(diff.c2, k, p), bits=diff.bits, key_id=diff.key_id
        )
        bit = 1 if _plaintext_element(self._priv, blinded) == 1 else 0

        return encrypt(self._pub, bit, BOOL_BITS)

    def reencrypt(self, ct: Ciphertext, recipient: ElGamalPublicKey) -> Ciphertext:
        """Move ct under ``recipient`` so only its private key can decrypt it

        Works on the group element g^m directly; the integer m is never
        recovered here.
        """

        self._check(ct)
        if recipient.params != self.params:
            raise ValueError("Recipient key uses different group parameters.")

        params = self.params
        m_elem = _plaintext_element(self._priv, ct)
        r = _rand_scalar(params.q)
        c1 = pow(params.g, r, params.p)
        c2 = (pow(recipient.y, r, params.p) * m_elem) % params.p

        return Ciphertext(c1=c1, c2=c2, bits=ct.bits, key_id=recipient.fingerprint)
