"""JSON encoding of ciphertexts and keys.

Big integers travel as hex strings. Group parameters are included with every
key so a decoder never has to assume a default group.
"""

from typing import Any, Dict

from .crypto import Ciphertext, ElGamalParams, ElGamalPrivateKey, ElGamalPublicKey
from .errors import InvalidCiphertext


def _hex(n: int) -> str:
    return format(n, "x")


def _int(value: Any) -> int:
    if not isinstance(value, str):
        raise ValueError("expected a hex string")
    return int(value, 16)


def params_to_dict(params: ElGamalParams) -> Dict[str, str]:
    return {"p": _hex(params.p), "q": _hex(params.q), "g": _hex(params.g)}


def params_from_dict(data: Dict[str, Any]) -> ElGamalParams:
    return ElGamalParams(p=_int(data["p"]), q=_int(data["q"]), g=_int(data["g"]))


def public_key_to_dict(pub: ElGamalPublicKey) -> Dict[str, Any]:
    return {"params": params_to_dict(pub.params), "y": _hex(pub.y)}


def public_key_from_dict(data: Dict[str, Any]) -> ElGamalPublicKey:
    try:
        return ElGamalPublicKey(params=params_from_dict(data["params"]), y=_int(data["y"]))
    except (KeyError, TypeError) as e:
        raise ValueError(f"malformed public key: {e}") from None


def private_key_to_dict(priv: ElGamalPrivateKey) -> Dict[str, Any]:
    return {"params": params_to_dict(priv.params), "x": _hex(priv.x)}


def private_key_from_dict(data: Dict[str, Any]) -> ElGamalPrivateKey:
    try:
        return ElGamalPrivateKey(params=params_from_dict(data["params"]), x=_int(data["x"]))
    except (KeyError, TypeError) as e:
        raise ValueError(f"malformed private key: {e}") from None


def ciphertext_to_dict(ct: Ciphertext) -> Dict[str, Any]:
    return {"c1": _hex(ct.c1), "c2": _hex(ct.c2), "bits": ct.bits, "key_id": ct.key_id}


def ciphertext_from_dict(data: Any) -> Ciphertext:
    """Decode a ciphertext, raising InvalidCiphertext on any malformed field"""

    if not isinstance(data, dict):
        raise InvalidCiphertext("ciphertext must be a JSON object")
    try:
        bits = data["bits"]
        key_id = data["key_id"]
        if not isinstance(bits, int) or bits <= 0 or not isinstance(key_id, str):
            raise ValueError("bad width or key id")
        return Ciphertext(c1=_int(data["c1"]), c2=_int(data["c2"]), bits=bits, key_id=key_id)
    except (KeyError, ValueError) as e:
        raise InvalidCiphertext(f"malformed ciphertext: {e}") from None
