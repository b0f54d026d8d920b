"""Small CLI for interacting with the revote Flask server.

Keys live in a local JSON file; ballots are encrypted and results decrypted
on this side, the server only ever sees ciphertexts.

Usage examples:
    python cli.py keygen --key bob.json
    python cli.py create --caller alice --question "best layer2?" --option arbitrum --option optimism
    python cli.py vote --caller bob --poll 0 --option 1
    python cli.py results --poll 0 --key bob.json
    python cli.py my-vote --caller bob --poll 0 --key bob.json
"""

import argparse
import json

import requests

from revote import config, crypto, serialization


BASE = config.REVOTE_URL


def _headers(caller: str):
    return {config.CALLER_HEADER: caller}


def _load_keys(path: str):
    with open(path) as f:
        data = json.load(f)
    priv = serialization.private_key_from_dict(data["private_key"])
    return priv.public_key, priv


def keygen(path: str):
    network = requests.get(f"{BASE}/network-key", timeout=2).json()
    params = serialization.public_key_from_dict(network["public_key"]).params
    pub, priv = crypto.elgamal_keygen(params)
    with open(path, "w") as f:
        json.dump(
            {
                "public_key": serialization.public_key_to_dict(pub),
                "private_key": serialization.private_key_to_dict(priv),
            },
            f,
        )
    print({"key_file": path, "fingerprint": pub.fingerprint})


def polls():
    r = requests.get(f"{BASE}/polls", timeout=2)
    print(r.json())


def create(caller: str, question: str, options, fee):
    if fee is None:
        fee = requests.get(f"{BASE}/fee", timeout=2).json()["fee"]
    r = requests.post(
        f"{BASE}/polls",
        json={"question": question, "options": options, "fee": fee},
        headers=_headers(caller),
        timeout=2,
    )
    print(r.json())


def vote(caller: str, poll_id: int, option: int):
    network = requests.get(f"{BASE}/network-key", timeout=2).json()
    pub = serialization.public_key_from_dict(network["public_key"])
    ct = crypto.encrypt(pub, option, config.OPTION_BITS)
    r = requests.post(
        f"{BASE}/polls/{poll_id}/vote",
        json={"ciphertext": serialization.ciphertext_to_dict(ct)},
        headers=_headers(caller),
        timeout=10,
    )
    print(r.json())


def results(poll_id: int, key_path: str):
    pub, priv = _load_keys(key_path)
    r = requests.post(
        f"{BASE}/polls/{poll_id}/results",
        json={"public_key": serialization.public_key_to_dict(pub)},
        timeout=10,
    )
    data = r.json()
    if "results" not in data:
        print(data)
        return
    poll = requests.get(f"{BASE}/polls/{poll_id}", timeout=2).json()
    for label, c in zip(poll["options"], data["results"]):
        print(f"  {label}: {crypto.decrypt(priv, serialization.ciphertext_from_dict(c))}")


def my_vote(caller: str, poll_id: int, key_path: str):
    pub, priv = _load_keys(key_path)
    r = requests.post(
        f"{BASE}/polls/{poll_id}/my-vote",
        json={"public_key": serialization.public_key_to_dict(pub)},
        headers=_headers(caller),
        timeout=10,
    )
    data = r.json()
    if "ciphertext" not in data:
        print(data)
        return
    print({"option": crypto.decrypt(priv, serialization.ciphertext_from_dict(data["ciphertext"]))})


def main():
    p = argparse.ArgumentParser()
    sub = p.add_subparsers(dest="cmd")
    k = sub.add_parser("keygen")
    k.add_argument("--key", required=True)
    sub.add_parser("polls")
    c = sub.add_parser("create")
    c.add_argument("--caller", required=True)
    c.add_argument("--question", required=True)
    c.add_argument("--option", action="append", required=True)
    c.add_argument("--fee", type=int)
    v = sub.add_parser("vote")
    v.add_argument("--caller", required=True)
    v.add_argument("--poll", type=int, required=True)
    v.add_argument("--option", type=int, required=True)
    r = sub.add_parser("results")
    r.add_argument("--poll", type=int, required=True)
    r.add_argument("--key", required=True)
    m = sub.add_parser("my-vote")
    m.add_argument("--caller", required=True)
    m.add_argument("--poll", type=int, required=True)
    m.add_argument("--key", required=True)
    args = p.parse_args()
    if args.cmd == "keygen":
        keygen(args.key)
    elif args.cmd == "polls":
        polls()
    elif args.cmd == "create":
        create(args.caller, args.question, args.option, args.fee)
    elif args.cmd == "vote":
        vote(args.caller, args.poll, args.option)
    elif args.cmd == "results":
        results(args.poll, args.key)
    elif args.cmd == "my-vote":
        my_vote(args.caller, args.poll, args.key)
    else:
        p.print_help()


if __name__ == "__main__":
    main()
