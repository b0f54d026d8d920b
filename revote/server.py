"""Flask API for the confidential revote ledger.

Endpoints:
- GET /network-key -> key voters encrypt their option index under
- GET /fee -> minimum poll creation fee
- POST /polls -> create a poll {"question", "options", "fee"}
- GET /polls, GET /polls/<id>, GET /creators/<creator>/polls
- POST /polls/<id>/vote -> submit {"ciphertext": {...}}
- POST /polls/<id>/results -> tally reencrypted under {"public_key": {...}}
- POST /polls/<id>/my-vote -> caller's own ballot reencrypted under {"public_key": {...}}
- GET /voted -> ids of polls the caller has voted on

The caller identity comes from the header named by config.CALLER_HEADER and
is trusted as authenticated by the host in front of this app.
"""

import logging

from flask import Flask, jsonify, request

from revote import config, serialization
from revote.errors import InvalidCiphertext, RevoteError
from revote.ledger import ConfidentialRevote
from revote.registry import Poll


logger = logging.getLogger(__name__)

app = Flask(__name__)

# In-process ledger state
_STATE = {"ledger": ConfidentialRevote()}


def _ledger() -> ConfidentialRevote:
    return _STATE["ledger"]


def reset_state(ledger: ConfidentialRevote = None):
    """Replace the ledger (fresh one if None); used by tests and demos."""
    _STATE["ledger"] = ledger or ConfidentialRevote()


def _caller():
    caller = request.headers.get(config.CALLER_HEADER)
    if not caller:
        return None
    return caller


def _json_object():
    """Request body as a dict, or None when it is missing or not a JSON object"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return data


def _poll_to_dict(poll: Poll) -> dict:
    return {
        "id": poll.id,
        "creator": poll.creator,
        "question": poll.question,
        "options": list(poll.options),
        "fee_paid": poll.fee_paid,
    }


def _requester_key(data):
    try:
        key = serialization.public_key_from_dict(data.get("public_key") or {})
    except ValueError:
        return None
    # reencryption only works within the network key's group
    if key.params != _ledger().network_key.params:
        return None
    return key


@app.errorhandler(RevoteError)
def handle_revote_error(e: RevoteError):
    # rejections are logged where they are raised
    return jsonify({"error": e.code, "detail": str(e)}), e.status


@app.route("/network-key", methods=["GET"])
def network_key():
    return jsonify({"public_key": serialization.public_key_to_dict(_ledger().network_key)})


@app.route("/fee", methods=["GET"])
def creation_fee():
    return jsonify({"fee": _ledger().poll_creation_fee()})


@app.route("/polls", methods=["POST"])
def create_poll():
    """Create a poll; expects {"question": str, "options": [str, ...], "fee": int}"""
    caller = _caller()
    if caller is None:
        return jsonify({"error": "missing caller"}), 400
    data = _json_object()
    if data is None:
        return jsonify({"error": "body must be a JSON object"}), 400
    question = data.get("question")
    options = data.get("options")
    fee = data.get("fee", 0)
    if not all(
        [
            isinstance(question, str),
            isinstance(options, list) and all(isinstance(o, str) for o in options),
            isinstance(fee, int),
        ]
    ):
        return jsonify({"error": "missing or invalid fields"}), 400
    poll_id = _ledger().create_poll(caller, question, options, fee)
    return jsonify({"poll_id": poll_id}), 201


@app.route("/polls", methods=["GET"])
def list_polls():
    return jsonify({"polls": [_poll_to_dict(p) for p in _ledger().get_polls()]})


@app.route("/polls/<int:poll_id>", methods=["GET"])
def get_poll(poll_id: int):
    return jsonify(_poll_to_dict(_ledger().get_poll_by_id(poll_id)))


@app.route("/creators/<creator>/polls", methods=["GET"])
def polls_by_creator(creator: str):
    return jsonify({"poll_ids": _ledger().get_polls_by_creator(creator)})


@app.route("/polls/<int:poll_id>/vote", methods=["POST"])
def cast_vote(poll_id: int):
    """Cast an encrypted ballot; expects {"ciphertext": {...}}"""
    caller = _caller()
    if caller is None:
        return jsonify({"error": "missing caller"}), 400
    data = _json_object()
    if data is None:
        return jsonify({"error": "body must be a JSON object"}), 400
    try:
        ciphertext = serialization.ciphertext_from_dict(data.get("ciphertext"))
    except InvalidCiphertext as e:
        logger.warning("Rejected ballot from %s on poll %d: %s", caller, poll_id, e)
        raise
    _ledger().vote(caller, poll_id, ciphertext)
    return jsonify({"status": "cast", "poll_id": poll_id}), 201


@app.route("/polls/<int:poll_id>/results", methods=["POST"])
def results(poll_id: int):
    data = _json_object()
    if data is None:
        return jsonify({"error": "body must be a JSON object"}), 400
    key = _requester_key(data)
    if key is None:
        return jsonify({"error": "missing or invalid public_key"}), 400
    cts = _ledger().get_results(poll_id, key)
    return jsonify({"results": [serialization.ciphertext_to_dict(c) for c in cts]})


@app.route("/polls/<int:poll_id>/my-vote", methods=["POST"])
def my_vote(poll_id: int):
    caller = _caller()
    if caller is None:
        return jsonify({"error": "missing caller"}), 400
    data = _json_object()
    if data is None:
        return jsonify({"error": "body must be a JSON object"}), 400
    key = _requester_key(data)
    if key is None:
        return jsonify({"error": "missing or invalid public_key"}), 400
    ct = _ledger().get_vote_by_poll_and_voter(caller, poll_id, key)
    return jsonify({"ciphertext": serialization.ciphertext_to_dict(ct)})


@app.route("/voted", methods=["GET"])
def voted():
    caller = _caller()
    if caller is None:
        return jsonify({"error": "missing caller"}), 400
    return jsonify({"poll_ids": _ledger().get_poll_ids_voted_on(caller)})


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    app.run(debug=True)
