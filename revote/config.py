import os

# Settings are read once from the environment at import time.

POLL_CREATION_FEE = int(os.environ.get("REVOTE_POLL_CREATION_FEE", 5_000_000_000_000_000))

# Encrypted ballot options and tally counters are fixed-width integers.
OPTION_BITS = int(os.environ.get("REVOTE_OPTION_BITS", 8))
TALLY_BITS = int(os.environ.get("REVOTE_TALLY_BITS", 32))

LOG_LEVEL = os.environ.get("REVOTE_LOG_LEVEL", "INFO")

REVOTE_URL = os.environ.get("REVOTE_URL", "http://127.0.0.1:5000")

# Header carrying the caller identity authenticated by the host.
CALLER_HEADER = os.environ.get("REVOTE_CALLER_HEADER", "X-Caller")
