"""
tanglesig/config.py

Canonical ledger constants and node configuration for tanglesig.

The lengths below must match the network-wide convention exactly; bundles
built with different values hash differently and will not validate.
"""

from typing import List
import os


# Tryte alphabet, filler first
TRYTE_ALPHABET = "9ABCDEFGHIJKLMNOPQRSTUVWXYZ"
FILLER = "9"

# Sponge / hash sizes
HASH_LENGTH = 243                   # trits
BYTE_HASH_LENGTH = 48               # bytes (Keccak-384)
ADDRESS_LENGTH = 81                 # trytes
ADDRESS_CHECKSUM_LENGTH = 9         # trytes appended to a checksummed address

# Transaction field sizes
TAG_LENGTH = 27                     # trytes
FRAGMENT_LENGTH = 2187              # trytes per signature/message fragment
VALUE_TRITS = 81
TIMESTAMP_TRITS = 27
INDEX_TRITS = 27

# One-time signature parameters
KEY_FRAGMENT_CHUNKS = 27            # 243-trit chunks per key block
KEY_FRAGMENT_TRITS = KEY_FRAGMENT_CHUNKS * HASH_LENGTH  # 6561
KEY_FRAGMENT_TRYTES = FRAGMENT_LENGTH                   # 2187
NORMALIZED_FRAGMENT_COUNT = 3       # sub-fragments of a normalized hash
NORMALIZED_FRAGMENT_LENGTH = 27
MAX_TRYTE_VALUE = 13
MIN_TRYTE_VALUE = -13
SECURITY_LEVELS = (1, 2, 3)

EMPTY_TAG = FILLER * TAG_LENGTH
EMPTY_FRAGMENT = FILLER * FRAGMENT_LENGTH

# Node API
BALANCE_THRESHOLD = 100             # confirmation threshold for getBalances
API_VERSION = "1"
NODES_ENV_VAR = "TANGLESIG_NODES"

DEFAULT_NODES: List[str] = [
    "https://nodes.thetangle.org:443",
    "https://nodes.iota.org:443",
]


def get_node_urls() -> List[str]:
    """
    Get the ledger node URLs to query.

    Reads a comma-separated list from the TANGLESIG_NODES environment
    variable, falling back to DEFAULT_NODES.

    Returns:
        List of node URLs in failover order
    """
    env_nodes = os.environ.get(NODES_ENV_VAR, "")
    nodes = [n.strip() for n in env_nodes.split(",") if n.strip()]
    return nodes or list(DEFAULT_NODES)
