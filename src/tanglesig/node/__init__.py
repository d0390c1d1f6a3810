"""
tanglesig/node - Ledger node client.

Provides the confirmed-balance query consumed by multisig transfer
assembly.
"""

from .client import NodeClient, NodeError, create_client
from .connection import NodeConnection

__all__ = [
    "NodeClient",
    "NodeConnection",
    "NodeError",
    "create_client",
]
