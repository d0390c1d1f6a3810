"""
tanglesig/node/client.py

JSON API client for ledger nodes.

Provides the balance query used by transfer assembly, plus a node info
call used as the connection handshake.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..config import BALANCE_THRESHOLD, get_node_urls
from ..errors import TransportError
from .connection import NodeConnection

logger = logging.getLogger("tanglesig.node.client")


class NodeError(TransportError):
    """Exception raised for node communication errors."""
    pass


class NodeClient:
    """
    Ledger node client.

    Example:
        client = NodeClient()
        client.connect()

        balances = client.get_balances([address])
        confirmed = balances["balances"][0]

        client.close()
    """

    def __init__(
        self,
        nodes: Optional[List[str]] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize the client.

        Args:
            nodes: Node URLs in failover order. Uses get_node_urls() if None.
            timeout: Request timeout in seconds
        """
        if nodes is None:
            nodes = get_node_urls()

        self.nodes = nodes
        self.timeout = timeout

        self._connection: Optional[NodeConnection] = None
        self._node_info: Optional[Dict[str, Any]] = None
        self._node_index = 0

    @property
    def connected(self) -> bool:
        """Check if connected to a node."""
        return self._connection is not None and self._connection.connected

    @property
    def node_url(self) -> Optional[str]:
        """URL of the node in use."""
        return self._connection.url if self._connection else None

    def connect(self, node_index: int = 0) -> bool:
        """
        Connect to a node.

        Tries nodes in order until one answers getNodeInfo.

        Args:
            node_index: Starting node index

        Returns:
            True if connected successfully
        """
        for i in range(len(self.nodes)):
            index = (node_index + i) % len(self.nodes)
            url = self.nodes[index]

            logger.info(f"Connecting to node {url}...")

            self._connection = NodeConnection(url=url, timeout=self.timeout)
            self._connection.connect()

            if self._handshake():
                self._node_index = index
                version = self._node_info.get("appVersion", "unknown")
                logger.info(f"Connected to {url} (version: {version})")
                return True

            logger.warning(f"Handshake failed with {url}")
            self._connection.close()

        self._connection = None
        logger.error("Failed to connect to any node")
        return False

    def close(self) -> None:
        """Close the connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
        self._node_info = None

    def _handshake(self) -> bool:
        try:
            self._node_info = self._request({"command": "getNodeInfo"})
            return True
        except NodeError as e:
            logger.error(f"Handshake failed: {e}")
            return False

    def _send(self, request: Dict[str, Any]) -> Dict[str, Any]:
        if not self.connected:
            raise NodeError("Not connected to node")

        response = self._connection.send(request)
        if response is None:
            raise NodeError(f"No response from node for {request['command']}")
        return response

    def _request(self, request: Dict[str, Any]) -> Dict[str, Any]:
        response = self._send(request)
        if response.get("error"):
            raise NodeError(f"Node error: {response['error']}")
        return response

    def _failover(self) -> bool:
        """Move to the next node after the current one stopped answering."""
        next_index = (self._node_index + 1) % len(self.nodes)
        logger.warning(
            f"Node {self.node_url} stopped answering, failing over to "
            f"{self.nodes[next_index]}"
        )
        self._connection.close()
        return self.connect(next_index)

    def _call(self, command: str, **params) -> Dict[str, Any]:
        """
        Send a command to the node.

        A node that stops answering is replaced by the next configured
        node, each node being tried at most once per call. Errors the
        node reports are returned to the caller without failover.

        Args:
            command: API command name
            **params: Command parameters

        Returns:
            Response object

        Raises:
            NodeError: On communication or node error
        """
        if self._connection is None:
            raise NodeError("Not connected to node")

        request = {"command": command}
        request.update(params)

        for attempt in range(len(self.nodes)):
            try:
                response = self._send(request)
                break
            except NodeError:
                if attempt == len(self.nodes) - 1 or not self._failover():
                    raise

        if response.get("error"):
            raise NodeError(f"Node error: {response['error']}")

        return response

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    def get_node_info(self) -> Dict[str, Any]:
        """Get node information."""
        return self._call("getNodeInfo")

    def get_balances(
        self,
        addresses: Sequence[str],
        threshold: int = BALANCE_THRESHOLD,
    ) -> Dict[str, Any]:
        """
        Get confirmed balances for addresses.

        Args:
            addresses: 81-tryte addresses
            threshold: Confirmation threshold

        Returns:
            Dict with 'balances' as ints, in address order
        """
        result = self._call("getBalances", addresses=list(addresses), threshold=threshold)

        try:
            result["balances"] = [int(b) for b in result["balances"]]
        except (KeyError, TypeError, ValueError) as e:
            raise NodeError(f"Invalid getBalances response: {e}") from e

        logger.debug(f"Balances for {len(addresses)} address(es): {result['balances']}")
        return result

    def __enter__(self) -> "NodeClient":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()


def create_client(nodes: Optional[List[str]] = None, timeout: float = 30.0) -> NodeClient:
    """
    Create and connect a node client.

    Raises:
        NodeError: If no node answers
    """
    client = NodeClient(nodes=nodes, timeout=timeout)
    if not client.connect():
        raise NodeError("Failed to connect to any node")
    return client
