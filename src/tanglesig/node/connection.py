"""
tanglesig/node/connection.py

Low-level HTTP transport to one ledger node.
"""

import logging
from typing import Optional

import requests

from ..config import API_VERSION

logger = logging.getLogger("tanglesig.node.connection")


class NodeConnection:
    """
    Manages an HTTP session with a ledger node's JSON API.

    Every command is a JSON object POSTed to the node URL; the node
    answers with a JSON object, carrying an "error" key on failure.
    """

    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize connection parameters.

        Args:
            url: Node API URL, e.g. https://node.example.org:443
            timeout: Request timeout in seconds
        """
        self.url = url
        self.timeout = timeout

        self._session: Optional[requests.Session] = None
        self._connected = False

    @property
    def connected(self) -> bool:
        """Check if the session is open."""
        return self._connected

    def connect(self) -> bool:
        """
        Open the HTTP session.

        Returns:
            True if the session is ready
        """
        self._session = requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "X-IOTA-API-Version": API_VERSION,
        })
        self._connected = True
        logger.debug(f"Session opened for {self.url}")
        return True

    def close(self) -> None:
        """Close the session."""
        self._connected = False

        if self._session:
            self._session.close()
            self._session = None

    def send(self, command: dict) -> Optional[dict]:
        """
        Send a command and return the node's JSON response.

        Node-level errors (HTTP 4xx with a JSON body) are returned as-is
        so the caller can read the "error" field.

        Args:
            command: Command object, e.g. {"command": "getNodeInfo"}

        Returns:
            Parsed JSON response or None on transport failure
        """
        if not self._connected:
            return None

        try:
            response = self._session.post(self.url, json=command, timeout=self.timeout)
        except requests.Timeout:
            logger.warning(f"Request to {self.url} timed out")
            return None
        except requests.RequestException as e:
            logger.error(f"Request to {self.url} failed: {e}")
            self._connected = False
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON response from {self.url} (HTTP {response.status_code}): {e}")
            return None

        if response.status_code >= 500 and "error" not in data:
            logger.error(f"Node {self.url} returned HTTP {response.status_code}")
            return None

        return data

    def __enter__(self) -> "NodeConnection":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
