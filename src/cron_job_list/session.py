"""SSH session wrapper for cron-job-list.

A RemoteSession owns one asyncssh connection to one destination. It moves
through UNOPENED -> OPEN -> CLOSED and is never reused.

Host key verification is disabled (``known_hosts=None``): any host key is
accepted. This is insecure and only suitable for hosts you already trust.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import asyncssh

from .errors import ExecutionError, KeyFileError, SSHConnectionError

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of a RemoteSession."""

    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


class RemoteSession:
    """A single SSH connection used to run commands on one host."""

    def __init__(self, host: str, port: int, user: str):
        self.host = host
        self.port = port
        self.user = user
        self.state = SessionState.UNOPENED
        self._conn: asyncssh.SSHClientConnection | None = None

    @classmethod
    async def open(
        cls, host: str, port: int, user: str, key_path: str | Path
    ) -> RemoteSession:
        """Read the private key and connect to ``host:port`` as ``user``."""
        session = cls(host, port, user)
        await session.connect(key_path)
        return session

    async def connect(self, key_path: str | Path) -> None:
        if self.state is not SessionState.UNOPENED:
            raise SSHConnectionError(f"Session to {self.host} was already opened")

        key = _load_key(key_path)

        try:
            self._conn = await asyncssh.connect(
                self.host,
                port=self.port,
                username=self.user,
                client_keys=[key],
                known_hosts=None,  # Accept any host key
            )
        except (OSError, ValueError, asyncssh.Error) as e:
            # ValueError covers host names the IDNA codec rejects
            raise SSHConnectionError(
                f"Cannot connect to {self.user}@{self.host}:{self.port}: {e}"
            ) from e

        self.state = SessionState.OPEN

    async def run_command(self, command: str) -> bytes:
        """Run ``command`` and return its stdout and stderr combined."""
        if self.state is not SessionState.OPEN or self._conn is None:
            raise ExecutionError(f"Session to {self.host} is {self.state.value}")

        try:
            result = await self._conn.run(
                command, check=True, stderr=asyncssh.STDOUT, encoding=None
            )
        except asyncssh.ProcessError as e:
            output = _as_bytes(e.stdout).decode("utf-8", errors="replace").strip()
            message = f"'{command}' exited with status {e.exit_status}"
            if output:
                message = f"{message}: {output}"
            raise ExecutionError(message) from e
        except (OSError, asyncssh.Error) as e:
            raise ExecutionError(f"'{command}' failed: {e}") from e

        return _as_bytes(result.stdout)

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        conn, self._conn = self._conn, None
        self.state = SessionState.CLOSED
        if conn is None:
            return
        logger.debug("Closing connection to %s@%s", self.user, self.host)
        conn.close()
        await conn.wait_closed()

    async def __aenter__(self) -> RemoteSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def _load_key(key_path: str | Path) -> asyncssh.SSHKey:
    """Read and parse a private key file."""
    try:
        return asyncssh.read_private_key(str(key_path))
    except (OSError, asyncssh.KeyImportError) as e:
        raise KeyFileError(f"Cannot load private key {key_path}: {e}") from e


def _as_bytes(data: bytes | str | None) -> bytes:
    if data is None:
        return b""
    if isinstance(data, str):
        return data.encode()
    return data
