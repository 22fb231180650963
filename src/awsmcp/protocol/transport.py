"""Server-side line transport.

The server reads one newline-delimited JSON message at a time and writes
one line per response.  :class:`StreamTransport` wraps a pair of text
streams; blocking reads run in the default executor so the event loop
stays free while waiting on the peer.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Protocol, TextIO, runtime_checkable

from awsmcp.protocol.errors import FramingError


@runtime_checkable
class ServerTransport(Protocol):
    """Line-oriented duplex channel to the single MCP peer."""

    async def receive(self) -> str | None:
        """Return the next line without its terminator, or ``None`` at EOF.

        Raises:
            FramingError: The input could not be decoded as text.
        """
        ...

    async def send(self, line: str) -> None:
        """Write one line and flush it."""
        ...


class StreamTransport:
    """Reads from and writes to text streams (stdin/stdout by default)."""

    def __init__(self, reader: TextIO, writer: TextIO) -> None:
        self._reader = reader
        self._writer = writer

    @classmethod
    def stdio(cls) -> StreamTransport:
        return cls(sys.stdin, sys.stdout)

    async def receive(self) -> str | None:
        loop = asyncio.get_running_loop()
        try:
            line = await loop.run_in_executor(None, self._reader.readline)
        except UnicodeDecodeError as exc:
            raise FramingError(f"Parse error: input is not valid UTF-8: {exc}") from exc
        if not line:
            return None
        return line.rstrip("\r\n")

    async def send(self, line: str) -> None:
        if "\n" in line:
            msg = "Outbound message must not contain a newline"
            raise ValueError(msg)
        self._writer.write(line + "\n")
        self._writer.flush()
