"""Blocking newline-framed TCP connection to the remote runner."""

import logging
import socket
from typing import Optional

from .errors import ProtocolError, RunnerConnectionError

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
RECV_SIZE = 65536


class LineConnection:
    """One TCP connection that sends and receives whole lines.

    Reads block until a full line arrives unless a read timeout is given.
    """

    def __init__(self, host: str, port: int, read_timeout: Optional[float] = None):
        self.host = host
        self.port = port
        self.read_timeout = read_timeout
        self.last_line: Optional[str] = None
        self._socket: Optional[socket.socket] = None
        self._buffer = bytearray()

    @property
    def connected(self) -> bool:
        return self._socket is not None

    def connect(self) -> None:
        logger.info(f"Connecting to {self.host}:{self.port}")
        try:
            self._socket = socket.create_connection((self.host, self.port))
        except OSError as e:
            self._socket = None
            raise RunnerConnectionError(f"Could not connect to {self.host}:{self.port}: {e}",
                                        metadata={"host": self.host, "port": self.port}) from e
        self._socket.settimeout(self.read_timeout)

    def send_line(self, text: str) -> None:
        if self._socket is None:
            raise RunnerConnectionError("Not connected")
        logger.debug(f"> {text}")
        self._socket.sendall((text + "\n").encode(ENCODING))

    def read_line(self) -> str:
        """Read the next line without its terminator.

        Raises ProtocolError when the peer closes the stream, the read times
        out or the line is not valid UTF-8.
        """
        if self._socket is None:
            raise RunnerConnectionError("Not connected")
        end = self._buffer.find(b"\n")
        while end < 0:
            start = len(self._buffer)
            try:
                data = self._socket.recv(RECV_SIZE)
            except socket.timeout:
                raise ProtocolError(f"No data from {self.host}:{self.port} within {self.read_timeout}s",
                                    last_line=self.last_line)
            if not data:
                if self._buffer:
                    # Unterminated final line
                    end = len(self._buffer)
                    break
                raise ProtocolError(f"Connection closed by {self.host}:{self.port}",
                                    last_line=self.last_line)
            self._buffer += data
            end = self._buffer.find(b"\n", start)
        raw = bytes(self._buffer[:end])
        del self._buffer[:end + 1]
        try:
            line = raw.decode(ENCODING).rstrip("\r")
        except UnicodeDecodeError as e:
            raise ProtocolError(f"Invalid {ENCODING} from {self.host}:{self.port}: {e}",
                                last_line=self.last_line) from e
        self.last_line = line
        return line

    def close(self) -> None:
        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

    def __enter__(self) -> "LineConnection":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
