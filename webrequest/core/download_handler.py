"""Sinks that receive the response body while a request is being sent."""

import abc
import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union

from webrequest.exceptions import ResourceReleasedError

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


class DownloadHandler(abc.ABC):
    """Base class for response body sinks.

    The request calls ``prepare`` once response headers are available, then
    ``receive_data`` for every body chunk, then ``complete``. A handler is disposed
    together with the request that owns it unless the request detached it first.
    """

    def __init__(self) -> None:
        self.encoding: str = DEFAULT_ENCODING
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def prepare(self, encoding: Optional[str] = None) -> None:
        """Called before the first chunk with the response charset, if any."""
        self._ensure_usable()
        self.encoding = encoding or DEFAULT_ENCODING

    @abc.abstractmethod
    def receive_data(self, chunk: bytes) -> None:
        """Receive one chunk of the response body."""
        raise NotImplementedError

    def complete(self) -> None:
        """Called once the whole body has been received."""
        pass

    def fail(self) -> None:
        """Called when the transfer ends with a connection-level fault."""
        pass

    @property
    def data(self) -> Optional[bytes]:
        """The received body as bytes, if this handler keeps it."""
        return None

    @property
    def text(self) -> Optional[str]:
        """The received body decoded as text, if this handler keeps it."""
        return None

    def dispose(self) -> None:
        self._disposed = True

    def _ensure_usable(self) -> None:
        if self._disposed:
            raise ResourceReleasedError(f"{self.__class__.__name__} has already been released")


class DownloadHandlerBuffer(DownloadHandler):
    """Keeps the response body in memory."""

    def __init__(self) -> None:
        super().__init__()
        self._buffer: Optional[bytearray] = bytearray()

    def receive_data(self, chunk: bytes) -> None:
        self._ensure_usable()
        self._buffer.extend(chunk)

    @property
    def data(self) -> Optional[bytes]:
        self._ensure_usable()
        return bytes(self._buffer)

    @property
    def text(self) -> Optional[str]:
        self._ensure_usable()
        try:
            return self._buffer.decode(self.encoding, errors="replace")
        except LookupError:
            logger.warning(f"Unknown response encoding '{self.encoding}', decoding as {DEFAULT_ENCODING}")
            return self._buffer.decode(DEFAULT_ENCODING, errors="replace")

    def dispose(self) -> None:
        super().dispose()
        self._buffer = None


class DownloadHandlerFile(DownloadHandler):
    """Writes the response body to a file.

    The body is not kept in memory, so ``data`` and ``text`` are always None.

    Args:
        path: Destination file. Parent directories are created if missing.
        remove_on_failure: Delete the partially written file if the transfer fails.
            Only a file this handler opened in ``prepare()`` is removed.
    """

    def __init__(self, path: Union[str, os.PathLike], remove_on_failure: bool = True) -> None:
        super().__init__()
        self.path = Path(path)
        self.remove_on_failure = remove_on_failure
        self.bytes_written = 0
        self._file: Optional[BinaryIO] = None
        self._created = False

    def prepare(self, encoding: Optional[str] = None) -> None:
        super().prepare(encoding)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "wb")
        self._created = True

    def receive_data(self, chunk: bytes) -> None:
        self._ensure_usable()
        if self._file is None:
            raise RuntimeError("DownloadHandlerFile.prepare() must be called before receiving data")
        self._file.write(chunk)
        self.bytes_written += len(chunk)

    def complete(self) -> None:
        self._close_file()
        logger.debug(f"Wrote {self.bytes_written} bytes to {self.path}")

    def fail(self) -> None:
        self._close_file()
        if self.remove_on_failure and self._created and self.path.exists():
            self.path.unlink()
            logger.debug(f"Removed partial download {self.path}")

    def dispose(self) -> None:
        self._close_file()
        super().dispose()

    def _close_file(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
