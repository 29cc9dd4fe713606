"""
GarageDash Server - Object Stream Model

Wraps the body of a store GET so the underlying connection is released on
every exit path: full iteration, early abandonment, or an explicit Close().
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass
class ObjectStream:
    """
    Readable object body with its metadata

    body must provide iter_chunks(chunk_size), read() and close(), which is
    what botocore's StreamingBody offers.
    """
    key: str
    body: Any
    content_type: str
    size: int
    chunk_size: int = DEFAULT_CHUNK_SIZE
    closed: bool = False

    def __iter__(self) -> Iterator[bytes]:
        try:
            for chunk in self.body.iter_chunks(self.chunk_size):
                if chunk:
                    yield chunk
        finally:
            self.Close()

    def Read(self) -> bytes:
        """Read the whole body and release the connection"""
        try:
            return self.body.read()
        finally:
            self.Close()

    def Close(self) -> None:
        """Release the underlying connection without draining it (idempotent)"""
        if self.closed:
            return
        self.closed = True
        self.body.close()
        logger.debug(f"Released object stream for '{self.key}'")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.Close()
        return False
