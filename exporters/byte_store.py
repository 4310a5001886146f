"""Byte storage used to localize post images."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional, Union

logger = logging.getLogger('wordpress_markdown_exporter.exporters.byte_store')


class ByteStore(ABC):
    """Fetches remote bytes and persists them under local paths."""

    @abstractmethod
    def fetch_bytes(self, url: str) -> bytes:
        """
        Download the content at a URL.

        Raises:
            Exception: Any failure; callers treat it as a per-asset error
        """

    @abstractmethod
    def write_bytes(self, path: str, data: bytes) -> None:
        """
        Persist content at a relative path.

        Raises:
            OSError: If the file cannot be written
        """


class LocalByteStore(ByteStore):
    """Downloads through an injected fetch function and writes to the local filesystem."""

    def __init__(self, fetch: Callable[[str], bytes], root: Union[str, Path] = '.'):
        """
        Initialize the store.

        Args:
            fetch: Callable returning the bytes for a URL (e.g. WordPressClient.download_media)
            root: Directory relative paths are resolved against
        """
        self._fetch = fetch
        self.root = Path(root)

    def fetch_bytes(self, url: str) -> bytes:
        return self._fetch(url)

    def write_bytes(self, path: str, data: bytes) -> None:
        target = self.root / path
        atomic_write(target, data)
        logger.debug(f"Wrote {len(data)} bytes to {target}")


def atomic_write(target: Path, data: Union[bytes, str], encoding: Optional[str] = None) -> None:
    """
    Write a file through a temporary sibling and rename it into place.

    An interrupted write never leaves a partial file at ``target``.

    Args:
        target: Destination path (parent directories are created)
        data: Bytes, or text when ``encoding`` is given
        encoding: Text encoding for str data
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = data.encode(encoding or 'utf-8') if isinstance(data, str) else data

    fd, tmp_name = tempfile.mkstemp(dir=str(target.parent), prefix=f'.{target.name}.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'wb') as tmp_file:
            tmp_file.write(payload)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


__all__ = ['ByteStore', 'LocalByteStore', 'atomic_write']
