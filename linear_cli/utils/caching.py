"""File-backed cache with TTL expiry.

Entries are plain files under a cache directory; a key such as
``"cycles/list"`` maps to ``<dir>/cycles/list``. Freshness is judged from
the file's modification time, so there is no index to keep consistent.

Key Exports:
    FileCache: TTL cache keyed by relative path.

Example:
    >>> cache = FileCache(Path("~/.cache/linear").expanduser(), ttl_seconds=300)
    >>> cache.set("issues/ENG-1", rendered)
    >>> cache.get("issues/ENG-1")

Concurrency:
    Writes go to a temporary file in the target directory and are moved into
    place with ``os.replace``, so a concurrent reader sees either the old or
    the new content, never a partial write.
"""

import os
import shutil
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

import structlog

log = structlog.get_logger(__name__)


class FileCache:
    """TTL cache stored as files on disk.

    Attributes:
        directory: Root of the cache
        ttl_seconds: Default entry lifetime
    """

    def __init__(
        self,
        directory: Path,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize cache.

        Args:
            directory: Root directory (created lazily)
            ttl_seconds: Default lifetime used by :meth:`get`
            clock: Returns the current time as a POSIX timestamp
        """
        self.directory = Path(directory)
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _path(self, key: str) -> Path:
        return self.directory / key

    def get(self, key: str) -> str | None:
        """Return cached content, or None if missing or expired."""
        return self.get_with_ttl(key, self.ttl_seconds)

    def get_with_ttl(self, key: str, ttl_seconds: float) -> str | None:
        """Like :meth:`get` but with a per-call lifetime."""
        path = self._path(key)
        try:
            age = self._clock() - path.stat().st_mtime
            if age > ttl_seconds:
                log.debug("cache_expired", key=key, age=round(age, 1))
                return None
            return path.read_text(encoding="utf-8")
        except OSError:
            return None

    def set(self, key: str, content: str) -> None:
        """Atomically write content for key.

        Raises:
            OSError: If the directory or file cannot be written
        """
        path = self._path(key)
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        log.debug("cache_set", key=key)

    def clear(self) -> int:
        """Remove every cached file and recreate the empty directory.

        Returns:
            Number of files removed
        """
        if not self.directory.exists():
            return 0

        count = sum(1 for p in self.directory.rglob("*") if not p.is_dir())
        shutil.rmtree(self.directory)
        self.directory.mkdir(mode=0o700, parents=True, exist_ok=True)

        log.info("cache_cleared", removed=count)
        return count
