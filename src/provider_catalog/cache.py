"""On-disk cache of the provider list.

The cache is a single JSON file. Its modification time is the only staleness
signal; content is neither hashed nor versioned.
"""

import json
import os
import tempfile
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .errors import DecodeError, ReadError, WriteError
from .logging import LogEvent, log_debug, log_info
from .schema import Provider, providers_from_json, providers_to_json

DEFAULT_MAX_AGE = timedelta(hours=24)


@dataclass
class CacheStatus:
    """Snapshot of the cache file state.

    Attributes:
        path: Path to the cache file
        exists: Whether the file could be stat'd
        stale: Whether the file is older than the maximum age (always true when missing)
        modified: Modification time, if the file exists
        size: File size in bytes
        age: Seconds since the last modification
    """

    path: Path
    exists: bool
    stale: bool
    modified: Optional[datetime] = None
    size: int = 0
    age: Optional[float] = None


class CacheStore:
    """Reads and writes the provider cache file."""

    def __init__(
        self,
        path: Union[str, Path],
        max_age: timedelta = DEFAULT_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache store.

        Args:
            path: Location of the cache file
            max_age: Age after which the cache counts as stale
            clock: Returns the current time as a POSIX timestamp
        """
        if max_age.total_seconds() <= 0:
            raise ValueError("max_age must be positive")
        self.path = Path(path)
        self.max_age = max_age
        self._clock = clock

    def is_stale(self) -> Tuple[bool, bool]:
        """Check whether the cache file is stale.

        Any error while stat'ing the file counts as "does not exist".

        Returns:
            ``(stale, exists)``
        """
        try:
            mtime = self.path.stat().st_mtime
        except OSError:
            return True, False
        return self._clock() - mtime > self.max_age.total_seconds(), True

    def status(self) -> CacheStatus:
        """Describe the current cache file."""
        try:
            stat = self.path.stat()
        except OSError:
            return CacheStatus(path=self.path, exists=False, stale=True)

        age = self._clock() - stat.st_mtime
        return CacheStatus(
            path=self.path,
            exists=True,
            stale=age > self.max_age.total_seconds(),
            modified=datetime.fromtimestamp(stat.st_mtime),
            size=stat.st_size,
            age=age,
        )

    def load(self) -> List[Provider]:
        """Load providers from the cache file.

        Returns:
            Providers in file order

        Raises:
            ReadError: If the file cannot be read
            DecodeError: If the file is not a valid provider list
        """
        try:
            with open(self.path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise ReadError(f"Failed to read provider cache file: {e}", path=str(self.path)) from e

        try:
            providers = providers_from_json(json.loads(content.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
            raise DecodeError(f"Failed to decode provider data from cache: {e}", source=str(self.path)) from e

        log_debug(LogEvent.PROVIDER_CACHE, "Loaded provider cache", path=str(self.path), providers=len(providers))
        return providers

    def save(self, providers: Sequence[Provider]) -> None:
        """Write providers to the cache file.

        The data is written to a temporary file in the same directory and then
        moved over the cache file, so readers never see a partial file.

        Args:
            providers: Providers to persist

        Raises:
            WriteError: If the directory or the file cannot be written
        """
        log_info(LogEvent.PROVIDER_CACHE, "Saving cached provider data", path=str(self.path))
        content = json.dumps(providers_to_json(providers), indent=2, ensure_ascii=False)

        tmp_path: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.write("\n")
            if hasattr(os, "chmod"):
                os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise WriteError(f"Failed to write provider data to cache: {e}", path=str(self.path)) from e
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass

    def clear(self) -> bool:
        """Remove the cache file.

        Returns:
            True if a file was removed, False if there was none

        Raises:
            WriteError: If the file exists but cannot be removed
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise WriteError(f"Failed to remove provider cache: {e}", path=str(self.path)) from e
        log_info(LogEvent.PROVIDER_CACHE, "Removed provider cache", path=str(self.path))
        return True
