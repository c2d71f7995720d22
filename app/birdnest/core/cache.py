"""Binary cache of the installed-package index.

The cache file holds an 8-byte little-endian record count followed by one
``name\\0version\\0`` pair per installed package. It is trusted only while
it is at least as new as the dpkg status file; an older cache is deleted
on load. Install and remove operations invalidate it explicitly.
"""

import logging
import os
import struct
from pathlib import Path
from tempfile import NamedTemporaryFile

from birdnest.core.paths import DPKG_STATUS_PATH, get_cache_path
from birdnest.models.package import InstalledPackage
from birdnest.parsers.apt import parse_dpkg_query, parse_dpkg_status
from birdnest.utils.shell import CommandLaunchError, run_command

logger = logging.getLogger(__name__)

_COUNT = struct.Struct("<Q")


def encode_index(packages: list[InstalledPackage]) -> bytes:
    """Serialize the installed index into the cache format.

    Args:
        packages: Installed packages to store.

    Returns:
        The complete cache file contents.
    """
    parts = [_COUNT.pack(len(packages))]
    for package in packages:
        parts.append(package.name.encode("utf-8") + b"\0")
        parts.append(package.version.encode("utf-8") + b"\0")
    return b"".join(parts)


def decode_index(data: bytes) -> list[InstalledPackage] | None:
    """Deserialize cache file contents.

    Bytes after the declared records are ignored.

    Args:
        data: Raw cache file contents.

    Returns:
        The decoded index, or None if the data is truncated or a field
        lacks its NUL terminator. A partial index is never returned.
    """
    if len(data) < _COUNT.size:
        return None
    (count,) = _COUNT.unpack_from(data)

    packages: list[InstalledPackage] = []
    offset = _COUNT.size
    for _ in range(count):
        fields: list[str] = []
        for _ in range(2):
            end = data.find(b"\0", offset)
            if end == -1:
                return None
            fields.append(data[offset:end].decode("utf-8", errors="replace"))
            offset = end + 1
        packages.append(InstalledPackage(name=fields[0], version=fields[1]))
    return packages


class InstalledCache:
    """On-disk cache of the installed-package index.

    Args:
        cache_path: Cache file location. Defaults to the config directory.
        state_path: File whose mtime validates the cache. Defaults to the
            dpkg status file.
    """

    def __init__(self, cache_path: Path | None = None, state_path: Path | None = None) -> None:
        self.cache_path = cache_path or get_cache_path()
        self.state_path = state_path or DPKG_STATUS_PATH

    def is_stale(self) -> bool:
        """Check if the cache is strictly older than the state file.

        Returns:
            True if both files exist and the cache predates the state file.
        """
        try:
            cache_mtime = self.cache_path.stat().st_mtime
            state_mtime = self.state_path.stat().st_mtime
        except OSError:
            return False
        return cache_mtime < state_mtime

    def load(self) -> list[InstalledPackage] | None:
        """Load the cached index.

        A stale cache is deleted. Read errors and corrupt contents are
        treated as a miss.

        Returns:
            The cached index, or None on a miss.
        """
        if not self.cache_path.exists():
            logger.debug("No installed-package cache at %s", self.cache_path)
            return None

        if self.is_stale():
            logger.debug("Installed-package cache is older than %s, deleting", self.state_path)
            self.invalidate()
            return None

        try:
            data = self.cache_path.read_bytes()
        except OSError as e:
            logger.debug("Cannot read installed-package cache: %s", e)
            return None

        packages = decode_index(data)
        if packages is None:
            logger.debug("Installed-package cache at %s is corrupt", self.cache_path)
        return packages

    def save(self, packages: list[InstalledPackage]) -> None:
        """Write the index to the cache file.

        The encoded buffer is written to a temporary file in the cache
        directory and moved into place. Failures are logged, not raised.

        Args:
            packages: Installed packages to store.
        """
        data = encode_index(packages)
        tmp_path: Path | None = None
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="wb",
                dir=self.cache_path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.write(data)
            os.replace(str(tmp_path), str(self.cache_path))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            logger.warning("Failed to write installed-package cache: %s", e)
            return
        logger.debug("Cached %d installed packages at %s", len(packages), self.cache_path)

    def invalidate(self) -> None:
        """Delete the cache file; a missing file is not an error."""
        try:
            self.cache_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to delete installed-package cache: %s", e)


def load_installed_packages(cache: InstalledCache | None = None) -> list[InstalledPackage]:
    """Return the installed index, rebuilding the cache on a miss.

    The index comes from the cache when it is valid, otherwise from the
    dpkg status file, otherwise from ``dpkg-query -W``. A rebuilt index is
    written back to the cache.

    Args:
        cache: Cache to consult. If None, the default cache is used.

    Returns:
        Installed packages; empty if no source could be read.
    """
    cache = cache or InstalledCache()

    packages = cache.load()
    if packages is not None:
        return packages

    try:
        text = cache.state_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Cannot read %s (%s), falling back to dpkg-query", cache.state_path, e)
    else:
        packages = parse_dpkg_status(text)
        cache.save(packages)
        return packages

    try:
        result = run_command(["dpkg-query", "-W", "-f=${Package}\t${Version}\n"])
    except CommandLaunchError as e:
        logger.warning("Cannot list installed packages: %s", e)
        return []

    if not result.success:
        logger.warning("dpkg-query failed: %s", result.stderr.strip())
        return []

    packages = parse_dpkg_query(result.stdout)
    cache.save(packages)
    return packages
