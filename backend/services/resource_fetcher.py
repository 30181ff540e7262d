"""
Resource fetch collaborators

Fetchers hand raw resource bytes to the loader and resolver by name. They
are async so that reading game archives never blocks the event loop, and
every failure surfaces as ResourceUnavailableError.
"""
import asyncio
import zipfile
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from loguru import logger


class ResourceUnavailableError(Exception):
    """A named resource could not be fetched"""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to fetch {name}: {reason}")


class ResourceFetcher(Protocol):
    async def fetch(self, name: str) -> bytes:
        ...


def _check_name(name: str) -> None:
    """Resource names are bare file names, never paths"""
    if (not name or name in ('.', '..') or '/' in name or '\\' in name
            or Path(name).name != name):
        raise ResourceUnavailableError(name, "invalid resource name")


class DirectoryResourceFetcher:
    """Fetch resources from a directory, matching file names case-insensitively"""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    async def fetch(self, name: str) -> bytes:
        _check_name(name)
        return await asyncio.to_thread(self._read, name)

    def _find(self, name: str) -> Optional[Path]:
        direct = self.root / name
        if direct.is_file():
            return direct

        # NWN2 data folders mix upper and lower case file names
        target = name.lower()
        if self.root.is_dir():
            for candidate in self.root.iterdir():
                if candidate.is_file() and candidate.name.lower() == target:
                    return candidate
        return None

    def _read(self, name: str) -> bytes:
        try:
            path = self._find(name)
            if path is None:
                raise ResourceUnavailableError(name, f"not found in {self.root}")
            data = path.read_bytes()
        except OSError as e:
            raise ResourceUnavailableError(name, str(e))
        logger.debug(f"Read {len(data)} bytes from {path}")
        return data


class ZipResourceFetcher:
    """
    Fetch resources from a zip archive such as the game's 2DA.zip.

    Entries are matched on their base name, case-insensitively, so both
    ``feat.2da`` and ``2DA/feat.2da`` answer to ``feat.2da``.
    """

    def __init__(self, archive: Union[str, Path]):
        self.archive = Path(archive)
        self._index: Optional[Dict[str, str]] = None

    async def fetch(self, name: str) -> bytes:
        _check_name(name)
        return await asyncio.to_thread(self._read, name)

    def _build_index(self, zf: zipfile.ZipFile) -> Dict[str, str]:
        index = {}
        for info in zf.infolist():
            if info.is_dir():
                continue
            basename = info.filename.rsplit('/', 1)[-1].lower()
            # First entry wins when two folders hold the same name
            index.setdefault(basename, info.filename)
        return index

    def _read(self, name: str) -> bytes:
        try:
            with zipfile.ZipFile(self.archive) as zf:
                if self._index is None:
                    self._index = self._build_index(zf)
                    logger.debug(f"Indexed {len(self._index)} entries in {self.archive.name}")
                entry = self._index.get(name.lower())
                if entry is None:
                    raise ResourceUnavailableError(name, f"not found in {self.archive.name}")
                return zf.read(entry)
        except (OSError, zipfile.BadZipFile) as e:
            raise ResourceUnavailableError(name, str(e))


class ChainedResourceFetcher:
    """
    Try several fetchers in priority order, first hit wins.

    Mirrors the game's lookup order: loose override folders ahead of the
    stock data archives.
    """

    def __init__(self, fetchers):
        self.fetchers = list(fetchers)

    async def fetch(self, name: str) -> bytes:
        reasons = []
        for fetcher in self.fetchers:
            try:
                return await fetcher.fetch(name)
            except ResourceUnavailableError as e:
                reasons.append(e.reason)
        raise ResourceUnavailableError(name, '; '.join(reasons) or 'no sources configured')
