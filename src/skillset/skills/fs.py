"""
Filesystem access used by skill discovery.

Discovery never touches the disk directly; it goes through one of two
small interfaces so it can run in blocking code or inside an asyncio
event loop, and so tests can substitute an in-memory filesystem.

Directory listings are lazy. Opening a listing may fail as a whole, and
producing any single entry may fail on its own; discovery handles the
two cases differently.
"""

from __future__ import annotations

import abc as _abc
import asyncio as _asyncio
import functools as _functools
import os as _os
import pathlib as _pathlib
import typing as _typing

_T = _typing.TypeVar("_T")

# Returned by next() when a blocking listing is exhausted
_END = object()


class Filesystem(_abc.ABC):
    """Blocking filesystem interface."""

    @_abc.abstractmethod
    def is_dir(self, path: _pathlib.Path) -> bool:
        """Check whether path is a directory."""
        ...

    @_abc.abstractmethod
    def is_file(self, path: _pathlib.Path) -> bool:
        """Check whether path is a regular file."""
        ...

    @_abc.abstractmethod
    def read_dir(self, path: _pathlib.Path) -> _typing.Iterator[_pathlib.Path]:
        """
        List the entries of a directory.

        Raises:
            OSError: If the directory can't be opened. Errors for single
                entries are raised from the returned iterator instead.
        """
        ...

    @_abc.abstractmethod
    def load(self, path: _pathlib.Path) -> str:
        """Read a file as UTF-8 text."""
        ...


class AsyncFilesystem(_abc.ABC):
    """Non-blocking filesystem interface."""

    @_abc.abstractmethod
    async def is_dir(self, path: _pathlib.Path) -> bool: ...

    @_abc.abstractmethod
    async def is_file(self, path: _pathlib.Path) -> bool: ...

    @_abc.abstractmethod
    async def read_dir(
        self, path: _pathlib.Path
    ) -> _typing.AsyncIterator[_pathlib.Path]:
        """Open a directory listing; entries arrive from the async iterator."""
        ...

    @_abc.abstractmethod
    async def load(self, path: _pathlib.Path) -> str: ...


class LocalFilesystem(Filesystem):
    """Filesystem backed by the local disk."""

    def is_dir(self, path: _pathlib.Path) -> bool:
        return path.is_dir()

    def is_file(self, path: _pathlib.Path) -> bool:
        return path.is_file()

    def read_dir(self, path: _pathlib.Path) -> _typing.Iterator[_pathlib.Path]:
        # scandir raises here if the directory can't be opened
        entries = _os.scandir(path)
        return self._iter_entries(entries)

    @staticmethod
    def _iter_entries(
        entries: _typing.Any,
    ) -> _typing.Iterator[_pathlib.Path]:
        with entries:
            for entry in entries:
                yield _pathlib.Path(entry.path)

    def load(self, path: _pathlib.Path) -> str:
        return path.read_text(encoding="utf-8")


class AsyncLocalFilesystem(AsyncFilesystem):
    """
    Local disk access that runs blocking calls in the loop's executor.

    Listings are stepped one entry per executor call, so an error on one
    entry reaches the caller after the entries before it.

    Args:
        fs: Blocking filesystem to delegate to. Defaults to LocalFilesystem.
    """

    def __init__(self, fs: Filesystem | None = None) -> None:
        self._fs: Filesystem = fs if fs is not None else LocalFilesystem()

    async def _run(self, func: _typing.Callable[..., _T], *args: _typing.Any) -> _T:
        loop = _asyncio.get_running_loop()
        return await loop.run_in_executor(None, _functools.partial(func, *args))

    async def is_dir(self, path: _pathlib.Path) -> bool:
        return await self._run(self._fs.is_dir, path)

    async def is_file(self, path: _pathlib.Path) -> bool:
        return await self._run(self._fs.is_file, path)

    async def read_dir(
        self, path: _pathlib.Path
    ) -> _typing.AsyncIterator[_pathlib.Path]:
        entries = await self._run(self._fs.read_dir, path)
        return self._aiter(iter(entries))

    async def _aiter(
        self,
        entries: _typing.Iterator[_pathlib.Path],
    ) -> _typing.AsyncIterator[_pathlib.Path]:
        while True:
            entry = await self._run(next, entries, _END)
            if entry is _END:
                return
            yield entry

    async def load(self, path: _pathlib.Path) -> str:
        return await self._run(self._fs.load, path)
