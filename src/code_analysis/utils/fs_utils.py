"""
File system utilities for code analysis.

Blocking calls are pushed to the default executor so scans only suspend at
I/O boundaries.
"""

import asyncio
import os


async def is_directory(dir_path: str) -> bool:
    return await asyncio.get_event_loop().run_in_executor(
        None, os.path.isdir, dir_path
    )


def _list_entries(dir_path: str) -> list[os.DirEntry[str]]:
    with os.scandir(dir_path) as it:
        return list(it)


async def list_directory(dir_path: str) -> list[os.DirEntry[str]]:
    """List a directory's entries without following symlinks."""
    return await asyncio.get_event_loop().run_in_executor(
        None, _list_entries, dir_path
    )


async def stat_entry(entry: os.DirEntry[str]) -> os.stat_result:
    return await asyncio.get_event_loop().run_in_executor(
        None, lambda: entry.stat(follow_symlinks=False)
    )


def read_text_sync(file_path: str) -> str:
    """Read a file as UTF-8, replacing undecodable bytes."""
    with open(file_path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


async def read_text(file_path: str) -> str:
    return await asyncio.get_event_loop().run_in_executor(
        None, read_text_sync, file_path
    )
