"""Local filesystem adapter built on aiofiles."""

from __future__ import annotations

import platform
import stat
from datetime import UTC, datetime
from pathlib import Path

import aiofiles
import aiofiles.os

from ..models import DeviceInfo, FileInfo

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"


class LocalStorage:
    """Stateless adapter over the local filesystem."""

    async def path_exists(self, path: Path) -> bool:
        return await aiofiles.os.path.exists(path)

    async def create_directory(self, path: Path) -> None:
        await aiofiles.os.makedirs(path, exist_ok=True)

    async def append(self, path: Path, text: str) -> None:
        async with aiofiles.open(path, mode="a", encoding=TEXT_ENCODING) as f:
            await f.write(text)

    async def read_all(self, path: Path) -> str:
        async with aiofiles.open(path, encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as f:
            return await f.read()

    async def delete(self, path: Path) -> None:
        await aiofiles.os.remove(path)

    async def list_directory(self, path: Path) -> list[FileInfo]:
        out: list[FileInfo] = []
        for name in await aiofiles.os.listdir(path):
            try:
                st = await aiofiles.os.stat(Path(path) / name)
            except FileNotFoundError:
                # removed between listdir and stat
                continue
            if not stat.S_ISREG(st.st_mode):
                continue
            out.append(
                FileInfo(
                    name=name,
                    size=st.st_size,
                    modified_time=datetime.fromtimestamp(st.st_mtime, tz=UTC),
                )
            )
        return out

    async def size_of(self, path: Path) -> int:
        return await aiofiles.os.path.getsize(path)

    async def device_info(self) -> DeviceInfo:
        uname = platform.uname()
        return DeviceInfo(
            platform=uname.system.lower() or "unknown",
            model=uname.machine or "Unknown",
            version=uname.release or "unknown",
        )
