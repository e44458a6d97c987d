"""asyncio 流后端

基于 asyncio.open_connection，connect / drain / read 均为原生挂起点。
"""

import asyncio
import contextlib
import logging

from core.exceptions import ConnectionFailureError, IOFailureError
from transports.base import BaseBackend, BaseConnection, register_backend


class AsyncioConnection(BaseConnection):
    """asyncio StreamReader/StreamWriter 连接"""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        read_chunk_size: int,
    ):
        self._reader = reader
        self._writer = writer
        self._read_chunk_size = read_chunk_size
        self._closed = False

    async def write_all(self, data: bytes) -> None:
        try:
            self._writer.write(data)
            await self._writer.drain()
        except OSError as e:
            raise IOFailureError(f"write failed: {e}") from e

    async def read_to_end(self) -> bytes:
        chunks = []
        try:
            while True:
                chunk = await self._reader.read(self._read_chunk_size)
                if not chunk:
                    break
                chunks.append(chunk)
        except OSError as e:
            raise IOFailureError(f"read failed: {e}") from e
        return b"".join(chunks)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        # close() 立即释放传输层，wait_closed 只等待收尾
        self._writer.close()
        with contextlib.suppress(OSError):
            await self._writer.wait_closed()


@register_backend
class AsyncioBackend(BaseBackend):
    """asyncio 后端"""

    name = "asyncio"

    async def open_connection(self, host: str, port: int) -> AsyncioConnection:
        logging.debug(f"[{self.name}] Connecting to {host}:{port}")
        try:
            reader, writer = await asyncio.open_connection(host, port)
        except OSError as e:
            raise ConnectionFailureError(
                f"connect to {host}:{port} failed: {e}", host, port
            ) from e
        return AsyncioConnection(reader, writer, self.read_chunk_size)
