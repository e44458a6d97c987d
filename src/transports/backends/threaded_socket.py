"""线程后端

阻塞 socket 调用在专用线程池中执行，connect / write / read 分别提交并 await，
事件循环在每一步都可以调度其他任务。
"""

import asyncio
import contextlib
import logging
import socket
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, TypeVar

from config.settings import ClientConfig
from core.exceptions import ConnectionFailureError, IOFailureError
from transports.base import BaseBackend, BaseConnection, register_backend

T = TypeVar("T")


def _close_orphan_socket(future: Future) -> None:
    """调用方已取消时，关闭稍后才建立成功的连接"""
    if future.cancelled() or future.exception() is not None:
        return
    logging.debug("Closing socket connected after cancellation")
    future.result().close()


class ThreadedConnection(BaseConnection):
    """阻塞 socket 连接"""

    def __init__(
        self,
        sock: socket.socket,
        executor: ThreadPoolExecutor,
        read_chunk_size: int,
    ):
        self._sock = sock
        self._executor = executor
        self._read_chunk_size = read_chunk_size
        self._closed = False

    async def _run(self, func: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func)

    async def write_all(self, data: bytes) -> None:
        try:
            await self._run(lambda: self._sock.sendall(data))
        except OSError as e:
            raise IOFailureError(f"write failed: {e}") from e

    def _recv_to_end(self) -> bytes:
        chunks = []
        while True:
            chunk = self._sock.recv(self._read_chunk_size)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    async def read_to_end(self) -> bytes:
        try:
            return await self._run(self._recv_to_end)
        except OSError as e:
            raise IOFailureError(f"read failed: {e}") from e

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        # shutdown 唤醒仍阻塞在 recv 上的工作线程
        with contextlib.suppress(OSError):
            self._sock.shutdown(socket.SHUT_RDWR)
        self._sock.close()


@register_backend
class ThreadedSocketBackend(BaseBackend):
    """线程池 + 阻塞 socket 后端"""

    name = "thread"

    def __init__(self, read_chunk_size: int = 65536, max_workers: int = 10):
        super().__init__(read_chunk_size)
        self.executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="http-io"
        )

    @classmethod
    def from_config(cls, config: ClientConfig) -> "ThreadedSocketBackend":
        return cls(
            read_chunk_size=config.read_chunk_size,
            max_workers=config.thread_workers,
        )

    async def open_connection(self, host: str, port: int) -> ThreadedConnection:
        logging.debug(f"[{self.name}] Connecting to {host}:{port}")
        future = self.executor.submit(socket.create_connection, (host, port))
        try:
            sock = await asyncio.wrap_future(future)
        except asyncio.CancelledError:
            future.add_done_callback(_close_orphan_socket)
            raise
        except OSError as e:
            raise ConnectionFailureError(
                f"connect to {host}:{port} failed: {e}", host, port
            ) from e
        return ThreadedConnection(sock, self.executor, self.read_chunk_size)

    def shutdown(self) -> None:
        """关闭线程池"""
        self.executor.shutdown(wait=True)
