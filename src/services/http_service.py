"""HTTP 请求服务

提供基于原始 TCP 连接的 HTTP/1.1 客户端，以及并发批量请求服务。
"""

import asyncio
import logging
import time
from typing import Optional, Union

from tqdm import tqdm

from config.settings import ClientConfig
from core.exceptions import HttpClientError
from core.interfaces import HttpClient
from core.models import FetchRequest, FetchResult, HttpMethod
from transports.base import BaseBackend, get_backend
from utils.http_message import build_request, decode_response, extract_body
from utils.url_parser import parse_target


class SimpleHttpClient:
    """最小化 HTTP/1.1 客户端

    每次调用独占一个连接：解析 URL、连接、写请求、读到对端关闭、切分正文。
    调用之间不共享任何状态。
    """

    def __init__(
        self,
        backend: Optional[Union[str, BaseBackend]] = None,
        config: Optional[ClientConfig] = None,
    ):
        """初始化客户端

        Args:
            backend: 后端实例或名称（可选，默认使用配置中的后端）
            config: 客户端配置（可选）
        """
        self.config = config or ClientConfig()
        self._owns_backend = not isinstance(backend, BaseBackend)
        self._backend: Optional[BaseBackend] = (
            None if self._owns_backend else backend
        )
        self._backend_name = backend if isinstance(backend, str) else None

    @property
    def backend_name(self) -> Optional[str]:
        """当前选择的后端名称"""
        if self._backend is not None:
            return self._backend.name
        return self._backend_name or self.config.backend

    def _resolve_backend(self) -> BaseBackend:
        """获取后端实例，首次使用时创建

        Raises:
            UnsupportedConfigurationError: 未配置或未注册的后端
        """
        if self._backend is None:
            backend_cls = get_backend(self.backend_name)
            self._backend = backend_cls.from_config(self.config)
            logging.debug(f"Using I/O backend: {self._backend.name}")
        return self._backend

    async def request(
        self, method: HttpMethod, url: str, body: Optional[str] = None
    ) -> str:
        """执行一次完整的请求-响应过程

        Args:
            method: 请求方法
            url: 请求 URL
            body: POST 正文

        Returns:
            响应正文

        Raises:
            UnsupportedConfigurationError: 未配置后端
            InvalidInputError: URL 非法
            ConnectionFailureError: 连接失败
            IOFailureError: 读写失败
        """
        backend = self._resolve_backend()
        target = parse_target(url, self.config.default_port)
        payload = build_request(method, target, body)

        connection = await backend.open_connection(*target.address)
        try:
            await connection.write_all(payload)
            logging.debug(f"Sent {method.value} {url} ({len(payload)} bytes)")
            raw = await connection.read_to_end()
        finally:
            await connection.aclose()

        logging.debug(f"Received {len(raw)} bytes from {target.host}:{target.port}")
        return extract_body(decode_response(raw))

    async def get(self, url: str) -> str:
        """发送 GET 请求

        Args:
            url: 请求 URL

        Returns:
            响应正文
        """
        return await self.request(HttpMethod.GET, url)

    async def post(self, url: str, body: str) -> str:
        """发送纯文本 POST 请求

        Args:
            url: 请求 URL
            body: 请求正文

        Returns:
            响应正文
        """
        return await self.request(HttpMethod.POST, url, body)

    def shutdown(self):
        """释放客户端创建的后端资源"""
        if self._owns_backend and self._backend is not None:
            self._backend.shutdown()
            self._backend = None


class BatchHttpService:
    """并发批量请求服务"""

    def __init__(
        self,
        http_client: HttpClient,
        max_concurrency: int = 10,
        show_progress: bool = False,
    ):
        self.http_client = http_client
        self.max_concurrency = max_concurrency
        self.show_progress = show_progress

    async def fetch_one(self, request: FetchRequest) -> FetchResult:
        """执行单个请求，失败时返回 failed 结果而不抛出"""
        start_time = time.monotonic()
        try:
            if request.method is HttpMethod.POST:
                body = await self.http_client.post(request.url, request.body or "")
            else:
                body = await self.http_client.get(request.url)
        except HttpClientError as e:
            logging.error(f"{request.method.value} {request.url} failed: {e}")
            return FetchResult(
                url=request.url,
                method=request.method,
                status="failed",
                error=str(e),
                elapsed=time.monotonic() - start_time,
            )

        return FetchResult(
            url=request.url,
            method=request.method,
            status="success",
            body=body,
            elapsed=time.monotonic() - start_time,
        )

    async def fetch_all(self, requests: list[FetchRequest]) -> list[FetchResult]:
        """并发执行请求

        Args:
            requests: 请求列表

        Returns:
            与输入顺序一致的结果列表
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        with tqdm(
            total=len(requests),
            desc="Fetching",
            unit="req",
            disable=not self.show_progress,
        ) as pbar:

            async def run(request: FetchRequest) -> FetchResult:
                async with semaphore:
                    result = await self.fetch_one(request)
                pbar.update(1)
                return result

            results = await asyncio.gather(*(run(r) for r in requests))

        success_count = sum(1 for r in results if r.ok)
        logging.info(f"Fetched {success_count}/{len(results)} URLs successfully")
        return list(results)
