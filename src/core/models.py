"""核心数据模型

纯数据模型，不包含业务逻辑。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class HttpMethod(Enum):
    """请求方法枚举"""

    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class ParsedTarget:
    """URL 解析结果"""

    host: str
    path: str = "/"
    port: int = 80
    query: str = ""
    scheme: str = "http"  # 仅用于日志，始终使用明文 HTTP

    @property
    def request_target(self) -> str:
        """请求行中的目标（路径 + 查询串）

        查询串保留在请求目标中，不会被丢弃。
        """
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path

    @property
    def host_header(self) -> str:
        """Host 头中的主机（IPv6 字面量加方括号）"""
        if ":" in self.host:
            return f"[{self.host}]"
        return self.host

    @property
    def address(self) -> tuple[str, int]:
        """传给后端的连接地址"""
        return self.host, self.port


@dataclass
class FetchRequest:
    """批量请求条目"""

    url: str
    method: HttpMethod = HttpMethod.GET
    body: Optional[str] = None


@dataclass
class FetchResult:
    """单次请求执行结果"""

    url: str
    method: HttpMethod
    status: str  # "success" / "failed"
    body: Optional[str] = None
    error: Optional[str] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == "success"
