"""自定义异常类"""


class HttpClientError(Exception):
    """HTTP 客户端基础异常"""

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        self.message = message
        super().__init__(f"[{url}] {message}" if url else message)


class InvalidInputError(HttpClientError):
    """URL 无法解析或缺少主机"""


class ConnectionFailureError(HttpClientError):
    """TCP 连接失败（拒绝、不可达、DNS 解析失败）"""

    def __init__(
        self,
        message: str,
        host: str | None = None,
        port: int | None = None,
        url: str | None = None,
    ):
        self.host = host
        self.port = port
        super().__init__(message, url)


class IOFailureError(HttpClientError):
    """读写过程中的传输异常"""


class ResponseDecodeError(IOFailureError):
    """响应内容不是合法的 UTF-8 文本"""


class UnsupportedConfigurationError(HttpClientError):
    """未配置或不可用的 I/O 后端"""

    def __init__(
        self,
        message: str,
        backend: str | None = None,
        url: str | None = None,
    ):
        self.backend = backend
        super().__init__(message, url)
