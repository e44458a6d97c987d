"""I/O 后端基类和注册表

后端提供 connect / write / read-to-end 三种能力，客户端只依赖这里的抽象，
不依赖具体后端类型。
"""

from abc import ABC, abstractmethod

from config.settings import ClientConfig
from core.exceptions import UnsupportedConfigurationError

# 后端注册表
BACKEND_REGISTRY: dict[str, type["BaseBackend"]] = {}


class BaseConnection(ABC):
    """单次请求独占的 TCP 连接"""

    @abstractmethod
    async def write_all(self, data: bytes) -> None:
        """写入全部数据

        Raises:
            IOFailureError: 写入失败
        """
        raise NotImplementedError

    @abstractmethod
    async def read_to_end(self) -> bytes:
        """读取直到对端关闭连接

        Raises:
            IOFailureError: 读取失败
        """
        raise NotImplementedError

    @abstractmethod
    async def aclose(self) -> None:
        """释放连接（可重复调用）"""
        raise NotImplementedError


class BaseBackend(ABC):
    """I/O 后端基类"""

    name: str

    def __init__(self, read_chunk_size: int = 65536):
        self.read_chunk_size = read_chunk_size

    @classmethod
    def from_config(cls, config: ClientConfig) -> "BaseBackend":
        """按客户端配置创建后端实例"""
        return cls(read_chunk_size=config.read_chunk_size)

    @abstractmethod
    async def open_connection(self, host: str, port: int) -> BaseConnection:
        """建立 TCP 连接

        Args:
            host: 主机
            port: 端口

        Returns:
            连接对象

        Raises:
            ConnectionFailureError: 连接失败
        """
        raise NotImplementedError

    def shutdown(self) -> None:
        """释放后端级别的资源"""


# -------------------- 后端注册表 -------------------- #


def register_backend(cls: type[BaseBackend]):
    """注册后端子类

    Args:
        cls: 后端类

    Returns:
        后端类（用于装饰器）
    """
    name = cls.name
    if name in BACKEND_REGISTRY:
        raise ValueError(f"Backend {name} already registered")
    BACKEND_REGISTRY[name] = cls
    return cls


def list_backends() -> list[str]:
    """列出所有已注册的后端名称"""
    return list(BACKEND_REGISTRY.keys())


def get_backend(name: str | None) -> type[BaseBackend]:
    """获取指定名称的后端类

    Args:
        name: 后端名称

    Returns:
        后端类

    Raises:
        UnsupportedConfigurationError: 未配置或未注册的后端
    """
    if not name:
        raise UnsupportedConfigurationError("No I/O backend configured")
    if name not in BACKEND_REGISTRY:
        raise UnsupportedConfigurationError(
            f"No backend registered under name: {name} "
            f"(available: {', '.join(list_backends()) or 'none'})",
            backend=name,
        )
    return BACKEND_REGISTRY[name]


__all__ = [
    "BaseBackend",
    "BaseConnection",
    "register_backend",
    "list_backends",
    "get_backend",
]
