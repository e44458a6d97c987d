"""配置管理模块 - 使用 Pydantic

集中管理所有配置项，支持环境变量、.env 文件和配置验证。
"""

import logging
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 视为"未配置后端"的取值
DISABLED_BACKEND_VALUES = {"", "none", "off"}


class ClientConfig(BaseSettings):
    """HTTP 客户端配置"""

    model_config = SettingsConfigDict(
        env_prefix="HTTP_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # I/O 后端名称（None 表示未配置）
    backend: Optional[str] = Field(default="asyncio", description="I/O 后端名称")

    # 每次读取的字节数
    read_chunk_size: int = Field(
        default=65536, ge=1, le=1024 * 1024, description="单次读取字节数"
    )

    # thread 后端的工作线程数
    thread_workers: int = Field(default=10, ge=1, le=256, description="I/O 线程数")

    # URL 未指定端口时使用的端口
    default_port: int = Field(default=80, ge=1, le=65535, description="默认端口")

    @field_validator("backend", mode="before")
    @classmethod
    def normalize_backend(cls, v: Optional[str]) -> Optional[str]:
        """统一后端名称大小写，空值视为未配置"""
        if v is None:
            return None
        v = str(v).strip().lower()
        if v in DISABLED_BACKEND_VALUES:
            return None
        return v


class AppConfig(BaseSettings):
    """应用配置"""

    model_config = SettingsConfigDict(
        env_prefix="APP_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # 日志级别
    log_level: str = Field(default="INFO", description="日志级别")

    # 批量请求并发数
    max_concurrency: int = Field(
        default=10, ge=1, le=100, description="批量请求最大并发数"
    )

    # 是否显示进度条
    show_progress: bool = Field(default=True, description="是否显示进度条")

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """确保日志级别合法"""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class Config(BaseSettings):
    """全局配置"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    app: AppConfig = Field(default_factory=AppConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)

