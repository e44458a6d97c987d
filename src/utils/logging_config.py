"""日志配置模块

为命令行入口配置根日志记录器。库代码只通过 logging 输出，不自行配置。
"""

import logging

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """配置日志系统

    Args:
        level: 日志级别（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        fmt: 日志格式

    Returns:
        根日志记录器
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # 清除现有的处理器，避免重复输出
    root_logger.handlers.clear()

    formatter = logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    # 输出到 stderr，stdout 留给响应正文
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # asyncio 的调试输出过于嘈杂
    if log_level > logging.DEBUG:
        logging.getLogger("asyncio").setLevel(logging.WARNING)

    return root_logger
