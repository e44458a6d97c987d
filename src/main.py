"""主入口"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from config.settings import Config
from core.models import FetchRequest, FetchResult, HttpMethod
from services.http_service import BatchHttpService, SimpleHttpClient
from transports.base import list_backends
from utils.logging_config import setup_logging


def positive_int(value: str) -> int:
    """argparse 类型：正整数"""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from e
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """构建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        description="Minimal HTTP/1.1 client over raw TCP sockets"
    )
    parser.add_argument(
        "method",
        nargs="?",
        choices=[m.value.lower() for m in HttpMethod],
        help="Request method",
    )
    parser.add_argument("urls", nargs="*", help="Target URL(s)")
    parser.add_argument(
        "--data",
        default="",
        help="Plain-text request body for POST",
    )
    parser.add_argument(
        "--backend",
        help="I/O backend to use (overrides HTTP_CLIENT_BACKEND)",
    )
    parser.add_argument(
        "--workers",
        type=positive_int,
        default=None,
        help="Maximum number of concurrent requests",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List all registered backends and exit",
    )
    return parser


def print_report(results: list[FetchResult]):
    """打印控制台报告"""
    print("\n" + "=" * 60)
    print("                    请求报告")
    print("=" * 60)

    success_count = sum(1 for r in results if r.ok)
    failed_count = len(results) - success_count

    for r in results:
        icon = "✓" if r.ok else "✗"
        detail = f"{len(r.body or '')} chars" if r.ok else f"({r.error})"
        print(f"[{icon}] {r.method.value:4} {r.url:40} │ {r.elapsed:6.2f}s │ {detail}")

    print("-" * 60)
    print(f"总计: {len(results)} 请求 │ 成功: {success_count} │ 失败: {failed_count}")
    print("=" * 60 + "\n")


async def run(
    requests: list[FetchRequest],
    client: SimpleHttpClient,
    max_concurrency: int,
    show_progress: bool,
) -> list[FetchResult]:
    """并发执行请求并释放客户端资源"""
    service = BatchHttpService(client, max_concurrency, show_progress)
    try:
        return await service.fetch_all(requests)
    finally:
        client.shutdown()


def main(argv: Optional[list[str]] = None) -> int:
    """主入口函数"""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = Config()
    setup_logging(level=config.app.log_level)

    if args.list:
        print("Registered backends:")
        for name in list_backends():
            marker = " (default)" if name == config.client.backend else ""
            print(f"  - {name}{marker}")
        return 0

    if not args.method or not args.urls:
        parser.error("a method and at least one URL are required")

    method = HttpMethod(args.method.upper())
    body = args.data if method is HttpMethod.POST else None
    requests = [FetchRequest(url=url, method=method, body=body) for url in args.urls]

    client = SimpleHttpClient(backend=args.backend, config=config.client)
    logging.info(f"Requests to run: {len(requests)} via {client.backend_name}")

    max_concurrency = args.workers or config.app.max_concurrency
    show_progress = config.app.show_progress and len(requests) > 1
    results = asyncio.run(run(requests, client, max_concurrency, show_progress))

    if len(results) == 1:
        result = results[0]
        if result.ok:
            sys.stdout.write(result.body)
            return 0
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    print_report(results)
    return 0 if all(r.ok for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
