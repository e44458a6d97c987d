"""URL 解析

将 URL 字符串解析为 ParsedTarget，校验主机与端口。
"""

import ipaddress
import re
from urllib.parse import quote, urlsplit

from core.exceptions import InvalidInputError
from core.models import ParsedTarget

DEFAULT_PORT = 80

# 主机名：字母、数字、连字符、下划线，以点分隔
_LABEL = r"[A-Za-z0-9_]([A-Za-z0-9_-]*[A-Za-z0-9_])?"
_HOSTNAME_RE = re.compile(rf"^{_LABEL}(\.{_LABEL})*\.?$")

# 请求目标中无需转义的字符（RFC 3986 pchar + "/" + 已有的 "%" 转义）
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?"


def _normalize_host(host: str, url: str) -> str:
    """校验并规范化主机名

    Raises:
        InvalidInputError: 主机名非法
    """
    if ":" in host:
        try:
            return str(ipaddress.IPv6Address(host))
        except ValueError as e:
            raise InvalidInputError(f"invalid host: {host!r}", url) from e

    if not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as e:
            raise InvalidInputError(f"invalid host: {host!r}", url) from e

    if not _HOSTNAME_RE.match(host):
        raise InvalidInputError(f"invalid host: {host!r}", url)
    return host.lower()


def _add_default_scheme(raw: str, url: str) -> str:
    """为 host[:port][/path] 形式的输入补上 http://

    Raises:
        InvalidInputError: 输入没有主机部分（纯路径、mailto: 之类无 // 的 URL）
    """
    if raw.startswith("//"):
        return "http:" + raw
    if raw.startswith("/"):
        raise InvalidInputError("missing host", url)

    authority = re.split(r"[/?#]", raw, maxsplit=1)[0]
    if not authority.startswith("["):
        scheme, sep, port = authority.partition(":")
        # "localhost:8080" 中冒号后是端口；"mailto:x" 中冒号前是 scheme
        if sep and port and not port.isdigit():
            raise InvalidInputError(
                f"missing host: no authority after scheme {scheme!r}", url
            )
    return "http://" + raw


def parse_target(url: str, default_port: int = DEFAULT_PORT) -> ParsedTarget:
    """解析 URL

    scheme 可省略且不影响行为（始终使用明文 HTTP）；path 缺省为 "/"，
    port 缺省为 default_port。

    Args:
        url: URL 字符串，形如 scheme://host[:port][/path][?query]
        default_port: 未指定端口时使用的端口

    Returns:
        ParsedTarget

    Raises:
        InvalidInputError: URL 语法错误或缺少主机
    """
    if not isinstance(url, str):
        raise InvalidInputError(f"URL must be a string, got {type(url).__name__}")

    raw = url.strip()
    if not raw:
        raise InvalidInputError("missing host", url)

    if "://" not in raw:
        raw = _add_default_scheme(raw, url)

    try:
        parts = urlsplit(raw)
    except ValueError as e:
        raise InvalidInputError(f"malformed URL: {e}", url) from e

    host = parts.hostname
    if not host:
        raise InvalidInputError("missing host", url)
    host = _normalize_host(host, url)

    try:
        port = parts.port
    except ValueError as e:
        raise InvalidInputError(f"invalid port: {e}", url) from e
    if port is None:
        port = default_port

    path = quote(parts.path, safe=_PATH_SAFE) or "/"
    query = quote(parts.query, safe=_QUERY_SAFE)

    return ParsedTarget(
        host=host,
        path=path,
        port=port,
        query=query,
        scheme=parts.scheme.lower() or "http",
    )
