"""HTTP 报文处理

请求序列化与响应正文提取，均为纯函数。
"""

import logging

from core.exceptions import ResponseDecodeError
from core.models import HttpMethod, ParsedTarget

HEADER_BODY_SEPARATOR = "\r\n\r\n"


def build_get_request(target: ParsedTarget) -> bytes:
    """构造 GET 请求报文

    Args:
        target: 解析后的目标

    Returns:
        完整请求字节
    """
    request = (
        f"GET {target.request_target} HTTP/1.1\r\n"
        f"Host: {target.host_header}\r\n"
        "Connection: close\r\n"
        "\r\n"
    )
    return request.encode("utf-8")


def build_post_request(target: ParsedTarget, body: str) -> bytes:
    """构造 POST 请求报文

    Content-Length 为正文的 UTF-8 字节长度，正文之后不追加任何结束符。

    Args:
        target: 解析后的目标
        body: 纯文本正文

    Returns:
        完整请求字节
    """
    payload = body.encode("utf-8")
    head = (
        f"POST {target.request_target} HTTP/1.1\r\n"
        f"Host: {target.host_header}\r\n"
        "Content-Type: text/plain\r\n"
        f"Content-Length: {len(payload)}\r\n"
        "Connection: close\r\n"
        "\r\n"
    )
    return head.encode("utf-8") + payload


def build_request(
    method: HttpMethod, target: ParsedTarget, body: str | None = None
) -> bytes:
    """按请求方法构造报文"""
    if method is HttpMethod.POST:
        return build_post_request(target, body or "")
    return build_get_request(target)


def decode_response(raw: bytes) -> str:
    """将原始响应解码为文本

    Raises:
        ResponseDecodeError: 响应不是合法的 UTF-8
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ResponseDecodeError(
            f"stream did not contain valid UTF-8 (byte {e.start})"
        ) from e


def extract_body(response: str) -> str:
    """提取响应正文

    在第一个空行（CRLF CRLF）处切分，丢弃头部；找不到分隔符时原样返回。
    """
    idx = response.find(HEADER_BODY_SEPARATOR)
    if idx == -1:
        logging.warning("Header/body separator not found, returning raw response")
        return response
    return response[idx + len(HEADER_BODY_SEPARATOR) :]
