"""pytest 配置和测试夹具

提供一个在后台线程运行的原始 socket HTTP 测试服务器。
"""

import socket
import socketserver
import struct
import threading
from typing import Callable, Generator, Optional

import pytest

# 服务器在读完请求后调用，返回 None 表示不响应、一直等到客户端断开
ResponseFactory = Callable[[bytes], Optional[bytes]]

# 响应为该值时，服务器以 RST 中断连接
RESET = b"<reset>"


def parse_raw_request(raw: bytes) -> tuple[str, str, bytes]:
    """拆分请求为 (method, path, body)"""
    head, _, body = raw.partition(b"\r\n\r\n")
    request_line = head.split(b"\r\n", 1)[0].decode()
    method, path, _ = request_line.split(" ", 2)
    return method, path, body


def echo_response(raw: bytes) -> bytes:
    """GET 返回路径，POST 原样返回正文"""
    method, path, body = parse_raw_request(raw)
    payload = body if method == "POST" else f"path={path}".encode()
    return (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: text/plain\r\n"
        + f"Content-Length: {len(payload)}\r\n".encode()
        + b"\r\n"
        + payload
    )


class _ThreadingServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True


class _RequestHandler(socketserver.BaseRequestHandler):
    def _read_request(self) -> bytes:
        data = b""
        while b"\r\n\r\n" not in data:
            chunk = self.request.recv(4096)
            if not chunk:
                return data
            data += chunk

        head, _, body = data.partition(b"\r\n\r\n")
        length = 0
        for line in head.split(b"\r\n")[1:]:
            name, _, value = line.partition(b":")
            if name.strip().lower() == b"content-length":
                length = int(value.strip())
        while len(body) < length:
            chunk = self.request.recv(4096)
            if not chunk:
                break
            body += chunk
        return head + b"\r\n\r\n" + body

    def handle(self):
        server: "TestServer" = self.server.owner
        raw = self._read_request()
        if not raw:
            return
        server.requests.append(raw)
        server.request_received.set()

        response = server.response_factory(raw)
        if response == RESET:
            # SO_LINGER(1, 0) 使 close() 发送 RST 而不是 FIN
            self.request.setsockopt(
                socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("ii", 1, 0)
            )
            self.request.close()
            return

        if response is None:
            # 挂起，直到客户端关闭连接
            while self.request.recv(4096):
                pass
            server.client_closed.set()
            return

        self.request.sendall(response)


class TestServer:
    """后台线程运行的测试服务器"""

    __test__ = False

    def __init__(self, response_factory: ResponseFactory = echo_response):
        self.response_factory = response_factory
        self.requests: list[bytes] = []
        self.request_received = threading.Event()
        self.client_closed = threading.Event()

        self._server = _ThreadingServer(("127.0.0.1", 0), _RequestHandler)
        self._server.owner = self
        self.port = self._server.server_address[1]
        self._thread: Optional[threading.Thread] = None

    def url(self, path: str = "/") -> str:
        return f"http://127.0.0.1:{self.port}{path}"

    def start(self):
        """在后台线程启动服务器"""
        self._thread = threading.Thread(
            target=self._server.serve_forever, daemon=True
        )
        self._thread.start()

    def stop(self):
        """停止服务器"""
        self._server.shutdown()
        self._server.server_close()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def test_server() -> Generator[TestServer, None, None]:
    """回显测试服务器"""
    server = TestServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def serve() -> Generator[Callable[[ResponseFactory], TestServer], None, None]:
    """按自定义响应启动测试服务器，测试结束后统一停止"""
    servers: list[TestServer] = []

    def _serve(response_factory: ResponseFactory) -> TestServer:
        server = TestServer(response_factory)
        server.start()
        servers.append(server)
        return server

    yield _serve

    for server in servers:
        server.stop()


@pytest.fixture
def free_port() -> int:
    """获取一个当前无人监听的端口"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture(params=["asyncio", "thread"])
def backend_name(request) -> str:
    """对所有内置后端运行同一组测试"""
    return request.param


@pytest.fixture
def resetting_server() -> Generator[TestServer, None, None]:
    """读完请求后以 RST 中断连接的测试服务器"""
    server = TestServer(lambda raw: RESET)
    server.start()
    yield server
    server.stop()
