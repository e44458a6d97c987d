"""异常类单元测试"""

from core.exceptions import (
    HttpClientError,
    InvalidInputError,
    ConnectionFailureError,
    IOFailureError,
    ResponseDecodeError,
    UnsupportedConfigurationError,
)


class TestHttpClientError:
    """HttpClientError 测试类"""

    def test_basic_message(self):
        """测试基本消息"""
        error = HttpClientError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.url is None

    def test_with_url(self):
        """测试带 URL"""
        error = HttpClientError("Test error", url="http://example.com")
        assert "[http://example.com]" in str(error)
        assert error.url == "http://example.com"


class TestSubclasses:
    """子类测试类"""

    def test_inheritance(self):
        """测试继承关系"""
        for cls in (
            InvalidInputError,
            ConnectionFailureError,
            IOFailureError,
            UnsupportedConfigurationError,
        ):
            assert isinstance(cls("Test"), HttpClientError)

    def test_decode_error_is_io_failure(self):
        """测试解码异常属于 I/O 异常"""
        assert isinstance(ResponseDecodeError("bad bytes"), IOFailureError)

    def test_connection_failure_address(self):
        """测试连接异常携带地址"""
        error = ConnectionFailureError("refused", host="127.0.0.1", port=8080)
        assert error.host == "127.0.0.1"
        assert error.port == 8080

    def test_unsupported_configuration_backend(self):
        """测试配置异常携带后端名称"""
        error = UnsupportedConfigurationError("unknown", backend="curio")
        assert error.backend == "curio"
