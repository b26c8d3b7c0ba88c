import logging
from unittest.mock import patch

from app_factory import create_client
from extensions.ext_logging import TraceIdFormatter
from libs.fetch import FetchClient


class TestCreateClient:
    def test_initializes_logging(self, stub_transport):
        with patch("extensions.ext_logging.init_app") as init_app:
            client = create_client(transport=stub_transport)
        init_app.assert_called_once_with()
        assert isinstance(client, FetchClient)

    def test_client_uses_options(self, stub_transport):
        with patch("extensions.ext_logging.init_app"):
            client = create_client(transport=stub_transport, default_headers={"X-Api-Key": "secret"})
        response = client.fetch("https://example.com/")
        assert response.text() == "hello"
        assert stub_transport.last_options["header"] == ["X-Api-Key: secret"]

    def test_logging_configured(self, stub_transport):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        try:
            create_client(transport=stub_transport)
            assert all(isinstance(h.formatter, TraceIdFormatter) for h in root.handlers)
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            for handler in root.handlers:
                if handler not in handlers:
                    handler.close()
            root.handlers[:] = handlers
            root.setLevel(level)
