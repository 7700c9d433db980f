import asyncio
import io
import unittest
from unittest.mock import patch

from picproxy.tools.proxy_tools import proxy_picture, resolve_proxy_picture
from picproxy.utils.config import _reset_runtime_for_tests, init_runtime


class ProxyToolsTests(unittest.TestCase):
    def setUp(self) -> None:
        _reset_runtime_for_tests()
        init_runtime(argv=[])

    def tearDown(self) -> None:
        _reset_runtime_for_tests()

    def test_proxy_picture_defaults_to_percent_encoding(self) -> None:
        result = asyncio.run(proxy_picture("https://example.com/a.png"))
        self.assertTrue(result["success"])
        self.assertEqual(result["type"], "encodeURIComponent")
        self.assertEqual(
            result["proxy_url"],
            "/api/proxy/img.png?type=encodeURIComponent&url=https%3A%2F%2Fexample.com%2Fa.png",
        )

    def test_proxy_picture_with_public_origin(self) -> None:
        _reset_runtime_for_tests()
        init_runtime(argv=["--public-origin", "https://app.example.com"])
        result = asyncio.run(proxy_picture("https://example.com/a.png", "encodeBase64URL"))
        self.assertTrue(result["success"])
        self.assertEqual(
            result["absolute_url"],
            "https://app.example.com/api/proxy/img.png?type=encodeBase64URL&url=aHR0cHM6Ly9leGFtcGxlLmNvbS9hLnBuZw",
        )

    def test_proxy_picture_reports_unknown_type(self) -> None:
        with self.assertLogs("picproxy.tools.proxy_tools", level="WARNING"):
            result = asyncio.run(proxy_picture("https://example.com/a.png", "encodeURI"))
        self.assertFalse(result["success"])
        self.assertIn("unknown encoding scheme", result["error"])

    def test_resolve_proxy_picture_round_trip(self) -> None:
        built = asyncio.run(proxy_picture("https://example.com/a b.png", "encodeBase64URL"))
        result = asyncio.run(resolve_proxy_picture(built["proxy_url"]))
        self.assertEqual(result, {"success": True, "url": "https://example.com/a b.png", "type": "encodeBase64URL"})

    def test_resolve_proxy_picture_accepts_own_absolute_url(self) -> None:
        _reset_runtime_for_tests()
        init_runtime(argv=["--public-origin", "https://app.example.com/"])
        for scheme in ("encodeURIComponent", "encodeBase64URL"):
            built = asyncio.run(proxy_picture("https://example.com/a b.png?w=1&h=2", scheme))
            self.assertTrue(built["absolute_url"].startswith("https://app.example.com/api/proxy/img.png?"))
            result = asyncio.run(resolve_proxy_picture(built["absolute_url"]))
            self.assertEqual(result, {"success": True, "url": "https://example.com/a b.png?w=1&h=2", "type": scheme})

    def test_origin_with_path_is_not_used_for_absolute_url(self) -> None:
        _reset_runtime_for_tests()
        stderr = io.StringIO()
        with patch("picproxy.utils.config.sys.stderr", stderr):
            init_runtime(argv=["--public-origin", "https://app.example.com/base"])
        built = asyncio.run(proxy_picture("https://example.com/a.png"))
        self.assertTrue(built["success"])
        self.assertIsNone(built["absolute_url"])
        self.assertIn("without path", stderr.getvalue())
        result = asyncio.run(resolve_proxy_picture(built["proxy_url"]))
        self.assertEqual(result["url"], "https://example.com/a.png")

    def test_resolve_proxy_picture_reports_bad_input(self) -> None:
        with self.assertLogs("picproxy.tools.proxy_tools", level="WARNING"):
            result = asyncio.run(resolve_proxy_picture("/api/other?url=x"))
        self.assertFalse(result["success"])
        self.assertIn("not an image proxy url", result["error"])


if __name__ == "__main__":
    unittest.main()
