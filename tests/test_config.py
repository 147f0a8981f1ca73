"""Tests for prestatic.config — StaticConfig, option parsing, and AppConfig."""

from pathlib import Path

import pytest

from prestatic.config import AppConfig, CustomCompression, StaticConfig
from prestatic.errors import ConfigurationError


class TestStaticConfig:
    def test_defaults(self) -> None:
        cfg = StaticConfig(root="dist")

        assert cfg.root == Path("dist")
        assert cfg.uncompressed_root == Path("dist")
        assert cfg.index == "index.html"
        assert cfg.disable_compression is False
        assert cfg.enable_brotli is False
        assert cfg.custom_compressions == ()
        assert cfg.order_preference == ()
        assert cfg.extensions == ()
        assert cfg.cache_control is None

    def test_frozen(self) -> None:
        cfg = StaticConfig(root="dist")
        with pytest.raises(AttributeError):
            cfg.enable_brotli = True  # type: ignore[misc]

    def test_shared_root(self) -> None:
        cfg = StaticConfig(root="dist")
        assert cfg.compressed_root == Path("dist")
        assert cfg.serving_root == Path("dist")
        assert cfg.separate_roots is False

    def test_separate_roots(self) -> None:
        cfg = StaticConfig(root="dist/gz", uncompressed_root="dist/plain")
        assert cfg.compressed_root == Path("dist/gz")
        assert cfg.serving_root == Path("dist/plain")
        assert cfg.separate_roots is True

    def test_disabled_compression_indexes_uncompressed_root(self) -> None:
        cfg = StaticConfig(root="dist/gz", uncompressed_root="dist/plain", disable_compression=True)
        assert cfg.compressed_root == Path("dist/plain")
        assert cfg.separate_roots is False

    def test_normalizes_extensions_and_preference(self) -> None:
        cfg = StaticConfig(root="dist", extensions=(".html", "htm"), order_preference=("BR", "Gzip"))
        assert cfg.extensions == ("html", "htm")
        assert cfg.order_preference == ("br", "gzip")

    def test_empty_extension_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            StaticConfig(root="dist", extensions=("",))

    def test_absolute_index_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            StaticConfig(root="dist", index="/index.html")


class TestCustomCompression:
    def test_strips_leading_dot(self) -> None:
        assert CustomCompression("deflate", ".zz").file_extension == "zz"

    @pytest.mark.parametrize("extension", ["", ".", "a.b", "a/b"])
    def test_invalid_extension(self, extension: str) -> None:
        with pytest.raises(ConfigurationError):
            CustomCompression("deflate", extension)

    def test_none_is_reserved(self) -> None:
        with pytest.raises(ConfigurationError, match="reserved"):
            CustomCompression("nothing", "none")

    def test_missing_name(self) -> None:
        with pytest.raises(ConfigurationError):
            CustomCompression("", "zz")


class TestFromOptions:
    def test_camel_case(self) -> None:
        cfg = StaticConfig.from_options(
            "dist",
            None,
            {
                "enableBrotli": True,
                "orderPreference": ["br"],
                "customCompressions": [{"encodingName": "deflate", "fileExtension": "zz"}],
                "cacheControl": "no-cache",
            },
        )
        assert cfg.enable_brotli is True
        assert cfg.order_preference == ("br",)
        assert cfg.custom_compressions == (CustomCompression("deflate", "zz"),)
        assert cfg.cache_control == "no-cache"

    def test_snake_case(self) -> None:
        cfg = StaticConfig.from_options(
            "dist",
            "plain",
            {
                "disable_compression": True,
                "extensions": ["html"],
                "custom_compressions": [{"encoding_name": "zstd", "file_extension": "zst"}],
            },
        )
        assert cfg.disable_compression is True
        assert cfg.extensions == ("html",)
        assert cfg.custom_compressions[0].encoding_name == "zstd"
        assert cfg.serving_root == Path("plain")

    def test_unknown_option(self) -> None:
        with pytest.raises(ConfigurationError, match="enableZstd"):
            StaticConfig.from_options("dist", None, {"enableZstd": True})

    def test_root_is_not_an_option(self) -> None:
        with pytest.raises(ConfigurationError):
            StaticConfig.from_options("dist", None, {"root": "other"})

    def test_bad_custom_compression(self) -> None:
        with pytest.raises(ConfigurationError):
            StaticConfig.from_options("dist", None, {"customCompressions": ["deflate"]})

    def test_none_list_becomes_empty(self) -> None:
        cfg = StaticConfig.from_options("dist", None, {"extensions": None})
        assert cfg.extensions == ()


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()

        assert cfg.host == "127.0.0.1"
        assert cfg.port == 8000
        assert cfg.debug is False
        assert cfg.reload_include == ()
        assert cfg.reload_dirs == ()

    def test_override(self) -> None:
        cfg = AppConfig(host="0.0.0.0", port=3000, debug=True)

        assert cfg.host == "0.0.0.0"
        assert cfg.port == 3000
        assert cfg.debug is True

    def test_frozen(self) -> None:
        cfg = AppConfig()

        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]
