"""Prestatic — serve pre-compressed static assets with encoding negotiation.

Indexes a tree of ``.gz`` / ``.br`` / custom-compressed files once at
startup, then answers each request with the best variant the client's
``Accept-Encoding`` allows.

Basic usage::

    from prestatic import App, PrecompressedStatic

    app = App()
    static = PrecompressedStatic("dist", enable_brotli=True, extensions=("html",))
    app.add_middleware(static)
    app.on_startup(static.startup)

    app.run()

Without the app, the resolver alone::

    from prestatic import Resolver, StaticConfig

    resolver = Resolver(StaticConfig(root="dist"))
    await resolver.startup()
    resolved = await resolver.resolve("/app.js", "gzip, br")
"""

__version__ = "0.1.0-dev"
__all__ = [
    "AnyResponse",
    "App",
    "AppConfig",
    "AssetEntry",
    "AssetIndex",
    "CompressionVariant",
    "ConfigurationError",
    "CustomCompression",
    "FileResponse",
    "HTTPError",
    "Middleware",
    "NegotiationOutcome",
    "Next",
    "NoAcceptableEncoding",
    "NotFound",
    "NotIndexed",
    "PathDecodeError",
    "PrecompressedStatic",
    "PrestaticError",
    "Request",
    "ResolvedFile",
    "Resolver",
    "Response",
    "RootNotFound",
    "StaticConfig",
    "VariantKind",
    "VariantRegistry",
    "build_index",
    "negotiate",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import prestatic`` fast while providing a clean top-level API.
    """
    if name == "App":
        from prestatic.app import App

        return App

    if name in ("AppConfig", "CustomCompression", "StaticConfig"):
        from prestatic import config as _config

        return getattr(_config, name)

    if name == "Request":
        from prestatic.http.request import Request

        return Request

    if name in ("Response", "FileResponse"):
        from prestatic.http import response as _resp

        return getattr(_resp, name)

    if name in ("AnyResponse", "Middleware", "Next"):
        from prestatic.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "PrecompressedStatic":
        from prestatic.middleware.static import PrecompressedStatic

        return PrecompressedStatic

    if name in ("CompressionVariant", "VariantKind", "VariantRegistry"):
        from prestatic import encodings as _enc

        return getattr(_enc, name)

    if name in ("AssetEntry", "AssetIndex", "build_index"):
        from prestatic import indexer as _idx

        return getattr(_idx, name)

    if name in ("NegotiationOutcome", "negotiate"):
        from prestatic import negotiation as _neg

        return getattr(_neg, name)

    if name in ("ResolvedFile", "Resolver"):
        from prestatic import resolver as _res

        return getattr(_res, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "NoAcceptableEncoding",
        "NotFound",
        "NotIndexed",
        "PathDecodeError",
        "PrestaticError",
        "RootNotFound",
    ):
        from prestatic import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
