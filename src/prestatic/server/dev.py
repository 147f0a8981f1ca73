"""Serve an App with pounce.

Single-worker: the asset index and its startup signal live on one
event loop.
"""


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    reload_include: tuple[str, ...] = (),
    reload_dirs: tuple[str, ...] = (),
) -> None:
    """Start a pounce server with the given prestatic App.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but we have a live ``App`` object. We use ``pounce.Server``
    directly with the ASGI callable.

    Args:
        app: ASGI callable (prestatic App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes. The index is
            rebuilt only when the process reloads.
        reload_include: Extra file extensions to watch when reload is
            active (e.g. ``(".gz", ".br")``).
        reload_dirs: Extra directories to watch alongside cwd.
    """
    from prestatic.errors import ConfigurationError

    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError:
        msg = (
            "Serving requires the pounce ASGI server. "
            "Install it with: pip install prestatic[server]"
        )
        raise ConfigurationError(msg) from None

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        reload_include=reload_include,
        reload_dirs=reload_dirs,
    )
    server = Server(config, app)
    server.run()
