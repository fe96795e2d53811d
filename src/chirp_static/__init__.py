"""chirp-static — static file serving middleware for ASGI apps.

Serves files from a directory with cached path resolution, optional
precompressed (``.br`` / ``.gz``) variants, directory redirects, and
fall-through to the rest of the app.

Basic usage::

    from chirp_static import App, ServeStatic

    app = App()
    app.add_middleware(ServeStatic("./public", max_age="1d"))

    @app.route("/health")
    def health():
        return "ok"

Run it under any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "AppConfig",
    "ConfigurationError",
    "FileResponse",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Mount",
    "Next",
    "NotFound",
    "Request",
    "Response",
    "SendStream",
    "ServeStatic",
    "StaticConfig",
    "StaticError",
    "serve_static",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import chirp_static`` fast while providing a clean top-level API.
    """
    if name == "App":
        from chirp_static.app import App

        return App

    if name in ("AppConfig", "StaticConfig"):
        from chirp_static import config as _config

        return getattr(_config, name)

    if name == "Request":
        from chirp_static.http.request import Request

        return Request

    if name in ("Response", "FileResponse"):
        from chirp_static.http import response as _resp

        return getattr(_resp, name)

    if name in ("AnyResponse", "Middleware", "Next"):
        from chirp_static.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("Mount", "ServeStatic", "serve_static"):
        from chirp_static import middleware as _middleware

        return getattr(_middleware, name)

    if name == "SendStream":
        from chirp_static.send import SendStream

        return SendStream

    if name in ("ConfigurationError", "HTTPError", "MethodNotAllowed", "NotFound", "StaticError"):
        from chirp_static import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
