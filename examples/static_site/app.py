"""Static Site — a public/ directory served by chirp-static.

Demonstrates:
- Root-level ServeStatic with ``extensions`` so ``/about`` finds ``about.html``
- Assets mounted under ``/assets`` with long-lived caching and
  precompressed ``.gz`` variants
- A custom 404 page for anything neither middleware nor route serves

Run under any ASGI server, for example:
    uvicorn app:app
"""

from pathlib import Path

import anyio

from chirp_static import App, Mount, Response, ServeStatic

PUBLIC_DIR = Path(__file__).parent / "public"

app = App()

# Middleware order matters: first added = outermost

# 1. Fingerprinted assets: cache for a year, never fall through
app.add_middleware(Mount("/assets", ServeStatic(
    PUBLIC_DIR / "assets",
    max_age="1y",
    immutable=True,
    prefer_precompressed=True,
    fallthrough=False,
)))

# 2. Pages, straight from public/
app.add_middleware(ServeStatic(PUBLIC_DIR, extensions=("html",)))


@app.route("/health")
def health():
    return Response("ok", content_type="text/plain; charset=utf-8")


@app.error(404)
async def not_found():
    body = await anyio.Path(PUBLIC_DIR / "404.html").read_text()
    return Response(body, status=404)
