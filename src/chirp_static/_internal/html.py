"""Minimal HTML documents for redirect and error bodies.

The body text must already be HTML-escaped by the caller, with
``escape_html``.
"""

from html import escape

# Headers every generated document is sent with
DOCUMENT_HEADERS: tuple[tuple[str, str], ...] = (
    ("Content-Security-Policy", "default-src 'none'"),
    ("X-Content-Type-Options", "nosniff"),
)

DOCUMENT_CONTENT_TYPE = "text/html; charset=UTF-8"


def escape_html(text: str) -> str:
    """Escape ``&<>"'`` for an HTML body, writing ``'`` as ``&#39;``."""
    return escape(text).replace("&#x27;", "&#39;")


def html_document(title: str, body: str) -> str:
    """Return a complete, minimal HTML5 document."""
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{title}</title>\n"
        "</head>\n"
        "<body>\n"
        f"<pre>{body}</pre>\n"
        "</body>\n"
        "</html>\n"
    )
