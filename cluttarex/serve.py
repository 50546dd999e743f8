"""
Cluttarex REST API Server.

A lightweight HTTP server exposing the extraction pipeline:

    GET /api/read?url=<page>   -> ArticleDocument as JSON
    GET /health                -> {"status": "ok", "version": ...}
    OPTIONS <any>              -> 204 CORS preflight

Usage:
    cluttarex serve              # Start on default port 8000
    cluttarex serve --port 3000  # Custom port
"""

import json
import logging
from functools import partial
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlparse

from . import __version__
from .constants import DEFAULT_HOST, DEFAULT_PORT
from .errors import CluttarexError, InternalError, MissingInput
from .extractor import ReaderExtractor

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
}


class ReaderAPIHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the reader API."""

    def __init__(self, *args, extractor: ReaderExtractor, **kwargs):
        self.extractor = extractor
        super().__init__(*args, **kwargs)

    def send_cors_headers(self):
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)

    def send_json(self, data: Any, status: int = 200):
        """Send JSON response."""
        response = json.dumps(data, ensure_ascii=False).encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'application/json; charset=utf-8')
        self.send_header('Content-Length', str(len(response)))
        self.send_cors_headers()
        self.end_headers()
        self.wfile.write(response)

    def send_error_json(self, error: CluttarexError):
        """Send JSON error response: {error, details?}."""
        self.send_json(error.to_dict(), error.status_code)

    def do_OPTIONS(self):
        """Handle CORS preflight requests."""
        self.send_response(204)
        self.send_cors_headers()
        self.end_headers()

    def do_GET(self):
        """Handle GET requests."""
        parsed = urlparse(self.path)
        path = parsed.path.rstrip('/') or '/'
        query = parse_qs(parsed.query)

        if path == '/api/read':
            self.handle_read(query)
        elif path == '/health':
            self.send_json({'status': 'ok', 'version': __version__})
        else:
            self.send_json({'error': 'Not found'}, 404)

    # =========================================================================
    # API Handlers
    # =========================================================================

    def handle_read(self, query: Dict):
        """
        Extract the article behind a URL.

        GET /api/read?url=https://example.com/post
        """
        url = self._first(query, 'url')
        try:
            if not url:
                raise MissingInput('Missing URL parameter')
            article = self.extractor.read(url)
        except CluttarexError as e:
            logger.error(f"Read failed for {url!r}: {e.message}")
            self.send_error_json(e)
            return
        except Exception as e:
            logger.exception(f"Unexpected failure reading {url!r}")
            self.send_error_json(InternalError(str(e)))
            return

        self.send_json(article.to_dict())

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _first(query: Dict, name: str) -> Optional[str]:
        values = query.get(name)
        if not values:
            return None
        return values[0].strip() or None

    def log_message(self, format, *args):
        """Route request logging through the logging module."""
        logger.info(f"{self.address_string()} - {format % args}")


def create_server(extractor: Optional[ReaderExtractor] = None,
                  host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> ThreadingHTTPServer:
    """
    Build (but do not start) the API server.

    Each request is handled on its own thread with its own pipeline run.
    """
    handler = partial(ReaderAPIHandler, extractor=extractor or ReaderExtractor())
    return ThreadingHTTPServer((host, port), handler)


def run_server(extractor: Optional[ReaderExtractor] = None,
               host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
    """
    Start the Cluttarex REST API server.

    Args:
        extractor: Extractor used to serve requests
        host: Host to bind to
        port: Port to listen on
    """
    server = create_server(extractor, host, port)

    print(f"Cluttarex server running at http://{host}:{port}")
    print(f"Read endpoint: http://{host}:{port}/api/read?url=<page>")
    print("Press Ctrl+C to stop")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down...")
    finally:
        server.server_close()
