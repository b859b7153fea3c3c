"""
Flask entry point for the snapshot crawler.
A single POST endpoint accepts either a crawl request ({url, email?}) or a
bulk download ({action: "download-zip", type, files}).
"""

import io
import os

from flask import Flask, jsonify, request, send_file

from snapcrawler.engine import CrawlContext
from snapcrawler.handler import handle_request
from snapcrawler.rendering.browser import PlaywrightRenderer
from snapcrawler.storage.blob_store import LocalBlobStore


def create_app(renderer_factory=None, store=None):
    """
    renderer_factory builds a fresh PageRenderer per crawl job;
    store is shared by crawls and downloads.
    """
    app = Flask(__name__)
    renderer_factory = renderer_factory or PlaywrightRenderer
    store = store or LocalBlobStore()

    def new_context():
        return CrawlContext(renderer=renderer_factory(), store=store)

    @app.route('/', methods=['POST'])
    def scrape_and_screenshot():
        body = request.get_json(silent=True)
        status, payload = handle_request(body, new_context, store)
        if isinstance(payload, bytes):
            kind = body.get("type", "files")
            return send_file(
                io.BytesIO(payload),
                mimetype="application/zip",
                as_attachment=True,
                download_name=f"{kind}.zip",
            )
        return jsonify(payload), status

    return app


if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=int(os.getenv('PORT', 8080)))
