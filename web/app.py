"""
Flask web server for Link Shelf.

Routes
──────
GET    /                    Dashboard UI (links + chat tabs)
GET    /api/links           List saved links (JSON); ?category= &tag= &sort= &q=
POST   /api/links           Extract, classify, tag and save a URL (JSON)
PATCH  /api/links/<id>      Change a link's category in place (JSON)
DELETE /api/links/<id>      Delete a link (JSON)
POST   /api/chat            Ask a question grounded in the saved links (JSON)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, render_template, request

# Allow running as `python web/app.py` from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

load_dotenv()

from config.settings import Settings
from core import library
from core.chat import ChatAssistant
from core.models import Category, SavedLink
from core.pipeline import ExtractionError, LinkExtractor, validate_url
from core.store import LinkStore, StoreError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def _json_object() -> Optional[dict]:
    """The request body if it is a JSON object (or absent), else ``None``."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    return body if isinstance(body, dict) else None


def _link_json(link: SavedLink) -> dict:
    return link.model_dump(mode="json")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[LinkStore] = None,
    extractor: Optional[LinkExtractor] = None,
    assistant: Optional[ChatAssistant] = None,
) -> Flask:
    """Build the Flask app around explicitly constructed services.

    Anything not supplied is built from *settings* (or ``Settings()``).
    """
    settings = settings or Settings()
    store = store or LinkStore(settings.db_path)
    extractor = extractor or LinkExtractor(settings)
    assistant = assistant or ChatAssistant(settings)

    app = Flask(__name__)

    # Initialise the SQLite database on startup
    store.init_db()

    # ── UI ─────────────────────────────────────────────────────────────────

    @app.route("/")
    def index():
        return render_template("index.html", categories=[c.value for c in Category])

    # ── Links API ──────────────────────────────────────────────────────────

    @app.route("/api/links")
    def list_links():
        """Return the filtered, sorted link list plus the available filters."""
        sort = request.args.get("sort", "date")
        if sort not in library.SORT_KEYS:
            return _error(f"sort must be one of {', '.join(library.SORT_KEYS)}", 400)

        try:
            links = store.list_all()
        except StoreError as exc:
            return _error(str(exc), 503)

        shown = library.filter_links(
            links,
            category=request.args.get("category"),
            tag=request.args.get("tag"),
        )
        term = request.args.get("q", "").strip()
        if term:
            shown = library.search_links(shown, term)
        shown = library.sort_links(shown, by=sort)

        return jsonify(
            {
                "total": len(links),
                "links": [_link_json(link) for link in shown],
                "categories": library.categories_in(links),
                "tags": library.tags_in(links),
            }
        )

    @app.route("/api/links", methods=["POST"])
    def add_link():
        """Run the extraction pipeline for a URL and save the result.

        Body: ``{"url": str, "category"?: str, "tags"?: [str] | "a, b"}``
        """
        body = _json_object()
        if body is None:
            return _error("Request body must be a JSON object", 400)

        try:
            url = validate_url(body.get("url", ""))
        except ValueError as exc:
            return _error(str(exc), 400)

        category = None
        if body.get("category"):
            try:
                category = Category(body["category"])
            except ValueError:
                return _error(f"Unknown category {body['category']!r}", 400)

        tags = body.get("tags") or []
        if isinstance(tags, str):
            tags = tags.split(",")
        if not isinstance(tags, list):
            return _error("tags must be a list or a comma-separated string", 400)

        try:
            new_link = extractor.extract(url, category=category, tags=[str(t) for t in tags])
        except ExtractionError as exc:
            return _error(str(exc), 502)

        try:
            saved = store.create(new_link)
        except StoreError as exc:
            return _error(str(exc), 503)

        return jsonify(_link_json(saved)), 201

    @app.route("/api/links/<link_id>", methods=["PATCH"])
    def update_link(link_id: str):
        """Change a link's category without re-running extraction."""
        body = _json_object()
        if body is None:
            return _error("Request body must be a JSON object", 400)
        try:
            category = Category(body.get("category"))
        except ValueError:
            return _error(f"Unknown category {body.get('category')!r}", 400)

        try:
            updated = store.update(link_id, category=category)
        except StoreError as exc:
            return _error(str(exc), 503)
        if not updated:
            return _error("Not found", 404)
        return jsonify({"id": link_id, "category": category.value})

    @app.route("/api/links/<link_id>", methods=["DELETE"])
    def delete_link(link_id: str):
        """Delete a link."""
        try:
            deleted = store.delete(link_id)
        except StoreError as exc:
            return _error(str(exc), 503)
        if not deleted:
            return _error("Not found", 404)
        return jsonify({"deleted": link_id})

    # ── Chat API ───────────────────────────────────────────────────────────

    @app.route("/api/chat", methods=["POST"])
    def chat():
        """Answer one question from the current link list.

        The transcript lives in the browser; only the question is sent.
        """
        body = _json_object()
        if body is None:
            return _error("Request body must be a JSON object", 400)
        question = body.get("question", "")
        if not isinstance(question, str) or not question.strip():
            return _error("question is required", 400)
        question = question.strip()

        try:
            links = store.list_all()
        except StoreError as exc:
            return _error(str(exc), 503)

        reply = assistant.ask(question, links)
        return jsonify(
            {
                "role": reply.role,
                "content": reply.content,
                "sources": reply.sources,
                "cited": [
                    {"index": i, "title": links[i].title, "url": links[i].url}
                    for i in reply.sources
                ],
            }
        )

    return app


# ── Entry point ────────────────────────────────────────────────────────────

if __name__ == "__main__":
    settings = Settings()
    settings.validate()
    create_app(settings).run(debug=settings.debug, host="0.0.0.0", port=settings.port)
