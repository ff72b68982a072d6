# Copyright (c) 2025 Trae AI. All rights reserved.

import logging
import mimetypes
import sys
import threading
from typing import Optional
from urllib.parse import unquote
from flask import Flask, Response, jsonify, request, send_file, stream_with_context
from flask_apscheduler import APScheduler
from pydantic.alias_generators import to_camel
from ..core.config import Config
from ..core.models import Category, MediaKind, UnknownCategoryError
from ..core.searcher import Searcher
from ..infrastructure.audio_tags import AudioTagReader
from ..infrastructure.listing import ListingError, LocalLister, create_lister
from ..services.library_service import LibraryService, find_by_id
from .artwork_store import ArtworkStore
from .catalog import CatalogCache
from .task_manager import TaskManager
from .watcher import MediaWatcher

REFRESH_TASK_ID = "catalog_refresh"


def _to_json(items):
    return [item.to_json() for item in items]


class Server:
    def __init__(self, config_path: str = "config.yaml", config: Optional[Config] = None):
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[logging.StreamHandler(sys.stdout)]
        )
        self.logger = logging.getLogger("streamhub.server.app")

        self.config = config or Config.load(config_path)
        if self.config.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        self.app = Flask(__name__, static_folder=None)
        self.scheduler = APScheduler()
        self.task_manager = TaskManager()

        # Collaborators
        self.artwork_store = ArtworkStore()
        self.lister = create_lister(self.config)
        self.searcher = Searcher(self.config.tmdb_api_key, language=self.config.tmdb_language)
        tag_reader = AudioTagReader(self.artwork_store) if isinstance(self.lister, LocalLister) else None

        # Services
        self.library = LibraryService(self.config, self.lister, self.searcher, tag_reader)
        self.catalog = CatalogCache(self.library)
        self.watcher = None

        self.logger.info(
            f"Media source: {self.config.media_path if self.config.use_local_files else self.config.ssh_server + ':' + self.config.ssh_path}"
        )

        self._setup_routes()

    def _setup_routes(self):
        @self.app.after_request
        def add_cors_headers(response):
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
            response.headers["Access-Control-Allow-Headers"] = (
                "Origin, X-Requested-With, Content-Type, Accept, Authorization"
            )
            return response

        @self.app.errorhandler(UnknownCategoryError)
        def unknown_category(e):
            return jsonify({"error": str(e)}), 404

        @self.app.route("/api/categories")
        def get_categories():
            categories = []
            for category in self.catalog.categories():
                categories.append({
                    "name": self.config.directory_for(category),
                    "type": category.value,
                    "items": _to_json(self.catalog.get(category)),
                })
            return jsonify(categories)

        @self.app.route("/api/category/<name>")
        def get_category(name):
            return jsonify(_to_json(self.catalog.get(Category.parse(name))))

        @self.app.route("/api/search")
        def search_media():
            query = request.args.get("q", "")
            if not query.strip():
                return jsonify([])
            results = self.library.search(query, self.catalog.all_items(), limit=self.config.search_limit)
            self.logger.info(f"[User Action] Search '{query}': {len(results)} results")
            return jsonify(_to_json(results))

        @self.app.route("/api/media/<path:item_id>")
        def get_media(item_id):
            item = find_by_id(self.catalog.all_items(), unquote(item_id))
            if item is None:
                return jsonify({"error": "Media not found"}), 404
            return jsonify(item.to_json())

        @self.app.route("/api/poster/<path:title>")
        def get_poster(title):
            kind_str = request.args.get("type", "movie")
            try:
                kind = MediaKind(kind_str)
            except ValueError:
                return jsonify({"error": f"Unknown type: {kind_str}"}), 400
            year = request.args.get("year", type=int)

            metadata = self.searcher.lookup_by_title(unquote(title), year, kind)
            if metadata is None:
                return jsonify({"error": "No metadata found"}), 404
            return jsonify({to_camel(key): value for key, value in metadata.model_dump().items()})

        @self.app.route("/api/stream/<path:media_path>")
        def stream_media(media_path):
            media_path = unquote(media_path)
            self.logger.info(f"[User Action] Streaming request for: {media_path}")

            resolved = self.lister.resolve(media_path)
            if resolved is None:
                return jsonify({"error": "Forbidden"}), 403

            if isinstance(self.lister, LocalLister):
                if not resolved.is_file():
                    return jsonify({"error": "File not found"}), 404
                return send_file(resolved, conditional=True)

            try:
                chunks = self.lister.stream(resolved)
            except ListingError as e:
                self.logger.error(f"Stream error: {e}")
                return jsonify({"error": f"Stream error: {e}"}), 500

            mimetype = mimetypes.guess_type(resolved)[0] or "application/octet-stream"
            return Response(
                stream_with_context(chunks),
                mimetype=mimetype,
                headers={"Accept-Ranges": "bytes", "Cache-Control": "no-cache"},
            )

        @self.app.route("/api/artwork/<ref>")
        def get_artwork(ref):
            artwork = self.artwork_store.get(ref)
            if artwork is None:
                return jsonify({"error": "Artwork not found"}), 404
            data, mime = artwork
            return Response(data, mimetype=mime, headers={"Cache-Control": "public, max-age=86400"})

        @self.app.route("/api/refresh", methods=["POST"])
        def trigger_refresh():
            if not self.task_manager.start_task(REFRESH_TASK_ID):
                return jsonify({"error": "Refresh already in progress"}), 400

            self.logger.info("[User Action] Catalog refresh requested.")
            thread = threading.Thread(target=self._run_refresh, kwargs={"task_started": True})
            thread.start()
            return jsonify({"task_id": REFRESH_TASK_ID})

        @self.app.route("/api/status")
        def get_status():
            return jsonify({
                "tasks": self.task_manager.get_all_tasks(),
                "catalog": self.catalog.status(),
            })

    def _run_refresh(self, task_started: bool = False):
        if not task_started and not self.task_manager.start_task(REFRESH_TASK_ID):
            self.logger.info("Catalog refresh skipped: already running.")
            return
        try:
            total = self.catalog.refresh(
                lambda p, m: self.task_manager.update_progress(REFRESH_TASK_ID, p, m)
            )
            self.task_manager.complete_task(REFRESH_TASK_ID, f"Catalog refreshed ({total} items)")
        except Exception as e:
            self.logger.error(f"Catalog refresh failed: {e}")
            self.task_manager.fail_task(REFRESH_TASK_ID, str(e))

    def _setup_scheduler(self):
        self.scheduler.init_app(self.app)
        self.scheduler.add_job(
            id=REFRESH_TASK_ID,
            func=self._run_refresh,
            trigger="interval",
            minutes=self.config.refresh_interval_minutes,
        )
        self.scheduler.start()

    def _setup_watcher(self):
        if not (isinstance(self.lister, LocalLister) and self.config.watch_local_changes):
            return
        if not self.lister.media_root.is_dir():
            self.logger.warning(f"Media path {self.lister.media_root} does not exist, not watching it.")
            return
        self.watcher = MediaWatcher(
            self.lister.media_root, self.catalog.invalidate, self.config.media_extensions
        )
        self.watcher.start()

    def run(self):
        self._setup_scheduler()
        self._setup_watcher()
        self.app.run(host=self.config.server_host, port=self.config.server_port)


if __name__ == "__main__":
    server = Server()
    server.run()
