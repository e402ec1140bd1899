from __future__ import annotations
import orjson
from flask import Flask, Response, current_app, request

from ..config import CFG, ConfigError, parse_sort_column, parse_sort_order
from ..table import COLUMNS, PeerTableModel
from .ui import render_html

def dumps(obj) -> str:
    return orjson.dumps(obj).decode()

def json_response(obj, status: int = 200) -> Response:
    return Response(dumps(obj), status=status, mimetype="application/json")

def sort_state(model: PeerTableModel) -> dict:
    return {
        "column": model.cache.sort_column.name.lower(),
        "order": model.cache.sort_order.value,
    }

def create_app(cfg: CFG, model: PeerTableModel) -> Flask:
    app = Flask(__name__)

    @app.get("/")
    def index():
        return Response(render_html(cfg.interval), mimetype="text/html")

    @app.get("/api/peers")
    def api_peers():
        view = model.cache.view()
        return json_response({
            "state": view.state.value,
            "sort": sort_state(model),
            "columns": [{"id": col.name.lower(), "label": label} for col, label in COLUMNS],
            "rows": model.to_rows(view),
        })

    @app.get("/api/peers/<int:node_id>")
    def api_peer(node_id: int):
        found = model.find_node(node_id)
        if found is None:
            return json_response({"ok": False, "node_id": node_id}, status=404)
        row, rec = found
        return json_response({"ok": True, "row": row, "peer": rec.to_dict()})

    @app.post("/api/sort")
    def api_sort():
        body = request.get_json(silent=True) or {}
        try:
            column = parse_sort_column(body.get("column"))
            order = parse_sort_order(body.get("order"))
        except ConfigError as exc:
            current_app.logger.warning("rejected sort request: %s", exc)
            return json_response({"ok": False, "error": str(exc)}, status=400)
        refreshed = model.sort(column, order)
        return json_response({"ok": True, "refreshed": refreshed, "sort": sort_state(model)})

    return app
