# main.py
import base64
import logging
import sys
from typing import Optional

from flask import Flask, Response, jsonify, request
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import MethodNotAllowed

import config
from db.connections import parse_dsn
from db.sql_client import run_query
from errors import ConfigError, QueryExecutionError
from models import QueryRequest, QueryResponse

LOG = logging.getLogger(__name__)

EXECUTE_PATH = "/execute"

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class GatewayJSONProvider(DefaultJSONProvider):
    # records keep the database's column order
    sort_keys = False
    ensure_ascii = False

    @staticmethod
    def default(o):
        # BLOB / BINARY cells go out as base64 text
        if isinstance(o, bytes):
            return base64.b64encode(o).decode("ascii")
        return DefaultJSONProvider.default(o)


def plain_text(body: str, status: int, **headers) -> Response:
    return Response(body, status=status, mimetype="text/plain", headers=headers)


def create_app(dsn: Optional[str] = None) -> Flask:
    """
    Build the gateway app. The DSN comes from `dsn` or the SQL_DSN env var and
    is validated here, along with the fetch size, so bad settings fail before
    serving anything.
    """
    settings = parse_dsn(dsn if dsn is not None else config.get_dsn())
    fetch_size = config.get_fetch_size()

    app = Flask(__name__)
    app.json = GatewayJSONProvider(app)

    @app.errorhandler(MethodNotAllowed)
    def method_not_allowed(e):
        allow = ", ".join(e.valid_methods or [])
        if request.path == EXECUTE_PATH:
            return plain_text("Only POST method is supported", 405, Allow=allow)
        return plain_text("Method not allowed", 405, Allow=allow)

    @app.route(EXECUTE_PATH, methods=["POST"], provide_automatic_options=False)
    def execute():
        # force: clients don't always send a JSON content type
        req = QueryRequest.from_json(request.get_json(force=True, silent=True))
        if req is None:
            return plain_text("Invalid request payload", 400)

        try:
            rows = run_query(settings, req.query, fetch_size)
        except QueryExecutionError as e:
            LOG.warning("query failed at %s stage: %s", e.stage, e.message)
            return jsonify(QueryResponse(error=e.message).to_dict()), 500
        return jsonify(QueryResponse(result=rows).to_dict())

    @app.route("/asdfghjkl", methods=ALL_METHODS, provide_automatic_options=False)
    def asdfghjkl():
        return plain_text("Hello, this is the /asdfghjkl endpoint!", 200)

    return app


def run():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        app = create_app()
        port = config.get_port()
    except ConfigError as e:
        LOG.error("error creating DB config: %s", e)
        sys.exit(1)

    print("Registered routes:")
    for r in sorted([rule.rule for rule in app.url_map.iter_rules()]):
        print(" ", r)
    LOG.info("Starting server on %s:%s...", config.HOST, port)
    # one thread per request, no queueing
    app.run(host=config.HOST, port=port, threaded=True)


if __name__ == "__main__":
    run()
