#!/usr/bin/env python3
"""
reviewhub server - Flask app exposing the GraphQL API over HTTP.
"""

import argparse
import logging
from typing import Dict, Optional

from flask import Flask, jsonify, request
from sqlalchemy.orm import sessionmaker
from werkzeug.exceptions import HTTPException

from .config import Settings, load_settings, setup_logging
from .database import init_db, make_engine, make_session_factory, session_scope
from .schema import build_schema
from .services import ServiceRegistry

server_logger = logging.getLogger('reviewhub.server')

# Domain error code -> HTTP status when a request produced no data at all.
_STATUS_BY_CODE = {
    'NOT_FOUND': 404,
    'CONFLICT': 409,
}


def _status_for(result) -> int:
    if not result.errors:
        return 200
    if result.data is not None:
        return 200
    codes = {(e.extensions or {}).get('code') for e in result.errors}
    if len(codes) == 1:
        return _STATUS_BY_CODE.get(codes.pop(), 400)
    return 400


def create_app(settings: Optional[Settings] = None,
               session_factory: Optional[sessionmaker] = None) -> Flask:
    """Build the Flask app.

    Args:
        settings:        Configuration; read from the environment when omitted.
        session_factory: Source of per-request sessions.  When omitted an
                         engine is built from *settings* and its tables are
                         created.

    Returns:
        A Flask app with ``POST /graphql`` and ``GET /health``.
    """
    settings = settings or load_settings()
    if session_factory is None:
        engine = make_engine(settings)
        init_db(engine)
        session_factory = make_session_factory(engine)

    app = Flask(__name__)
    app.config['SESSION_FACTORY'] = session_factory
    schema = build_schema()

    @app.route('/graphql', methods=['POST'])
    def api_graphql():
        """Execute a GraphQL operation against the reviewhub schema.

        Request JSON::

            {"query": "mutation { addUser(name: \\"Ada\\", email: \\"ada@example.com\\") { id } }"}

        Optional variables::

            {"query": "...", "variables": {"id": 1}, "operationName": "..."}

        Response JSON::

            {"data": { ... }}                   // on success
            {"data": ..., "errors": [ ... ]}    // on error

        Each error carries ``extensions.code`` (``NOT_FOUND``, ``CONFLICT``,
        ``BAD_USER_INPUT``).  A request that yields no data answers 404/409
        when every error has that code, 400 otherwise.
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({'errors': [{'message': 'request body must be a JSON object'}]}), 400
        query = data.get('query')
        variables = data.get('variables') or {}
        operation_name = data.get('operationName')

        if not query:
            return jsonify({'errors': [{'message': 'query is required'}]}), 400
        if not isinstance(query, str):
            return jsonify({'errors': [{'message': 'query must be a string'}]}), 400
        if not isinstance(variables, dict):
            return jsonify({'errors': [{'message': 'variables must be an object'}]}), 400
        if operation_name is not None and not isinstance(operation_name, str):
            return jsonify({'errors': [{'message': 'operationName must be a string'}]}), 400

        with session_scope(app.config['SESSION_FACTORY']) as db:
            result = schema.execute(
                query,
                variable_values=variables,
                operation_name=operation_name,
                context_value={'services': ServiceRegistry(db)},
            )
        response: Dict = {}
        if result.errors:
            for error in result.errors:
                # resolver crashes carry no code; domain failures already logged
                if error.original_error is not None and not (error.extensions or {}).get('code'):
                    server_logger.error("GraphQL resolver error: %s", error.message,
                                        exc_info=error.original_error)
            response['errors'] = [e.formatted for e in result.errors]
        if result.data is not None:
            response['data'] = result.data
        return jsonify(response), _status_for(result)

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'})

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        if exc.code == 404:
            return jsonify({'message': 'Not Found', 'status': 404}), 404
        return jsonify({'message': exc.description, 'status': exc.code}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        server_logger.exception("Unhandled error: %s", exc)
        return jsonify({'message': 'Internal Server Error', 'status': 500}), 500

    return app


def main():
    """Main entry point for ``reviewhub-server``."""
    parser = argparse.ArgumentParser(description='reviewhub GraphQL server')
    parser.add_argument('--host', help='Bind address (default from REVIEWHUB_HOST)')
    parser.add_argument('--port', type=int, help='Bind port (default from REVIEWHUB_PORT)')
    parser.add_argument('--database-url', help='SQLAlchemy database URL')
    parser.add_argument('--log-level', help='DEBUG, INFO, WARNING, ERROR')
    args = parser.parse_args()

    settings = load_settings()
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.database_url:
        settings.database_url = args.database_url
    if args.log_level:
        settings.log_level = args.log_level

    setup_logging(settings.log_level)
    app = create_app(settings)
    server_logger.info("Serving GraphQL on http://%s:%s/graphql", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port, debug=False)


if __name__ == "__main__":
    main()
