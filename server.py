import base64
import logging
from datetime import date, datetime, timedelta
from flask import Flask, request, jsonify
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import BadRequest, HTTPException, MethodNotAllowed, NotFound

import db
import messages
from config import load_config
from constants import (
    BLOCKED,
    CORS_HEADERS,
    ERROR_STATUS,
    ERR_TYPE_DB,
    ERR_TYPE_INPUT,
    ERR_TYPE_JSON,
    ERR_TYPE_METHOD,
    ERR_TYPE_SECURITY,
    ERR_TYPE_SERVER,
)
from query_filter import validate_and_extract_command


class IsoJSONProvider(DefaultJSONProvider):
    """Serialize MySQL column values the driver hands back.

    DATETIME and DATE become ISO-8601 rather than HTTP dates, TIME becomes
    MySQL style ``[-]HH:MM:SS[.ffffff]`` text, and binary columns are decoded
    as UTF-8 or, failing that, base64.
    """

    @staticmethod
    def default(o):
        if isinstance(o, (date, datetime)):
            return o.isoformat()
        if isinstance(o, timedelta):
            return format_mysql_time(o)
        if isinstance(o, (bytes, bytearray)):
            try:
                return bytes(o).decode("utf-8")
            except UnicodeDecodeError:
                return base64.b64encode(bytes(o)).decode("ascii")
        return DefaultJSONProvider.default(o)


def format_mysql_time(value):
    sign = "-" if value < timedelta(0) else ""
    value = abs(value)
    total_seconds = value.days * 86400 + value.seconds
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if value.microseconds:
        text += f".{value.microseconds:06d}"
    return text


app = Flask(__name__)
app.json = IsoJSONProvider(app)


def gateway_config():
    if "GATEWAY" not in app.config:
        app.config["GATEWAY"] = load_config()
    return app.config["GATEWAY"]


def send_error(status_code, message, error_type=ERR_TYPE_SERVER):
    """Consistent JSON error response."""
    return jsonify({"success": False, "errorType": error_type, "message": message}), status_code


def is_non_empty_text(value):
    return isinstance(value, str) and bool(value.strip())


def has_required_fields(record):
    return (
        isinstance(record, dict)
        and is_non_empty_text(record.get("name"))
        and is_non_empty_text(record.get("dateOfBirth"))
    )


@app.before_request
def answer_preflight():
    if request.method == "OPTIONS":
        return "", 204


@app.after_request
def add_cors_headers(response):
    response.headers.update(CORS_HEADERS)
    return response


@app.errorhandler(HTTPException)
def handle_http_error(e):
    if isinstance(e, (NotFound, MethodNotAllowed)):
        return send_error(404, messages.ERR_ENDPOINT_NOT_FOUND)
    return send_error(e.code, e.description)


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    app.logger.exception(f"Unhandled error on {request.method} {request.path}: {e}")
    return send_error(ERROR_STATUS[ERR_TYPE_SERVER], messages.ERR_INTERNAL)


@app.route("/insert-data", methods=["POST"])
def insert_data():
    try:
        incoming_data = request.get_json(force=True)
    except BadRequest:
        return send_error(ERROR_STATUS[ERR_TYPE_JSON], messages.ERR_INVALID_JSON, ERR_TYPE_JSON)

    if not isinstance(incoming_data, list) or not incoming_data:
        return send_error(ERROR_STATUS[ERR_TYPE_INPUT], messages.ERR_MISSING_BULK_ARRAY, ERR_TYPE_INPUT)

    app.logger.info(messages.log_bulk_insert_receive(len(incoming_data)))

    # The whole batch is rejected if any record is incomplete
    if not all(has_required_fields(record) for record in incoming_data):
        return send_error(ERROR_STATUS[ERR_TYPE_INPUT], messages.ERR_MISSING_BULK_FIELDS, ERR_TYPE_INPUT)

    results = db.insert_patients(gateway_config(), incoming_data)
    failed = [result for result in results if not result["success"]]
    if failed:
        return jsonify({
            "success": False,
            "errorType": ERR_TYPE_DB,
            "message": messages.err_bulk_partial(len(failed), len(results)),
            "results": results,
        }), ERROR_STATUS[ERR_TYPE_DB]

    return jsonify({
        "success": True,
        "message": messages.success_insert_bulk(len(results)),
        "results": results,
    })


def process_raw_query(sql, command):
    """Run a validated raw statement and shape the response for its command."""
    try:
        result = db.execute_query(gateway_config(), sql)
    except db.DatabaseError as e:
        app.logger.error(messages.err_db_generic(e))
        return send_error(ERROR_STATUS[ERR_TYPE_DB], messages.err_db_generic(e), ERR_TYPE_DB)

    if command == "SELECT":
        rows = result.get("rows", [])
        response = {"success": True, "data": rows, "message": messages.success_select(len(rows))}
    else:
        response = {
            "success": True,
            "message": messages.success_insert_raw(result.get("affected_rows", 0)),
            "insertId": result.get("insert_id"),
        }
    return jsonify(response)


@app.route("/execute-query", methods=["GET", "POST"])
def execute_query():
    if request.method == "POST":
        try:
            body = request.get_json(force=True)
        except BadRequest:
            return send_error(ERROR_STATUS[ERR_TYPE_JSON], messages.ERR_INVALID_JSON, ERR_TYPE_JSON)
        sql_query = body.get("query") if isinstance(body, dict) else None
    else:
        sql_query = request.args.get("query")

    if not sql_query or not isinstance(sql_query, str):
        return send_error(ERROR_STATUS[ERR_TYPE_INPUT], messages.ERR_SQL_MISSING, ERR_TYPE_INPUT)

    command = validate_and_extract_command(sql_query)

    if command == BLOCKED:
        return send_error(ERROR_STATUS[ERR_TYPE_SECURITY], messages.ERR_SQL_FORBIDDEN, ERR_TYPE_SECURITY)
    if command == "SELECT" and request.method == "GET":
        return process_raw_query(sql_query, "SELECT")
    if command == "INSERT" and request.method == "POST":
        return process_raw_query(sql_query, "INSERT")

    expected_method = "GET" if command == "SELECT" else "POST"
    return send_error(
        ERROR_STATUS[ERR_TYPE_METHOD],
        messages.err_method_mismatch(command, expected_method),
        ERR_TYPE_METHOD,
    )


def main():
    logging.basicConfig(level=logging.INFO)
    config = load_config()
    app.config["GATEWAY"] = config

    # Schema first, then listen; a failed init is logged and serving continues
    db.initialize_database(config)

    app.logger.info(messages.log_server_running(config["server_host"], config["server_port"]))
    app.logger.info(messages.LOG_CORS_NOTE)
    app.run(host=config["server_host"], port=config["server_port"])


if __name__ == "__main__":
    main()
