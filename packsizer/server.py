"""HTTP server exposing the packaging API."""

from __future__ import annotations

import argparse
import json
import os
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from flask import Flask, Response, request, send_from_directory

from .config import get_logger, get_string_value_or_default
from .contracts import CreatePackagingRequest, EmptyRequest, Handler, HttpError, HttpRequest
from .controllers import (
    CreatePackagingController,
    DeletePackagingByIdController,
    GetAllPackagingController,
    GetPackagingsForAmountController,
)
from .errors import CID_CONTEXT_KEY, CustomError, get_custom_error
from .repository import PACKAGING_COLLECTION, MongoClientProvider, MongoPackagingRepository
from .usecases import (
    CreatePackaging,
    DeletePackaging,
    GetPackaging,
    GetPacksForAmount,
    PackagingRepository,
)

_CID_ENVIRON_KEY = "packsizer.cid"
_PREFLIGHT_ENVIRON_KEY = "packsizer.cors_preflight"

_ALLOWED_CONTENT_TYPES = frozenset({"application/json"})

_CORS_ORIGINS = ("*",)
_CORS_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})
_CORS_HEADERS = frozenset(
    name.lower()
    for name in ("Accept", "Authorization", "Content-Type", "X-CSRF-Token", "X-Cid", "Origin")
)
_CORS_EXPOSED_HEADERS = "Link"
_CORS_MAX_AGE = 300


@dataclass(frozen=True)
class Controllers:
    """The handlers behind the packaging routes."""

    create: Handler
    get_all: Handler
    get_for_amount: Handler
    delete_by_id: Handler


def build_controllers(repository: PackagingRepository) -> Controllers:
    """Wire the use cases and controllers around one repository."""
    return Controllers(
        create=CreatePackagingController(CreatePackaging(repository)),
        get_all=GetAllPackagingController(GetPackaging(repository)),
        get_for_amount=GetPackagingsForAmountController(GetPacksForAmount(repository)),
        delete_by_id=DeletePackagingByIdController(DeletePackaging(repository)),
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid character {name!r} looking for beginning of value")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def _decode_body(raw: bytes, body_type: Any) -> Any:
    try:
        text = raw.decode("utf-8", errors="replace").lstrip(" \t\r\n")
        if not text:
            return body_type.from_json(None)
        data, _ = _DECODER.raw_decode(text)
        return body_type.from_json(data)
    except (ValueError, TypeError) as err:
        raise CustomError(
            HTTPStatus.INTERNAL_SERVER_ERROR, "Error parsing request", err
        ) from err


def extract_request(
    flask_request: Any,
    body_type: Any,
    param_values: Mapping[str, Any] | None = None,
) -> HttpRequest:
    """Build an HttpRequest from the incoming request, decoding its JSON body."""
    body = None
    if body_type is not None:
        body = _decode_body(flask_request.get_data(cache=True), body_type)

    headers = {key: flask_request.headers.getlist(key) for key in flask_request.headers.keys()}
    params = {name: str(value) for name, value in (param_values or {}).items()}
    query = flask_request.args.to_dict(flat=False)
    context = {CID_CONTEXT_KEY: flask_request.environ.get(_CID_ENVIRON_KEY)}
    return HttpRequest(headers=headers, body=body, params=params, query=query, context=context)


def _jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def _json_response(body: Any, status: int, headers: Mapping[str, str] | None = None) -> Response:
    status = int(status)
    if status == HTTPStatus.NO_CONTENT:
        response = Response(status=status, content_type="application/json")
    else:
        text = json.dumps(_jsonable(body), separators=(",", ":"), ensure_ascii=False) + "\n"
        response = Response(text, status=status, content_type="application/json")
    for key, value in (headers or {}).items():
        response.headers[key] = value
    return response


def _error_response(err: BaseException) -> Response:
    cid = request.environ.get(_CID_ENVIRON_KEY)
    get_logger().error("An error happened at request %s: %s", cid, err)
    custom = get_custom_error(err)
    return _json_response(HttpError(message=custom.message), custom.status)


def _adapt(handler: Handler, body_type: Any):
    def view(**params: Any) -> Response:
        try:
            http_request = extract_request(request, body_type, params)
            response = handler.handle(http_request)
        except Exception as err:  # every failure becomes an error body
            return _error_response(err)
        return _json_response(response.body, response.status, response.headers)

    return view


def _canonical_header(name: str) -> str:
    return "-".join(part.capitalize() for part in name.strip().split("-"))


def _origin_allowed(origin: str) -> bool:
    return "*" in _CORS_ORIGINS or origin in _CORS_ORIGINS


def _preflight_response() -> Response:
    response = Response(status=HTTPStatus.OK)
    for vary in ("Origin", "Access-Control-Request-Method", "Access-Control-Request-Headers"):
        response.headers.add("Vary", vary)
    origin = request.headers.get("Origin", "")
    if not origin or not _origin_allowed(origin):
        return response
    method = request.headers.get("Access-Control-Request-Method", "").upper()
    if method not in _CORS_METHODS:
        return response
    requested = [
        _canonical_header(name)
        for value in request.headers.getlist("Access-Control-Request-Headers")
        for name in value.split(",")
        if name.strip()
    ]
    if any(name.lower() not in _CORS_HEADERS for name in requested):
        return response
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = method
    if requested:
        response.headers["Access-Control-Allow-Headers"] = ", ".join(requested)
    response.headers["Access-Control-Allow-Credentials"] = "true"
    response.headers["Access-Control-Max-Age"] = str(_CORS_MAX_AGE)
    return response


def _apply_cors(response: Response) -> None:
    response.headers.add("Vary", "Origin")
    origin = request.headers.get("Origin", "")
    if not origin or not _origin_allowed(origin):
        return
    if request.method.upper() not in _CORS_METHODS:
        return
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Expose-Headers"] = _CORS_EXPOSED_HEADERS
    response.headers["Access-Control-Allow-Credentials"] = "true"


def _default_static_dir() -> Path:
    base = os.getcwd()
    if base == "/":
        base = "/usr/local/bin"
    return Path(base) / "static"


def _docs_content_type(path: str) -> str:
    if ".css" in path:
        return "text/css"
    if ".js" in path:
        return "text/javascript"
    return "text/html"


def _is_directory_within(root: Path, target: str) -> bool:
    """Tell whether ``target`` names a directory that lies inside ``root``."""
    try:
        base = root.resolve()
        candidate = (base / target).resolve()
        candidate.relative_to(base)
    except (ValueError, OSError):
        return False
    return candidate.is_dir()


def create_app(controllers: Controllers, static_dir: str | os.PathLike | None = None) -> Flask:
    """Build the Flask application serving the packaging API and its docs."""
    static_root = Path(static_dir) if static_dir is not None else _default_static_dir()
    swagger_ui_dir = static_root / "swagger-ui"
    logger = get_logger()

    app = Flask(__name__, static_folder=None)

    @app.before_request
    def _assign_cid() -> None:
        request.environ[_CID_ENVIRON_KEY] = str(uuid.uuid4())

    @app.before_request
    def _cors_preflight() -> Response | None:
        if request.method == "OPTIONS" and "Access-Control-Request-Method" in request.headers:
            request.environ[_PREFLIGHT_ENVIRON_KEY] = True
            return _preflight_response()
        return None

    @app.before_request
    def _allow_content_type() -> Response | None:
        chunked = "chunked" in request.headers.get("Transfer-Encoding", "").lower()
        if not request.content_length and not chunked:
            return None
        content_type = request.headers.get("Content-Type", "").strip().lower()
        content_type = content_type.split(";", 1)[0]
        if content_type in _ALLOWED_CONTENT_TYPES:
            return None
        return Response(status=HTTPStatus.UNSUPPORTED_MEDIA_TYPE)

    @app.after_request
    def _finish(response: Response) -> Response:
        response.headers["X-Cid"] = request.environ.get(_CID_ENVIRON_KEY, "")
        if not request.environ.get(_PREFLIGHT_ENVIRON_KEY):
            _apply_cors(response)
        logger.info('"%s %s" %s', request.method, request.full_path.rstrip("?"), response.status_code)
        return response

    @app.errorhandler(HTTPStatus.NOT_FOUND)
    def _not_found(_err: Exception) -> Response:
        return Response("404 page not found\n", status=HTTPStatus.NOT_FOUND, mimetype="text/plain")

    @app.errorhandler(HTTPStatus.METHOD_NOT_ALLOWED)
    def _method_not_allowed(_err: Exception) -> Response:
        return Response(status=HTTPStatus.METHOD_NOT_ALLOWED)

    def route(rule: str, endpoint: str, view, methods: list[str], **options: Any) -> None:
        app.add_url_rule(
            rule,
            endpoint,
            view,
            methods=methods,
            provide_automatic_options=False,
            **options,
        )

    route(
        "/packaging/",
        "create_packaging",
        _adapt(controllers.create, CreatePackagingRequest),
        ["POST"],
        strict_slashes=False,
    )
    route(
        "/packaging/",
        "get_all_packaging",
        _adapt(controllers.get_all, EmptyRequest),
        ["GET"],
        strict_slashes=False,
    )
    route(
        "/packaging/amount/<amount>",
        "get_packs_for_amount",
        _adapt(controllers.get_for_amount, EmptyRequest),
        ["GET"],
    )
    route(
        "/packaging/<id>",
        "delete_packaging",
        _adapt(controllers.delete_by_id, EmptyRequest),
        ["DELETE"],
    )

    def health() -> Response:
        return Response("Ok", status=HTTPStatus.OK, content_type="application/json")

    route("/health/", "health", health, ["GET"], strict_slashes=False)

    def swagger() -> Response:
        response = send_from_directory(static_root, "swagger.yaml")
        response.headers["Content-Type"] = "application/json"
        return response

    route("/swagger", "swagger", swagger, ["GET"])

    def docs(filename: str) -> Response:
        target = filename
        if not target or target.endswith("/"):
            target += "index.html"
        elif _is_directory_within(swagger_ui_dir, target):
            target += "/index.html"
        response = send_from_directory(swagger_ui_dir, target)
        response.headers["Content-Type"] = _docs_content_type(request.path)
        return response

    route("/", "docs_index", docs, ["GET"], defaults={"filename": ""})
    route("/<path:filename>", "docs", docs, ["GET"])

    return app


def main(argv: list[str] | None = None) -> int:
    """Connect to the database and serve the API on ``SV_PORT`` (default 3000)."""
    parser = argparse.ArgumentParser(prog="packsizer", description="Run the packaging API server.")
    parser.parse_args(argv)
    load_dotenv()

    logger = get_logger()
    try:
        collection = MongoClientProvider().get_collection(PACKAGING_COLLECTION)
    except RuntimeError as err:
        logger.critical("Error connection to DB: %s", err)
        return 1

    app = create_app(build_controllers(MongoPackagingRepository(collection)))
    port = get_string_value_or_default(os.getenv("SV_PORT"), "3000")
    logger.info("Starting server on port %s", port)
    app.run(host="0.0.0.0", port=int(port))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())