"""Index service — an in-memory capture index behind permission-gated routes.

Demonstrates ordered routing (the ``/rules`` routes before the catch-all
``/<index>``, and the specific ``/rules/new`` before the
general ``/rules/<id>``), typed path parameters, mandatory query
parameters, request body streaming and per-route permissions.

Run with any ASGI server:
    cd examples/index_service && uvicorn app:app

Editing requires ``Authorization: Bearer editor-token``.
"""

import threading
from collections import defaultdict
from dataclasses import dataclass

from turnstile import (
    App,
    Permission,
    Permit,
    Request,
    Response,
    Router,
    StaticAuthorizer,
    bad_request,
    json_response,
    not_found,
)
from turnstile.errors import ResponseError


@dataclass(frozen=True, slots=True)
class Capture:
    url: str
    timestamp: str
    status: int


@dataclass(frozen=True, slots=True)
class Rule:
    id: int
    prefix: str


_lock = threading.Lock()
_indexes: dict[str, list[Capture]] = defaultdict(list)
_rules: dict[int, Rule] = {}
_next_rule_id = 1


def _parse_capture(line: str) -> Capture:
    """``<url> <timestamp> <status>``, one capture per line."""
    fields = line.split()
    if len(fields) != 3 or not fields[2].isdigit():
        raise ResponseError(bad_request(f"malformed capture line: {line!r}"))
    return Capture(fields[0], fields[1], int(fields[2]))


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def list_indexes(request: Request) -> Response:
    with _lock:
        return json_response(sorted(_indexes))


def query_index(request: Request) -> Response:
    name = request.mandatory_param("index")
    url = request.mandatory_param("url")
    limit = request.param("limit", "100") or "100"
    if not limit.isdigit():
        return bad_request("limit must be a non-negative integer")
    with _lock:
        if name not in _indexes:
            return not_found()
        matches = [c for c in _indexes[name] if c.url == url]
    return json_response(matches[: int(limit)])


def load_index(request: Request) -> Response:
    name = request.mandatory_param("index")
    captures = [
        _parse_capture(line)
        for line in request.body.read().decode("utf-8").splitlines()
        if line.strip()
    ]
    with _lock:
        _indexes[name].extend(captures)
    return json_response({"index": name, "added": len(captures), "by": request.username})


def new_rule_template(request: Request) -> Response:
    return json_response({"prefix": ""})


def get_rule(request: Request) -> Response:
    with _lock:
        rule = _rules.get(int(request.mandatory_param("rule_id")))
    return json_response(rule) if rule is not None else not_found()


def create_rule(request: Request) -> Response:
    global _next_rule_id
    prefix = request.mandatory_param("prefix")
    with _lock:
        rule = Rule(_next_rule_id, prefix)
        _rules[rule.id] = rule
        _next_rule_id += 1
    return json_response(rule).with_status(201)


def delete_rule(request: Request) -> Response:
    with _lock:
        removed = _rules.pop(int(request.mandatory_param("rule_id")), None)
    return Response(status=204) if removed is not None else not_found()


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

router = (
    Router()
    .on("GET", "/rules/new", new_rule_template)
    .on("GET", "/rules/<rule_id:[0-9]+>", get_rule)
    .on("POST", "/rules", create_rule, Permission.RULES_EDIT)
    .on("DELETE", "/rules/<rule_id:[0-9]+>", delete_rule, Permission.RULES_EDIT)
    .on("GET", "/", list_indexes)
    .on("GET", "/<index>", query_index)
    .on("POST", "/<index>", load_index, Permission.INDEX_EDIT)
)

authorizer = StaticAuthorizer(
    {"editor-token": Permit("editor", frozenset(Permission))},
)

app = App(router, authorizer=authorizer)
