"""Flask application factory for the simulator API.

The ``create_app`` function returns a Flask app with three endpoints:

- ``GET /api/policies`` — list the replacement policy names.
- ``POST /api/simulate`` — run a trace and return every outcome as JSON.
- ``POST /api/compare`` — run a trace under every policy and return the
  summaries.

Request bodies carry the trace as text (``"1 0 R\\n1 100 W"``) or as a
list of lines.  Every request builds its own engine, so concurrent
requests never share simulation state.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from flask import Flask, Response, jsonify, request

from pagesim.config import ConfigError, SimulationConfig
from pagesim.logging import Logger, LogLevel
from pagesim.memory.engine import FaultIntoFree, FaultWithEviction, Hit, ReplacementPolicy
from pagesim.simulator import compare_policies, run_simulation
from pagesim.trace import read_trace

if TYPE_CHECKING:
    from pagesim.memory.engine import AccessResult, RunSummary
    from pagesim.trace import AccessRecord

_HTTP_BAD_REQUEST = 400

_OUTCOME_KINDS: dict[type, str] = {
    Hit: "hit",
    FaultIntoFree: "fault",
    FaultWithEviction: "eviction",
}


class _BadRequestError(Exception):
    """Raise when a request body is missing fields or has the wrong types."""


def _result_json(result: AccessResult) -> dict[str, Any]:
    """Flatten an access outcome into JSON-ready fields plus its kind."""
    data = dataclasses.asdict(result)
    data["operation"] = str(result.operation)
    data["kind"] = _OUTCOME_KINDS[type(result)]
    return data


def _summary_json(summary: RunSummary) -> dict[str, Any]:
    """Return the summary counters together with the derived rates."""
    data = dataclasses.asdict(summary)
    data["hit_rate"] = summary.hit_rate
    data["fault_rate"] = summary.fault_rate
    return data


def _int_field(data: dict[str, Any], name: str) -> int:
    """Pull a required integer field out of the request body."""
    if name not in data:
        msg = f"Missing {name!r} field"
        raise _BadRequestError(msg)
    value = data[name]
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"Field {name!r} must be an integer"
        raise _BadRequestError(msg)
    return value


def _trace_field(data: dict[str, Any], logger: Logger) -> list[AccessRecord]:
    """Parse the ``trace`` field, accepting text or a list of lines."""
    if "trace" not in data:
        msg = "Missing 'trace' field"
        raise _BadRequestError(msg)
    trace = data["trace"]
    if isinstance(trace, str):
        lines = trace.splitlines()
    elif isinstance(trace, list) and all(isinstance(line, str) for line in trace):
        lines = trace
    else:
        msg = "Field 'trace' must be text or a list of lines"
        raise _BadRequestError(msg)
    return read_trace(lines, logger=logger)


def _warnings(logger: Logger) -> list[str]:
    return [entry.message for entry in logger.filter(min_level=LogLevel.WARNING)]


def create_app() -> Flask:
    """Create and configure the Flask application.

    Returns:
        A configured Flask application ready to serve.

    """
    app = Flask(__name__)

    @app.errorhandler(_BadRequestError)
    @app.errorhandler(ConfigError)
    def bad_request(exc: Exception) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Report invalid input as a JSON 400."""
        return jsonify({"error": str(exc)}), _HTTP_BAD_REQUEST

    @app.route("/api/policies")
    def policies() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the available replacement policy names."""
        return jsonify({"policies": [policy.value for policy in ReplacementPolicy]})

    @app.route("/api/simulate", methods=["POST"])
    def simulate() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Run one trace under one policy.

        Expects JSON body:
        ``{"num_frames": 3, "page_size": 100, "policy": "fifo", "trace": "..."}``

        Returns:
            JSON with ``results``, ``summary``, ``frames`` and ``warnings``.

        """
        data = _json_body()
        if "policy" not in data:
            msg = "Missing 'policy' field"
            raise _BadRequestError(msg)
        config = SimulationConfig.from_values(
            num_frames=_int_field(data, "num_frames"),
            page_size=_int_field(data, "page_size"),
            policy=str(data["policy"]),
        )
        logger = Logger()
        records = _trace_field(data, logger)
        run = run_simulation(config, records, logger=logger)
        return jsonify(
            {
                "results": [_result_json(result) for result in run.results],
                "summary": _summary_json(run.summary),
                "frames": [dataclasses.asdict(view) for view in run.frames],
                "warnings": _warnings(logger),
            }
        )

    @app.route("/api/compare", methods=["POST"])
    def compare() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Run one trace under every policy.

        Expects JSON body: ``{"num_frames": 3, "page_size": 100, "trace": "..."}``

        Returns:
            JSON with per-policy ``summaries`` and ``warnings``.

        """
        data = _json_body()
        num_frames = _int_field(data, "num_frames")
        page_size = _int_field(data, "page_size")
        logger = Logger()
        records = _trace_field(data, logger)
        summaries = compare_policies(
            num_frames=num_frames, page_size=page_size, records=records
        )
        return jsonify(
            {
                "summaries": {
                    policy.value: _summary_json(summary)
                    for policy, summary in summaries.items()
                },
                "warnings": _warnings(logger),
            }
        )

    return app


def _json_body() -> dict[str, Any]:
    """Return the request's JSON object or fail with a 400."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        msg = "Request body must be a JSON object"
        raise _BadRequestError(msg)
    return data


def main() -> None:
    """Run the API development server.

    This is the ``pagesim-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
