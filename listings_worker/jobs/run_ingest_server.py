"""HTTP entrypoint that triggers ingest jobs (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

from flask import Flask, jsonify, request

from listings_worker.core.config import get_settings
from listings_worker.jobs.run_ingest import parse_terms, run_ingest_job

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App & executor ----------
app = Flask(__name__)
# One worker keeps batches sequential so the per-candidate throttle holds.
_executor = ThreadPoolExecutor(max_workers=1)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only, no database round trip."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "municipality": f"{settings.municipality_name}, {settings.municipality_state}",
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/ingest")
def enqueue_ingest() -> Any:
    """
    Enqueue an ingest batch.
    Required JSON field: search_terms (list of strings or comma-separated string)
    Optional: max_per_term (int), dry_run (bool)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    raw_terms = payload.get("search_terms")
    if isinstance(raw_terms, str):
        raw_terms = [raw_terms]
    if not isinstance(raw_terms, list):
        return jsonify({"error": "search_terms must be a list or comma-separated string"}), 400
    search_terms: List[str] = parse_terms(raw_terms)
    if not search_terms:
        return jsonify({"error": "missing fields: search_terms"}), 400

    max_raw = payload.get("max_per_term")
    max_per_term = None
    if max_raw is not None:
        try:
            max_per_term = int(max_raw)
        except (TypeError, ValueError):
            return jsonify({"error": "max_per_term must be numeric"}), 400
        if max_per_term <= 0:
            return jsonify({"error": "max_per_term must be positive"}), 400

    job_args = dict(
        search_terms=search_terms,
        max_per_term=max_per_term,
        dry_run=bool(payload.get("dry_run", False)),
    )

    logger.info("Queueing ingest job: %s", job_args)
    _executor.submit(_run_job_safe, job_args)

    return jsonify({"data": {"status": "queued", "search_terms": search_terms}}), 202


# ---------- Internals ----------


def _run_job_safe(job_args: Dict[str, Any]) -> None:
    try:
        run_ingest_job(**job_args)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Ingest job failed: %s", exc)


def main() -> None:
    port = int(os.getenv("PORT") or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
