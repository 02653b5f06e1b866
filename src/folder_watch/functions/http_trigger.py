"""HTTP trigger blueprint — health check and manual synchronization endpoints."""

import json
import logging

import azure.functions as func

from folder_watch import __version__
from folder_watch.config import load_config
from folder_watch.orchestration.driver import sync_driver_from_config

logger = logging.getLogger(__name__)

bp = func.Blueprint()


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint returning service status and version."""
    logger.info("[health_check] health check requested")

    try:
        body = json.dumps({"status": "ok", "version": __version__})
        return func.HttpResponse(body, status_code=200, mimetype="application/json")

    except Exception:
        logger.error("[health_check] health check failed", exc_info=True)
        error_body = json.dumps({"status": "error", "message": "Internal server error"})
        return func.HttpResponse(error_body, status_code=500, mimetype="application/json")


@bp.route(route="sync", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def manual_sync(req: func.HttpRequest) -> func.HttpResponse:
    """Manual trigger endpoint — runs one synchronization pass on demand.

    Requires a function key for authentication. Executes the same logic
    as the timer trigger but returns per-row results in the HTTP response.
    """
    logger.info("[manual_sync] manual synchronization requested")

    try:
        config = load_config()
        driver = sync_driver_from_config(config)
        report = driver.run()

        results = [
            {
                "row": result.row_index,
                "state": result.state.value,
                "folder_name": result.folder_name,
                "new_entry_count": len(result.new_entries),
                "error": result.error,
            }
            for result in report.results
        ]
        logger.info(
            "[manual_sync] synchronization complete; row_count:%d;new_count:%d",
            len(results),
            report.new_entry_count,
        )

        body = json.dumps({"status": "ok", "rows_processed": len(results), "results": results})
        return func.HttpResponse(body, status_code=200, mimetype="application/json")

    except Exception:
        logger.error("[manual_sync] manual synchronization failed", exc_info=True)
        error_body = json.dumps({"status": "error", "message": "Internal server error"})
        return func.HttpResponse(error_body, status_code=500, mimetype="application/json")
