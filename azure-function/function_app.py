import azure.functions as func
import logging
import os
import json
from datetime import datetime, timezone
import pnl_core
from pnl_core.export import csv_filename
from pnl_core.sources import (
    DEFAULT_CONTAINER,
    DEFAULT_RESOURCE,
    DEFAULT_VARIANT_BY_VIEW,
    load_report_blob,
)
from pnl_core.views import VIEW_NAMES, DEFAULT_TOP_EXPENSES, monthly_csv

app = func.FunctionApp()


@app.route(route="views/{business_id}/{view}", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def get_view(req: func.HttpRequest) -> func.HttpResponse:
    """Build a Profit & Loss view model for a client business."""
    business_id = req.route_params.get("business_id")
    view = req.route_params.get("view")
    logging.info(f"View request: {view} for business {business_id}")

    if view not in VIEW_NAMES:
        return json_response({"error": f"Unknown view '{view}'", "views": list(VIEW_NAMES)}, 400)

    variant = req.params.get("variant") or DEFAULT_VARIANT_BY_VIEW[view]

    try:
        top_n = int(req.params.get("top") or os.environ.get("PNL_TOP_EXPENSES", DEFAULT_TOP_EXPENSES))
    except ValueError:
        return json_response({"error": "top must be an integer"}, 400)
    if top_n < 0:
        return json_response({"error": "top must not be negative"}, 400)

    try:
        report = load_report(business_id, variant)
    except ValueError as e:
        return json_response({"error": str(e)}, 400)
    except Exception as e:
        logging.error(f"Report load failed for {business_id}/{variant}: {e}")
        return json_response({"error": "Failed to load report"}, 500)

    if report is None:
        return json_response({"error": "No data available"}, 404)

    view_model = pnl_core.build_view(
        view,
        report,
        search=req.params.get("search", ""),
        month=req.params.get("month"),
        compare=parse_compare(req.params.get("compare")),
        top_n=top_n,
        currency=req.params.get("currency", "USD"),
    )
    view_model["generated_at"] = datetime.now(timezone.utc).isoformat()

    return json_response(view_model, 200)


@app.route(route="export/{business_id}/monthly.csv", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def export_monthly(req: func.HttpRequest) -> func.HttpResponse:
    """Download the (optionally filtered) monthly breakdown as CSV."""
    business_id = req.route_params.get("business_id")
    logging.info(f"Monthly CSV export for business {business_id}")

    try:
        report = load_report(business_id, "monthByMonthBreakdownLast12Months")
    except ValueError as e:
        return json_response({"error": str(e)}, 400)
    except Exception as e:
        logging.error(f"Report load failed for {business_id}: {e}")
        return json_response({"error": "Failed to load report"}, 500)

    if report is None:
        return json_response({"error": "No data available"}, 404)

    return func.HttpResponse(
        body=monthly_csv(report, req.params.get("search", "")),
        mimetype="text/csv",
        status_code=200,
        headers={"Content-Disposition": f"attachment; filename={csv_filename()}"},
    )


def load_report(business_id: str, variant: str) -> dict:
    """Load a report file from blob storage (None if it does not exist)."""
    connection_string = os.environ["AZURE_STORAGE_CONNECTION_STRING"]
    container = os.environ.get("PNL_REPORTS_CONTAINER", DEFAULT_CONTAINER)
    resource = os.environ.get("PNL_REPORTS_RESOURCE", DEFAULT_RESOURCE)
    return load_report_blob(connection_string, container, resource, business_id, variant)


def parse_compare(raw: str) -> list:
    """Split a comma-separated list of comparison periods."""
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


def json_response(body: dict, status_code: int) -> func.HttpResponse:
    return func.HttpResponse(
        body=json.dumps(body, indent=2),
        mimetype="application/json",
        status_code=status_code,
    )
