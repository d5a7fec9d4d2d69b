"""
Report Sources

Locating and loading the pre-built report JSON files. Reports live under a
fixed path convention:

    /{resource}/{businessId}/{reportVariant}.json

and are served either over HTTPS (fetch_report_json) or straight from Azure
Blob Storage (load_report_blob). Both return the parsed JSON dict, or None
when the file does not exist, which the views treat as "no data available".
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import requests
from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import BlobServiceClient

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE = "reports"
DEFAULT_CONTAINER = "pnl-reports"

# Report variant -> default view rendered from it
REPORT_VARIANTS = {
    "basicCurrentFinancialYear": "single-period",
    "monthByMonthBreakdownLast12Months": "monthly",
    "visualFriendlyPnlDashboardDisplay": "visual",
}

# View -> report variant it is built from when none is given
DEFAULT_VARIANT_BY_VIEW = {
    "single-period": "basicCurrentFinancialYear",
    "monthly": "monthByMonthBreakdownLast12Months",
    "quarterly": "monthByMonthBreakdownLast12Months",
    "annual": "basicCurrentFinancialYear",
    "financial-year": "monthByMonthBreakdownLast12Months",
    "visual": "visualFriendlyPnlDashboardDisplay",
}


def report_path(resource: str, business_id: str, variant: str) -> str:
    """
    Build the path of a report file.

    Args:
        resource: Top-level resource folder (e.g. "reports")
        business_id: Client business ID
        variant: One of REPORT_VARIANTS

    Returns:
        Path like "/reports/abc123/basicCurrentFinancialYear.json"

    Raises:
        ValueError: If the variant or business ID is not usable
    """
    if variant not in REPORT_VARIANTS:
        raise ValueError(
            f"Unknown report variant '{variant}'. Expected one of: {', '.join(REPORT_VARIANTS)}"
        )
    if not business_id or "/" in business_id:
        raise ValueError(f"Invalid business ID: {business_id!r}")

    resource = resource.strip("/") or DEFAULT_RESOURCE
    return f"/{resource}/{business_id}/{variant}.json"


# ============================================================================
# HTTP
# ============================================================================

def fetch_report_json(base_url: str, resource: str, business_id: str, variant: str,
                      token: str = None) -> Optional[dict]:
    """
    Fetch a report file over HTTPS.

    Args:
        base_url: Host serving the report files (e.g. "https://app.example.com")
        resource: Top-level resource folder
        business_id: Client business ID
        variant: Report variant
        token: Optional bearer token

    Returns:
        Parsed JSON dict, or None if the report does not exist (404)

    Raises:
        requests.HTTPError: If the request fails with any other status
    """
    url = base_url.rstrip("/") + report_path(resource, business_id, variant)

    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    response = requests.get(url, headers=headers, timeout=30)

    if response.status_code == 404:
        logger.info(f"No report at {url}")
        return None

    if response.status_code != 200:
        raise requests.HTTPError(
            f"Report fetch failed {response.status_code}: {response.text}"
        )

    return response.json()


# ============================================================================
# Blob Storage
# ============================================================================

def load_report_blob(connection_string: str, container: str, resource: str,
                     business_id: str, variant: str) -> Optional[dict]:
    """
    Load a report file from Azure Blob Storage.

    The blob name is the report path without its leading slash.

    Returns:
        Parsed JSON dict, or None if the blob does not exist
    """
    blob_name = report_path(resource, business_id, variant).lstrip("/")

    blob_service = BlobServiceClient.from_connection_string(connection_string)
    container_client = blob_service.get_container_client(container)
    blob_client = container_client.get_blob_client(blob_name)

    try:
        blob_data = blob_client.download_blob().readall()
    except ResourceNotFoundError:
        logger.info(f"No report blob {container}/{blob_name}")
        return None

    return json.loads(blob_data)
