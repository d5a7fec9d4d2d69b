"""
Tests for the Azure Function HTTP endpoints.
"""

import importlib.util
import json
from pathlib import Path
from unittest import mock

import azure.functions as func
import pytest

FUNCTION_APP_PATH = Path(__file__).parent.parent / "azure-function" / "function_app.py"

spec = importlib.util.spec_from_file_location("function_app", FUNCTION_APP_PATH)
function_app = importlib.util.module_from_spec(spec)
spec.loader.exec_module(function_app)


def user_function(decorated):
    """Unwrap a v2-model function builder to the plain handler."""
    if hasattr(decorated, "build"):
        return decorated.build().get_user_function()
    return decorated


def make_request(url, route_params, params=None):
    return func.HttpRequest(
        method="GET",
        url=url,
        route_params=route_params,
        params=params or {},
        body=b"",
    )


@pytest.fixture
def storage_env(monkeypatch):
    monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", "UseDevelopmentStorage=true")
    monkeypatch.delenv("PNL_REPORTS_CONTAINER", raising=False)
    monkeypatch.delenv("PNL_REPORTS_RESOURCE", raising=False)
    monkeypatch.delenv("PNL_TOP_EXPENSES", raising=False)


class TestGetView:
    """Test the views endpoint."""

    def test_unknown_view(self, storage_env):
        req = make_request("/api/views/abc/weekly", {"business_id": "abc", "view": "weekly"})
        resp = user_function(function_app.get_view)(req)
        assert resp.status_code == 400

    def test_builds_view(self, storage_env, quarterly_report):
        req = make_request("/api/views/abc/quarterly", {"business_id": "abc", "view": "quarterly"})
        with mock.patch.object(function_app, "load_report_blob", return_value=quarterly_report) as load:
            resp = user_function(function_app.get_view)(req)

        assert resp.status_code == 200
        body = json.loads(resp.get_body())
        assert body["growth"]["revenue"] == pytest.approx(50.0)
        assert "generated_at" in body
        load.assert_called_once_with(
            "UseDevelopmentStorage=true", "pnl-reports", "reports", "abc", "monthByMonthBreakdownLast12Months"
        )

    def test_missing_report(self, storage_env):
        req = make_request("/api/views/abc/visual", {"business_id": "abc", "view": "visual"})
        with mock.patch.object(function_app, "load_report_blob", return_value=None):
            resp = user_function(function_app.get_view)(req)
        assert resp.status_code == 404

    def test_bad_top(self, storage_env):
        req = make_request("/api/views/abc/visual", {"business_id": "abc", "view": "visual"}, {"top": "lots"})
        resp = user_function(function_app.get_view)(req)
        assert resp.status_code == 400

    def test_negative_top(self, storage_env):
        req = make_request("/api/views/abc/quarterly", {"business_id": "abc", "view": "quarterly"}, {"top": "-1"})
        with mock.patch.object(function_app, "load_report_blob") as load:
            resp = user_function(function_app.get_view)(req)
        assert resp.status_code == 400
        load.assert_not_called()

    def test_storage_failure(self, storage_env):
        req = make_request("/api/views/abc/monthly", {"business_id": "abc", "view": "monthly"})
        with mock.patch.object(function_app, "load_report_blob", side_effect=RuntimeError("down")):
            resp = user_function(function_app.get_view)(req)
        assert resp.status_code == 500


class TestExportMonthly:
    """Test the CSV export endpoint."""

    def test_csv(self, storage_env, monthly_report):
        req = make_request("/api/export/abc/monthly.csv", {"business_id": "abc"}, {"search": "sales"})
        with mock.patch.object(function_app, "load_report_blob", return_value=monthly_report):
            resp = user_function(function_app.export_monthly)(req)

        assert resp.status_code == 200
        assert resp.mimetype == "text/csv"
        assert resp.get_body().decode() == "Item,Jan,Feb,Mar\nSales,1,000,1,200,900"
        assert resp.headers["Content-Disposition"].startswith("attachment; filename=monthly_breakdown_")


def test_parse_compare():
    assert function_app.parse_compare("Jan, Feb,,Mar") == ["Jan", "Feb", "Mar"]
    assert function_app.parse_compare(None) == []
