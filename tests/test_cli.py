"""Tests for the command line entry point."""

import json

import httpx
import pytest

import procore_sdk.__main__ as cli
from fake_procore import create_fake_procore
from procore_sdk.auth import create_auth_provider


@pytest.fixture(autouse=True)
def clean_environ(monkeypatch):
    for name in ("ENVIRONMENT", "ACCESS_TOKEN", "REFRESH_TOKEN", "CLIENT_ID", "CLIENT_SECRET",
                 "COMPANY_ID", "TIMEOUT", "API_VERSION"):
        monkeypatch.delenv("PROCORE_" + name, raising=False)


@pytest.fixture
def fake(monkeypatch):
    app = create_fake_procore(
        {"/projects": [{"id": i} for i in range(3)]},
        objects={"/projects/3": {"id": 3, "name": "Tower"}},
    )
    monkeypatch.setenv("PROCORE_ACCESS_TOKEN", "cli-token")
    monkeypatch.setattr(
        cli,
        "_auth",
        lambda settings: create_auth_provider(
            settings.to_credentials(), transport=httpx.ASGITransport(app=app)
        ),
    )
    return app


def test_parse_params():
    params = cli.parse_params(["project_id=7", "filters={\"status\": \"open\"}", "name=Tower", "q=a=b"])
    assert params == {"project_id": 7, "filters": {"status": "open"}, "name": "Tower", "q": "a=b"}


def test_parse_params_rejects_bare_key():
    with pytest.raises(ValueError, match="key=value"):
        cli.parse_params(["project_id"])


def test_operations_listing(capsys):
    assert cli.main(["operations", "rfi"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("rfi (RFI)")
    assert "createRfi" in out
    assert "listProjects" not in out


def test_events_listing(capsys):
    assert cli.main(["events"]) == 0
    assert "rfiCreated" in capsys.readouterr().out


def test_unknown_resource_is_reported(capsys):
    assert cli.main(["operations", "widgets"]) == 1
    assert "Error: Resource widgets is not supported" in capsys.readouterr().err


def test_invalid_company_id_in_environment(monkeypatch, capsys):
    monkeypatch.setenv("PROCORE_COMPANY_ID", "acme")
    assert cli.main(["events"]) == 1
    assert "Invalid value for company_id" in capsys.readouterr().err


def test_run_prints_result(fake, monkeypatch, capsys):
    monkeypatch.setenv("PROCORE_COMPANY_ID", "5")
    assert cli.main(["run", "project", "listProjects", "--limit", "2"]) == 0

    assert json.loads(capsys.readouterr().out) == [{"id": 0}, {"id": 1}]
    call = fake.state.requests[-1]
    assert call["query"] == {"per_page": "2"}
    assert call["headers"]["authorization"] == "Bearer cli-token"
    assert call["headers"]["procore-company-id"] == "5"


def test_run_missing_parameter(fake, capsys):
    assert cli.main(["run", "project", "getProject"]) == 1
    assert "Missing required fields: project_id" in capsys.readouterr().err
    assert fake.state.requests == []


def test_batch_with_continue_on_fail(fake, tmp_path, capsys):
    items = tmp_path / "items.json"
    items.write_text(json.dumps([
        {"operation": "getProject", "project_id": 3},
        {"operation": "getProject"},
    ]))

    assert cli.main(["batch", "project", str(items), "--continue-on-fail"]) == 0

    assert json.loads(capsys.readouterr().out) == [
        {"json": {"id": 3, "name": "Tower"}, "pairedItem": {"item": 0}},
        {"json": {"error": "Missing required fields: project_id"}, "pairedItem": {"item": 1}},
    ]


def test_batch_file_must_be_array(fake, tmp_path, capsys):
    items = tmp_path / "items.json"
    items.write_text("{}")
    assert cli.main(["batch", "project", str(items)]) == 1
    assert "must contain a JSON array" in capsys.readouterr().err


def test_upload_file_is_read(fake, tmp_path, capsys):
    doc = tmp_path / "plan.pdf"
    doc.write_bytes(b"%PDF-1.4")

    assert cli.main(["run", "document", "uploadDocument", "--param", "project_id=3",
                     "--file", str(doc)]) == 0

    received = json.loads(capsys.readouterr().out)["received"]
    assert received["document[name]"] == "plan.pdf"
    assert received["document[data]"] == {
        "filename": "plan.pdf",
        "content_type": "application/pdf",
        "size": 8,
    }
