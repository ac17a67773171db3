# tests/test_history_routes.py
import pytest

from tests.conftest import SAMPLE_RESULT

IMAGE = "aGVsbG8tc21pbGU="


def test_latest_on_empty_collection_is_not_found(client):
    response = client.get('/history/latest')

    assert response.status_code == 404
    assert response.get_json()["error"] == "No scans found"


def test_latest_returns_only_the_newest_result(client, scan_collection):
    scan_collection.add_raw({"result": dict(SAMPLE_RESULT, whitenessScore=60), "contextTags": ["tea"]})
    scan_collection.add_raw({"result": dict(SAMPLE_RESULT, whitenessScore=71), "contextTags": ["coffee"]})

    response = client.get('/history/latest')

    assert response.status_code == 200
    body = response.get_json()
    assert list(body.keys()) == ["result"]
    assert body["result"]["whitenessScore"] == 71


def test_latest_reflects_a_completed_analysis(client, completions):
    client.post('/analyze', json={"image": IMAGE, "tags": ["coffee"]})

    response = client.get('/history/latest')

    assert response.status_code == 200
    assert response.get_json() == {"result": SAMPLE_RESULT}


def test_latest_decodes_legacy_plan_summary(client, scan_collection):
    legacy = {k: v for k, v in SAMPLE_RESULT.items() if k != "personalTakeaway"}
    legacy["planSummary"] = "Light whitening plan"
    scan_collection.add_raw({"result": legacy, "contextTags": []})

    response = client.get('/history/latest')

    result = response.get_json()["result"]
    assert result["personalTakeaway"] == "Light whitening plan"
    assert "planSummary" not in result


@pytest.mark.parametrize("method", ["post", "put", "delete", "patch"])
def test_latest_rejects_other_methods_as_not_found(client, scan_collection, method):
    scan_collection.add_raw({"result": SAMPLE_RESULT, "contextTags": []})

    response = getattr(client, method)('/history/latest')

    assert response.status_code == 404
    assert response.get_json()["error"] == "Not Found"


@pytest.mark.parametrize("path", ["/history", "/history/all", "/history/latest/extra"])
def test_other_history_paths_are_not_found(client, scan_collection, path):
    scan_collection.add_raw({"result": SAMPLE_RESULT, "contextTags": []})

    response = client.get(path)

    assert response.status_code == 404
    assert response.get_json()["error"] == "Not Found"


def test_store_failure_is_internal_error(client, scan_collection):
    scan_collection.fail_with = RuntimeError("deadline exceeded")

    response = client.get('/history/latest')

    assert response.status_code == 500
    assert response.get_json()["error"] == "Internal server error"


def test_latest_tolerates_older_partial_records(client, scan_collection):
    scan_collection.add_raw({"result": {"whitenessScore": 70, "shade": "A2", "planSummary": "x"}})

    response = client.get('/history/latest')

    assert response.status_code == 200
    result = response.get_json()["result"]
    assert result["whitenessScore"] == 70
    assert result["shade"] == "A2"
    assert result["personalTakeaway"] == "x"
    assert result["detectedIssues"] == []
    assert result["confidence"] == 0.0


def test_latest_keeps_stored_issues_with_unlisted_severity(client, scan_collection):
    issue = {"key": "chipping", "severity": "critical", "notes": "Edge chip"}
    scan_collection.add_raw({"result": dict(SAMPLE_RESULT, detectedIssues=[issue]), "contextTags": []})

    response = client.get('/history/latest')

    assert response.status_code == 200
    assert response.get_json()["result"]["detectedIssues"] == [issue]
