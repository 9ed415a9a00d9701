"""
Test suite for the job status, cancel and delete endpoints.

System role: Verification of the job HTTP API
"""

import pytest
from fastapi.testclient import TestClient

from markdown_file_handler.api.deps import get_job_service
from markdown_file_handler.api.main import create_app
from markdown_file_handler.application.services.job_service import JobService
from markdown_file_handler.configs import Settings


@pytest.fixture
def job_service(runner, tracker, fake_drive) -> JobService:
    return JobService(runner, tracker, fake_drive)


@pytest.fixture
def client(job_service):
    app = create_app(Settings())
    app.dependency_overrides[get_job_service] = lambda: job_service
    return TestClient(app)


def test_get_job_status(client, job_service, echo_job, tracker, wait_for_terminal):
    job_id = job_service.submit(echo_job, ["hello"], "token")
    wait_for_terminal(tracker, job_id)

    response = client.get(f"/api/v1/jobs/{job_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["job_identifier"] == job_id
    assert data["status"]["state"] == "succeeded"
    assert data["status"]["result"] == "hello"
    assert data["status"]["error"] is None
    assert data["status"]["original_parameters"] == {"input_0": "hello"}


def test_get_failed_job_status(client, job_service, failing_job, tracker, wait_for_terminal):
    job_id = job_service.submit(failing_job, [], "token")
    wait_for_terminal(tracker, job_id)

    data = client.get(f"/api/v1/jobs/{job_id}").json()

    assert data["status"]["state"] == "failed"
    assert data["status"]["error_kind"] == "unknown_job"
    assert "disk on fire" in data["status"]["error"]
    assert data["status"]["result"] is None


def test_get_job_not_found(client):
    response = client.get("/api/v1/jobs/does-not-exist")

    assert response.status_code == 404
    assert "not found" in response.json()["detail"].lower()


def test_cancel_running_job(client, job_service, gated_job, tracker, wait_for_terminal):
    job_id = job_service.submit(gated_job, ["a"], "token")
    gated_job.started.wait(timeout=5)

    response = client.post(f"/api/v1/jobs/{job_id}/cancel")
    gated_job.gate.set()

    assert response.status_code == 200
    assert response.json() == {"job_identifier": job_id, "cancelled": True}
    status = wait_for_terminal(tracker, job_id)
    assert status.error_kind.value == "cancelled"


def test_cancel_unknown_job(client):
    assert client.post("/api/v1/jobs/nope/cancel").status_code == 404


def test_delete_job(client, job_service, runner, gated_job, tracker, wait_for_terminal):
    job_id = job_service.submit(gated_job, ["a"], "token")
    gated_job.started.wait(timeout=5)

    assert client.delete(f"/api/v1/jobs/{job_id}").status_code == 409

    gated_job.gate.set()
    wait_for_terminal(tracker, job_id)
    runner.drain()

    assert client.delete(f"/api/v1/jobs/{job_id}").status_code == 204
    assert client.get(f"/api/v1/jobs/{job_id}").status_code == 404
