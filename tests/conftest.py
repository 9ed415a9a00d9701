"""
Shared test fixtures and configuration for entire test suite.

Provides: fresh tracker/runner per test, an in-memory drive client stub,
controllable job stubs and a polling helper
Dependencies: pytest
System role: Test infrastructure and fixture management
"""

import threading
import time
from collections.abc import Sequence

import pytest

from markdown_file_handler.core.exceptions import ExpiredCredentialError
from markdown_file_handler.core.job_runner import JobRunner
from markdown_file_handler.core.job_tracker import JobTracker
from markdown_file_handler.core.jobs.base import Job, JobContext, JobOutcome
from markdown_file_handler.models.drive import DriveItem, ItemReference
from markdown_file_handler.models.job import JobStatus


class FakeDriveClient:
    """
    In-memory stand-in for the drive API client.

    Items are keyed by item URL; content is served for "<item_url>/content"
    (with any query string). Uploads are recorded and answered with a new item.
    """

    def __init__(self, upload_web_url: str = "https://x/personal/uploaded") -> None:
        self.items: dict[str, DriveItem] = {}
        self.contents: dict[str, bytes] = {}
        self.uploads: list[tuple[str, bytes, str]] = []
        self.downloads: list[str] = []
        self.upload_web_url = upload_web_url
        self.fail_upload_with: Exception | None = None

    def add_item(self, item_url: str, name: str, content: bytes = b"# hello\n") -> DriveItem:
        item = DriveItem(
            id=item_url.rsplit("/", 1)[-1],
            name=name,
            parent_reference=ItemReference(drive_id="drive-1", id="folder-9"),
        )
        self.items[item_url] = item
        self.contents[item_url] = content
        return item

    def get_item(self, item_url: str, access_token: str) -> DriveItem:
        return self.items[item_url]

    def download_bytes(self, source_url: str, access_token: str) -> bytes:
        self.downloads.append(source_url)
        item_url = source_url.split("/content", 1)[0]
        if "format=pdf" in source_url:
            return b"%PDF-1.4 " + self.contents[item_url]
        return self.contents[item_url]

    def upload_bytes(
        self,
        data: bytes,
        target_url: str,
        access_token: str,
        content_type: str = "application/octet-stream",
    ) -> DriveItem:
        if self.fail_upload_with is not None:
            raise self.fail_upload_with
        self.uploads.append((target_url, data, content_type))
        return DriveItem(id=f"uploaded-{len(self.uploads)}", name="out", web_url=self.upload_web_url)


class GatedJob(Job):
    """Job that waits for a gate, then checkpoints and succeeds."""

    job_type = "gated"

    def __init__(self, result: str = "done") -> None:
        self.started = threading.Event()
        self.gate = threading.Event()
        self.result = result

    def run(self, inputs: Sequence[str], credential: str, context: JobContext) -> JobOutcome:
        self.started.set()
        self.gate.wait(timeout=10)
        context.checkpoint()
        context.report_progress("past checkpoint")
        return JobOutcome.success(self.result)


class FailingJob(Job):
    """Job that raises an unexpected error."""

    job_type = "failing"

    def run(self, inputs: Sequence[str], credential: str, context: JobContext) -> JobOutcome:
        raise RuntimeError("disk on fire")


class EchoJob(Job):
    """Job that succeeds with its first input."""

    job_type = "echo"

    def run(self, inputs: Sequence[str], credential: str, context: JobContext) -> JobOutcome:
        return JobOutcome.success(inputs[0] if inputs else None)


@pytest.fixture
def tracker() -> JobTracker:
    """Provide a fresh job tracker."""
    return JobTracker()


@pytest.fixture
def runner(tracker: JobTracker):
    """Provide a job runner with two workers, shut down after the test."""
    job_runner = JobRunner(tracker, max_workers=2)
    yield job_runner
    job_runner.shutdown(wait=True)


@pytest.fixture
def fake_drive() -> FakeDriveClient:
    """Provide an in-memory drive client."""
    return FakeDriveClient()


@pytest.fixture
def wait_for_terminal():
    """
    Provide a helper that polls a tracker until a job reaches a terminal state.

    Returns:
        Callable[[JobTracker, str, float], JobStatus]
    """

    def _wait(tracker: JobTracker, job_id: str, timeout: float = 5.0) -> JobStatus:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            status = tracker.get(job_id)
            if status.is_terminal:
                return status
            time.sleep(0.01)
        raise AssertionError(f"Job {job_id} did not finish within {timeout}s: {tracker.get(job_id)}")

    return _wait


@pytest.fixture
def expired_upload_error() -> ExpiredCredentialError:
    """Provide the error the drive client raises for a rejected token."""
    return ExpiredCredentialError("HTTP 401 Unauthorized from PUT https://x/upload", status_code=401)


@pytest.fixture
def item_url() -> str:
    return "https://x/drive/items/42"


@pytest.fixture
def make_gated_job():
    """Provide the GatedJob class so tests can build several gated jobs."""
    return GatedJob


@pytest.fixture
def gated_job() -> GatedJob:
    return GatedJob()


@pytest.fixture
def failing_job() -> FailingJob:
    return FailingJob()


@pytest.fixture
def echo_job() -> EchoJob:
    return EchoJob()
