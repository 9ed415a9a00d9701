"""
Test suite for JobTracker and JobStatus transitions.

System role: Verification of the job status registry
"""

import threading

import pytest

from markdown_file_handler.core.exceptions import (
    DuplicateJobIdError,
    ErrorKind,
    InvalidTransitionError,
    JobActiveError,
    JobNotFoundError,
)
from markdown_file_handler.core.job_tracker import JobTracker
from markdown_file_handler.models.job import JobState, JobStatus


class TestJobTrackerRegister:
    """Test suite for JobTracker.register."""

    def test_register_should_create_pending_status(self, tracker: JobTracker) -> None:
        status = tracker.register("job-1", "pdf_conversion", {"items": '["u"]'})

        assert status.state is JobState.PENDING
        assert status.job_type == "pdf_conversion"
        assert status.original_parameters == {"items": '["u"]'}
        assert status.result is None and status.error is None
        assert "job-1" in tracker
        assert len(tracker) == 1

    def test_register_should_reject_duplicate_id(self, tracker: JobTracker) -> None:
        tracker.register("job-1", "pdf_conversion")

        with pytest.raises(DuplicateJobIdError) as exc_info:
            tracker.register("job-1", "zip_compression")

        assert exc_info.value.kind is ErrorKind.DUPLICATE_ID
        assert tracker.get("job-1").job_type == "pdf_conversion"

    def test_register_should_copy_parameters(self, tracker: JobTracker) -> None:
        params = {"fileName": "a.md"}
        tracker.register("job-1", "pdf_conversion", params)
        params["fileName"] = "changed.md"

        assert tracker.get("job-1").original_parameters == {"fileName": "a.md"}


class TestJobTrackerGet:
    """Test suite for JobTracker.get."""

    @pytest.mark.parametrize("job_id", ["", "garbage", "0" * 32])
    def test_get_should_raise_not_found_for_unknown_id(self, tracker: JobTracker, job_id: str) -> None:
        with pytest.raises(JobNotFoundError) as exc_info:
            tracker.get(job_id)

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    def test_get_should_return_isolated_snapshot(self, tracker: JobTracker) -> None:
        tracker.register("job-1", "echo", {"a": "1"})

        snapshot = tracker.get("job-1")
        snapshot.original_parameters["a"] = "tampered"

        assert tracker.get("job-1").original_parameters == {"a": "1"}


class TestJobTrackerUpdate:
    """Test suite for JobTracker.update and status transitions."""

    def test_update_should_apply_full_success_lifecycle(self, tracker: JobTracker) -> None:
        tracker.register("job-1", "echo")

        tracker.update("job-1", lambda s: s.mark_running())
        tracker.update("job-1", lambda s: s.with_progress("halfway"))
        final = tracker.update("job-1", lambda s: s.mark_succeeded("https://x/out.pdf"))

        assert final.state is JobState.SUCCEEDED
        assert final.result == "https://x/out.pdf"
        assert final.progress_message == "halfway"
        assert final.error is None and final.error_kind is None
        assert final.started_at is not None and final.finished_at is not None

    def test_update_should_record_failure(self, tracker: JobTracker) -> None:
        tracker.register("job-1", "echo")
        tracker.update("job-1", lambda s: s.mark_running())

        final = tracker.update("job-1", lambda s: s.mark_failed(ErrorKind.TRANSFER, "HTTP 500"))

        assert final.state is JobState.FAILED
        assert final.error == "HTTP 500"
        assert final.error_kind is ErrorKind.TRANSFER
        assert final.result is None

    def test_update_should_raise_not_found_for_unknown_id(self, tracker: JobTracker) -> None:
        with pytest.raises(JobNotFoundError):
            tracker.update("missing", lambda s: s.mark_running())

    @pytest.mark.parametrize(
        "mutator",
        [
            lambda s: s.mark_running(),
            lambda s: s.with_progress("late"),
            lambda s: s.mark_succeeded("again"),
            lambda s: s.mark_failed(ErrorKind.UNKNOWN_JOB, "late failure"),
        ],
    )
    def test_update_should_reject_transitions_out_of_terminal_state(
        self, tracker: JobTracker, mutator
    ) -> None:
        tracker.register("job-1", "echo")
        tracker.update("job-1", lambda s: s.mark_running())
        tracker.update("job-1", lambda s: s.mark_succeeded("first"))

        with pytest.raises(InvalidTransitionError):
            tracker.update("job-1", mutator)

        status = tracker.get("job-1")
        assert status.state is JobState.SUCCEEDED
        assert status.result == "first"

    def test_update_should_reject_success_before_running(self, tracker: JobTracker) -> None:
        tracker.register("job-1", "echo")

        with pytest.raises(InvalidTransitionError):
            tracker.update("job-1", lambda s: s.mark_succeeded("too early"))

        assert tracker.get("job-1").state is JobState.PENDING

    def test_update_should_serialize_concurrent_writers(self, tracker: JobTracker) -> None:
        tracker.register("job-1", "echo")
        tracker.update("job-1", lambda s: s.mark_running())
        barrier = threading.Barrier(8)
        outcomes: list[str] = []
        lock = threading.Lock()

        def finish(index: int) -> None:
            barrier.wait()
            try:
                tracker.update("job-1", lambda s: s.mark_succeeded(f"writer-{index}"))
                result = "won"
            except InvalidTransitionError:
                result = "lost"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=finish, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count("won") == 1
        assert outcomes.count("lost") == 7


class TestJobTrackerRemove:
    """Test suite for JobTracker.remove."""

    def test_remove_should_drop_terminal_job(self, tracker: JobTracker) -> None:
        tracker.register("job-1", "echo")
        tracker.update("job-1", lambda s: s.mark_failed(ErrorKind.CANCELLED, "cancelled"))

        removed = tracker.remove("job-1")

        assert removed.state is JobState.FAILED
        assert "job-1" not in tracker
        with pytest.raises(JobNotFoundError):
            tracker.get("job-1")

    def test_remove_should_refuse_active_job(self, tracker: JobTracker) -> None:
        tracker.register("job-1", "echo")

        with pytest.raises(JobActiveError):
            tracker.remove("job-1")

        assert "job-1" in tracker

    def test_remove_should_raise_not_found_for_unknown_id(self, tracker: JobTracker) -> None:
        with pytest.raises(JobNotFoundError):
            tracker.remove("missing")


class TestJobStatusValidation:
    """Test suite for JobStatus invariants."""

    def test_status_should_reject_result_on_failed_job(self) -> None:
        with pytest.raises(ValueError):
            JobStatus(
                job_id="j",
                job_type="echo",
                state=JobState.FAILED,
                result="x",
                error="boom",
                error_kind=ErrorKind.UNKNOWN_JOB,
            )

    def test_status_should_require_error_on_failed_job(self) -> None:
        with pytest.raises(ValueError):
            JobStatus(job_id="j", job_type="echo", state=JobState.FAILED)

    def test_mark_failed_should_default_empty_message_to_kind(self) -> None:
        status = JobStatus(job_id="j", job_type="echo").mark_failed(ErrorKind.AUTH, "")

        assert status.error == "auth"

    def test_mark_succeeded_should_validate_result_type(self) -> None:
        running = JobStatus(job_id="j", job_type="echo").mark_running()

        with pytest.raises(ValueError):
            running.mark_succeeded(42)  # type: ignore[arg-type]

    def test_mark_succeeded_should_keep_string_result(self) -> None:
        status = JobStatus(job_id="j", job_type="echo").mark_running().mark_succeeded("done")

        assert status.state is JobState.SUCCEEDED
        assert status.result == "done"
        assert status.finished_at is not None
