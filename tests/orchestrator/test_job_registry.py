import time

from conftest import BlockingReputation

from linkguard.orchestrator.jobs import JobRegistry, new_tracking_id


def _wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_tracking_ids_are_prefixed_and_unique():
    ids = {new_tracking_id() for _ in range(100)}
    assert len(ids) == 100
    assert all(item.startswith("track_") for item in ids)


def test_submit_poll_round_trip(make_url_analyzer):
    reputation = BlockingReputation()
    registry = JobRegistry(make_url_analyzer(reputation=reputation), max_workers=2)
    try:
        tracking_id = registry.submit("https://example.com/")
        assert reputation.started.wait(5)
        assert registry.poll(tracking_id).status == "pending"
        assert registry.pending_count() == 1

        reputation.release.set()
        assert _wait_for(lambda: registry._jobs[tracking_id].future.done())
        done = registry.poll(tracking_id)
        assert done.status == "done"
        assert done.result is not None
        assert done.result.url == "https://example.com/"
        assert done.result.overall_safe is True

        assert registry.poll(tracking_id).status == "missing"
        assert registry.pending_count() == 0
    finally:
        reputation.release.set()
        registry.shutdown(wait=True)


def test_unknown_id_is_missing(make_url_analyzer):
    registry = JobRegistry(make_url_analyzer())
    try:
        poll = registry.poll("track_unknown")
        assert poll.status == "missing"
        assert poll.result is None
        assert registry.cancel("track_unknown") is False
    finally:
        registry.shutdown()


def test_cancel_stops_reputation_poll(make_url_analyzer):
    reputation = BlockingReputation()
    registry = JobRegistry(make_url_analyzer(reputation=reputation), max_workers=2)
    try:
        tracking_id = registry.submit("https://example.com/")
        assert reputation.started.wait(5)
        assert registry.cancel(tracking_id) is True
        assert reputation.cancelled.wait(5)
        assert registry.poll(tracking_id).status == "missing"
    finally:
        reputation.release.set()
        registry.shutdown(wait=True)


def test_background_failure_surfaces_as_done(make_url_analyzer):
    class ExplodingAnalyzer:
        def analyze(self, url, cancel_event=None):
            raise RuntimeError("worker died")

    registry = JobRegistry(ExplodingAnalyzer(), max_workers=1)
    try:
        tracking_id = registry.submit("https://example.com/")
        assert _wait_for(lambda: registry._jobs[tracking_id].future.done())
        poll = registry.poll(tracking_id)
        assert poll.status == "done"
        assert poll.result.overall_safe is False
        assert "worker died" in poll.result.additional_info["error"]
    finally:
        registry.shutdown()
