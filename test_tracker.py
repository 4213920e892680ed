#!/usr/bin/env python3
"""
Tests for the tracker of hrefs left unrewritten.
"""

import logging
import threading

from hrefshift.core.tracker import RewriteTracker


OLD = "http://x.com/a/index.html"
NEW = "http://x.com/b/index.html"


def test_tracker_records_bases_with_each_warning(caplog):
    tracker = RewriteTracker(OLD, NEW, logging.getLogger("hrefshift.test"))
    with caplog.at_level(logging.WARNING, logger="hrefshift"):
        warning_id = tracker.log_warning("http://[::1/x.png", ValueError("Invalid IPv6 URL"))

    assert warning_id.startswith("WARN_")
    assert warning_id.endswith("_000")
    assert f"[{warning_id}] Left href 'http://[::1/x.png' as is: ValueError: Invalid IPv6 URL" in caplog.text
    assert f"(Bases: {OLD} -> {NEW})" in caplog.text

    summary = tracker.get_summary()
    assert summary['total_warnings'] == 1
    assert summary['warning_types'] == {'ValueError': 1}
    recorded = summary['recent_warnings'][0]
    assert recorded['href'] == "http://[::1/x.png"
    assert recorded['old_base_url'] == OLD
    assert recorded['new_base_url'] == NEW
    assert recorded['message'] == "Invalid IPv6 URL"


def test_tracker_summary_keeps_last_five():
    tracker = RewriteTracker(OLD, NEW)
    for i in range(7):
        tracker.log_warning(f"bad{i}", ValueError("bad port"))

    summary = tracker.get_summary()
    assert summary['total_warnings'] == 7
    assert [w['href'] for w in summary['recent_warnings']] == [f"bad{i}" for i in range(2, 7)]


def test_tracker_ids_unique_across_threads():
    tracker = RewriteTracker(OLD, NEW)
    threads = [
        threading.Thread(target=tracker.log_warning, args=(f"h{i}", ValueError("x")))
        for i in range(20)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ids = [w.id for w in tracker.warnings]
    assert len(ids) == 20
    assert len({i.rsplit('_', 1)[1] for i in ids}) == 20


def test_tracker_empty_summary():
    summary = RewriteTracker(OLD, NEW).get_summary()
    assert summary['total_warnings'] == 0
    assert summary['warning_types'] == {}
    assert summary['recent_warnings'] == []


if __name__ == "__main__":
    test_tracker_summary_keeps_last_five()
    test_tracker_ids_unique_across_threads()
    test_tracker_empty_summary()
    print("✓ tracker tests passed")
