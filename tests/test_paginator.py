"""
Test Pagination Driver - page walking, pacing, retries and deadlines
with scripted fetchers and a fake clock
"""

import pytest

from stackoverflow_tags.coreutils.config import PaginationConfig
from stackoverflow_tags.extract.errors import DecodeError, StatusError, TransportError
from stackoverflow_tags.extract.models import Tag, TagPage
from stackoverflow_tags.extract.paginator import (
    ABORT_DEADLINE,
    ABORT_NON_RETRYABLE,
    ABORT_RETRIES_EXHAUSTED,
    Outcome,
    TagPaginator,
)


class FakeClock:
    """Monotonic clock that only moves when sleep() is called"""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedFetcher:
    """Returns or raises the scripted outcome for each page, in order"""

    def __init__(self, script, clock=None):
        self.script = {page: list(outcomes) for page, outcomes in script.items()}
        self.clock = clock
        self.calls = []

    def __call__(self, page, timeout=None):
        self.calls.append((page, self.clock() if self.clock else None, timeout))
        outcome = self.script[page].pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def pages_requested(self):
        return [page for page, _, _ in self.calls]


def tags(*names):
    return tuple(Tag(name, count=1) for name in names)


def page_of(names, has_more):
    return TagPage(items=tags(*names), has_more=has_more, quota_max=300, quota_remaining=250)


def make_paginator(fetcher, clock, **config):
    return TagPaginator(fetcher, PaginationConfig(**config), sleep=clock.sleep, clock=clock)


def test_two_pages_concatenated_in_order():
    clock = FakeClock()
    fetcher = ScriptedFetcher(
        {1: [page_of(["A", "B"], True)], 2: [page_of(["C"], False)]}, clock
    )

    result = make_paginator(fetcher, clock, request_delay=3).run()

    assert result.outcome is Outcome.DONE
    assert result.complete
    assert [t.name for t in result.tags] == ["A", "B", "C"]
    assert result.requests_issued == 2
    assert result.pages_fetched == 2
    assert result.quota_remaining == 250
    assert clock.sleeps == [3]


def test_many_pages_keep_duplicates_and_order():
    clock = FakeClock()
    script = {
        1: [page_of(["a", "b"], True)],
        2: [page_of(["c"], True)],
        3: [page_of(["b", "d", "e"], True)],
        4: [page_of([], False)],
    }
    fetcher = ScriptedFetcher(script, clock)

    result = make_paginator(fetcher, clock, request_delay=1).run()

    assert [t.name for t in result.tags] == ["a", "b", "c", "b", "d", "e"]
    assert fetcher.pages_requested == [1, 2, 3, 4]
    assert len(clock.sleeps) == 3


def test_no_request_after_last_page():
    clock = FakeClock()
    fetcher = ScriptedFetcher({1: [page_of(["only"], False)]}, clock)

    result = make_paginator(fetcher, clock).run()

    assert fetcher.pages_requested == [1]
    assert result.complete
    assert clock.sleeps == []


def test_delay_elapses_between_consecutive_requests():
    clock = FakeClock()
    script = {
        1: [page_of(["a"], True)],
        2: [page_of(["b"], True)],
        3: [page_of(["c"], False)],
    }
    fetcher = ScriptedFetcher(script, clock)

    make_paginator(fetcher, clock, request_delay=60).run()

    times = [at for _, at, _ in fetcher.calls]
    assert all(later - earlier >= 60 for earlier, later in zip(times, times[1:]))


def test_transient_failures_recover_to_same_result():
    clock = FakeClock()
    script = {
        1: [page_of(["A", "B"], True)],
        2: [TransportError("refused"), StatusError(503), page_of(["C"], False)],
    }
    fetcher = ScriptedFetcher(script, clock)

    result = make_paginator(fetcher, clock, max_attempts=3, request_delay=3).run()

    assert result.complete
    assert [t.name for t in result.tags] == ["A", "B", "C"]
    assert fetcher.pages_requested == [1, 2, 2, 2]
    assert result.requests_issued == 4


def test_backoff_between_failed_attempts():
    clock = FakeClock()
    script = {1: [StatusError(500), StatusError(500), page_of(["x"], False)]}
    fetcher = ScriptedFetcher(script, clock)

    make_paginator(fetcher, clock, retry_delay=0.5, max_retry_delay=10).run()

    assert clock.sleeps == [0.5, 1.0]


def test_exhausted_budget_keeps_earlier_pages():
    clock = FakeClock()
    script = {
        1: [page_of(["A"], True)],
        2: [page_of(["B"], True)],
        3: [StatusError(500)] * 4,
    }
    fetcher = ScriptedFetcher(script, clock)

    result = make_paginator(fetcher, clock, max_attempts=4).run()

    assert result.outcome is Outcome.ABORTED
    assert not result.complete
    assert result.abort_reason == ABORT_RETRIES_EXHAUSTED
    assert [t.name for t in result.tags] == ["A", "B"]
    assert fetcher.pages_requested == [1, 2, 3, 3, 3, 3]
    assert isinstance(result.last_error, StatusError)


def test_every_request_failing_returns_empty_aborted():
    clock = FakeClock()
    fetcher = ScriptedFetcher({1: [StatusError(500)] * 5}, clock)

    result = make_paginator(fetcher, clock, max_attempts=5).run()

    assert result.tags == []
    assert result.outcome is Outcome.ABORTED
    assert result.requests_issued == 5
    assert result.pages_fetched == 0


def test_decode_errors_consume_budget_by_default():
    clock = FakeClock()
    fetcher = ScriptedFetcher(
        {1: [DecodeError("garbled"), page_of(["ok"], False)]}, clock
    )

    result = make_paginator(fetcher, clock, max_attempts=2).run()

    assert result.complete
    assert result.requests_issued == 2


def test_decode_error_aborts_when_not_retried():
    clock = FakeClock()
    fetcher = ScriptedFetcher({1: [DecodeError("garbled"), page_of(["ok"], False)]}, clock)

    result = make_paginator(fetcher, clock, retry_decode_errors=False).run()

    assert result.tags == []
    assert result.abort_reason == ABORT_NON_RETRYABLE
    assert result.requests_issued == 1


def test_deadline_during_delay_aborts_with_partial_tags():
    clock = FakeClock()
    script = {1: [page_of(["A"], True)], 2: [page_of(["B"], False)]}
    fetcher = ScriptedFetcher(script, clock)

    result = make_paginator(fetcher, clock, request_delay=60).run(deadline=10)

    assert result.abort_reason == ABORT_DEADLINE
    assert [t.name for t in result.tags] == ["A"]
    assert fetcher.pages_requested == [1]
    assert clock.sleeps == [10]


def test_deadline_already_passed_issues_no_request():
    clock = FakeClock()
    clock.now = 100
    fetcher = ScriptedFetcher({1: [page_of(["A"], False)]}, clock)

    result = make_paginator(fetcher, clock).run(deadline=50)

    assert result.tags == []
    assert result.abort_reason == ABORT_DEADLINE
    assert fetcher.calls == []


def test_request_timeout_bounded_by_deadline():
    clock = FakeClock()
    fetcher = ScriptedFetcher({1: [page_of(["A"], False)]}, clock)

    make_paginator(fetcher, clock).run(deadline=12.5)

    assert fetcher.calls[0][2] == 12.5


def test_invalid_retry_budget_rejected():
    with pytest.raises(ValueError):
        PaginationConfig(max_attempts=0)
