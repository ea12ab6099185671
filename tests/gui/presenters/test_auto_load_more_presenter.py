"""Tests for AutoLoadMorePresenter.

Canary tests for:
- has_more bookkeeping against the declared total and empty pages
- Single-flight fetching under repeated proximity signals
- Failure, retry and the trailing slot contract
- Stale page results after initialize() and dispose()
"""

import pytest

from loadview.gui.presenters.auto_load_more_presenter import (
    AutoLoadMorePresenter,
    ListSlot,
    ListState,
    PageFailure,
    SlotKind,
)
from loadview.settings import DEFAULT_PROXIMITY_THRESHOLD


def make_items(start: int, count: int) -> list[str]:
    return [f"item {i}" for i in range(start, start + count)]


@pytest.fixture
def presenter(page_fetch):
    return AutoLoadMorePresenter(page_fetch, total_count=25, initial_items=make_items(0, 10), name="test list")


class TestInitialState:
    def test_has_more_when_below_total(self, presenter):
        assert presenter.has_more
        assert not presenter.error
        assert presenter.in_flight is None
        assert presenter.state == ListState.IDLE

    def test_exhausted_when_initial_items_cover_total(self, page_fetch):
        presenter = AutoLoadMorePresenter(page_fetch, total_count=3, initial_items=make_items(0, 3))

        assert not presenter.has_more
        assert presenter.state == ListState.EXHAUSTED
        assert presenter.item_count == 3

    def test_default_threshold(self, presenter):
        assert presenter.proximity_threshold == DEFAULT_PROXIMITY_THRESHOLD == 500

    def test_rejects_negative_total(self, page_fetch):
        with pytest.raises(ValueError):
            AutoLoadMorePresenter(page_fetch, total_count=-1)

    def test_rejects_non_positive_threshold(self, page_fetch):
        with pytest.raises(ValueError):
            AutoLoadMorePresenter(page_fetch, total_count=10, proximity_threshold=0)


class TestPaging:
    def test_pages_until_total_reached(self, presenter, page_fetch):
        presenter.on_proximity_signal()
        assert page_fetch.calls == [10]
        page_fetch.last._emit_completed(make_items(10, 10))

        assert len(presenter.items) == 20
        assert presenter.has_more

        presenter.on_proximity_signal()
        assert page_fetch.calls == [10, 20]
        page_fetch.last._emit_completed(make_items(20, 5))

        assert len(presenter.items) == 25
        assert not presenter.has_more
        assert presenter.state == ListState.EXHAUSTED

    def test_items_keep_insertion_order(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_completed(make_items(10, 3))

        assert presenter.items == tuple(make_items(0, 13))

    def test_exhausted_list_never_fetches(self, page_fetch):
        presenter = AutoLoadMorePresenter(page_fetch, total_count=2, initial_items=make_items(0, 2))

        presenter.on_proximity_signal()

        assert page_fetch.calls == []

    def test_empty_page_ends_list_below_total(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_completed([])

        assert len(presenter.items) < presenter.total_count
        assert not presenter.has_more
        assert presenter.trailing_slot is None

        presenter.on_proximity_signal()
        assert page_fetch.calls == [10]

    def test_items_appended_signal(self, presenter, page_fetch):
        appended = []
        presenter.items_appended.connect(lambda start, count: appended.append((start, count)))
        presenter.try_fetch()
        page_fetch.last._emit_completed(make_items(10, 4))

        assert appended == [(10, 4)]

    def test_page_returned_synchronously(self, presenter, page_fetch):
        def instant_fetch(loaded_count):
            handle = page_fetch(loaded_count)
            handle._emit_completed(make_items(loaded_count, 2))
            return handle

        presenter._load_more = instant_fetch
        assert presenter.try_fetch()

        assert len(presenter.items) == 12
        assert presenter.in_flight is None


class TestSingleFlight:
    def test_repeated_signals_issue_one_fetch(self, presenter, page_fetch):
        for _ in range(5):
            presenter.on_proximity_signal()

        assert page_fetch.calls == [10]
        assert presenter.state == ListState.FETCHING

    def test_next_fetch_allowed_after_settle(self, presenter, page_fetch):
        presenter.on_proximity_signal()
        presenter.on_proximity_signal()
        page_fetch.last._emit_completed(make_items(10, 5))
        presenter.on_proximity_signal()

        assert page_fetch.calls == [10, 15]

    def test_try_fetch_reports_whether_issued(self, presenter):
        assert presenter.try_fetch() is True
        assert presenter.try_fetch() is False


class TestScrollProximity:
    def test_far_from_end_does_not_fetch(self, presenter, page_fetch):
        presenter.on_scroll(600)

        assert page_fetch.calls == []

    def test_within_threshold_fetches(self, presenter, page_fetch):
        presenter.on_scroll(499)

        assert page_fetch.calls == [10]

    def test_custom_threshold(self, page_fetch):
        presenter = AutoLoadMorePresenter(
            page_fetch, total_count=50, initial_items=make_items(0, 10), proximity_threshold=100
        )

        presenter.on_scroll(150)
        assert page_fetch.calls == []

        presenter.on_scroll(50)
        assert page_fetch.calls == [10]


class TestFailureAndRetry:
    def test_none_result_sets_error(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_completed(None)

        assert presenter.error
        assert presenter.last_failure == PageFailure.NO_DATA
        assert len(presenter.items) == 10
        assert presenter.in_flight is None
        assert presenter.state == ListState.FAILED

    @pytest.mark.parametrize("page", ["abc", 5, {"item": 1}])
    def test_non_list_page_sets_error(self, presenter, page_fetch, page):
        presenter.try_fetch()
        page_fetch.last._emit_completed(page)

        assert presenter.error
        assert presenter.last_failure == PageFailure.NO_DATA
        assert presenter.items == tuple(make_items(0, 10))
        assert presenter.in_flight is None

    def test_tuple_page_is_accepted(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_completed(tuple(make_items(10, 2)))

        assert len(presenter.items) == 12
        assert not presenter.error

    def test_raised_fetch_sets_error(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_failed("ConnectionError", "network down")

        assert presenter.error
        assert presenter.last_failure == PageFailure.RAISED
        assert presenter.error_message == "network down"
        assert presenter.in_flight is None

    def test_fetch_function_raising_sets_error(self, qapp):
        def broken_fetch(loaded_count):
            raise RuntimeError("no session")

        presenter = AutoLoadMorePresenter(broken_fetch, total_count=5)

        assert presenter.try_fetch() is False
        assert presenter.error
        assert presenter.last_failure == PageFailure.RAISED

    def test_proximity_ignored_while_failed(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_completed(None)
        presenter.on_proximity_signal()

        assert page_fetch.calls == [10]

    def test_retry_recovers(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_completed(None)

        assert presenter.retry() is True
        assert not presenter.error
        assert page_fetch.calls == [10, 10]

        page_fetch.last._emit_completed(make_items(10, 3))

        assert len(presenter.items) == 13
        assert not presenter.error

    def test_retry_without_error_is_noop(self, presenter, page_fetch):
        assert presenter.retry() is False
        assert page_fetch.calls == []

    def test_fetch_failed_signal(self, presenter, page_fetch):
        messages = []
        presenter.fetch_failed.connect(lambda message: messages.append(message))
        presenter.try_fetch()
        page_fetch.last._emit_failed("TimeoutError", "timed out")

        assert messages == ["timed out"]

    def test_external_cancel_clears_in_flight_without_error(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_cancelled()

        assert presenter.in_flight is None
        assert not presenter.error
        assert presenter.state == ListState.IDLE


class TestSlots:
    def test_item_and_loading_slots(self, presenter):
        assert presenter.item_count == 11
        assert presenter.slot_at(0) == ListSlot(SlotKind.ITEM, "item 0")
        assert presenter.slot_at(10) == ListSlot(SlotKind.LOADING_MORE)

    def test_retry_slot_after_failure(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_completed(None)

        assert presenter.trailing_slot == SlotKind.RETRY
        assert presenter.slot_at(10).kind == SlotKind.RETRY

    def test_no_trailing_slot_when_exhausted(self, page_fetch):
        presenter = AutoLoadMorePresenter(page_fetch, total_count=2, initial_items=make_items(0, 2))

        assert presenter.item_count == 2
        with pytest.raises(IndexError):
            presenter.slot_at(2)

    @pytest.mark.parametrize("index", [-1, 11, 100])
    def test_out_of_range_index_raises(self, presenter, index):
        with pytest.raises(IndexError):
            presenter.slot_at(index)


class TestLifecycle:
    def test_initialize_drops_in_flight_page(self, presenter, page_fetch):
        presenter.try_fetch()
        stale = page_fetch.last
        presenter.initialize(make_items(100, 2), total_count=8)

        assert stale.token.is_cancelled
        stale._emit_completed(make_items(10, 10))

        assert presenter.items == tuple(make_items(100, 2))
        assert presenter.in_flight is None
        assert presenter.has_more

    def test_initialize_clears_error_and_end_of_data(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_completed([])
        presenter.initialize(make_items(0, 1), total_count=4)

        assert presenter.has_more
        assert not presenter.error

    def test_dispose_cancels_and_ignores_late_page(self, presenter, page_fetch):
        presenter.try_fetch()
        presenter.dispose()
        page_fetch.last._emit_completed(make_items(10, 5))

        assert page_fetch.last.token.is_cancelled
        assert len(presenter.items) == 10

    def test_no_fetch_after_dispose(self, presenter, page_fetch):
        presenter.dispose()
        presenter.on_proximity_signal()

        assert page_fetch.calls == []

    def test_retry_after_dispose_is_ignored(self, presenter, page_fetch):
        presenter.try_fetch()
        page_fetch.last._emit_completed(None)
        presenter.dispose()
        states = []
        presenter.state_changed.connect(lambda state: states.append(state))

        assert presenter.retry() is False
        assert presenter.error
        assert page_fetch.calls == [10]
        assert states == []

    def test_initialize_after_dispose_is_ignored(self, presenter, page_fetch):
        presenter.dispose()
        signals = []
        presenter.state_changed.connect(lambda state: signals.append(state))
        presenter.items_reset.connect(lambda: signals.append("reset"))

        presenter.initialize([1], total_count=3)

        assert presenter.items == tuple(make_items(0, 10))
        assert presenter.total_count == 25
        assert signals == []
