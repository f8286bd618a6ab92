"""Tests for fail-soft batch processing."""

import pytest

from graph_commands.batch import run_batch
from graph_commands.errors import (
    AmbiguousMimeTypeError,
    MissingTargetError,
    NotFoundError,
    ParameterError,
    TransportError,
    UnresolvableTargetError,
)


def _process(item):
    if isinstance(item, Exception):
        raise item
    return item


class TestRunBatch:
    def test_keeps_input_order_and_flattens_lists(self):
        report = run_batch(["a", ["b", "c"], None, "d"], _process)
        assert report.results == ["a", "b", "c", "d"]
        assert report.ok

    @pytest.mark.parametrize(
        "error",
        [
            UnresolvableTargetError("bad"),
            AmbiguousMimeTypeError("?"),
            MissingTargetError("empty item"),
        ],
    )
    def test_warnings_skip_only_that_item(self, error):
        report = run_batch(["a", error, "b"], _process)
        assert report.results == ["a", "b"]
        assert report.warnings == [error]
        assert report.ok

    def test_transport_errors_are_recorded_and_batch_continues(self):
        error = TransportError("boom", status=500)
        report = run_batch([error, "a"], _process)
        assert report.results == ["a"]
        assert report.errors == [error]
        assert not report.ok

    def test_not_found_is_an_error(self):
        error = NotFoundError("https://x/1")
        report = run_batch([error, "a"], _process)
        assert report.results == ["a"]
        assert report.errors == [error]
        assert report.warnings == []
        assert not report.ok

    def test_parameter_error_aborts(self):
        calls = []

        def func(item):
            calls.append(item)
            raise ParameterError("conflict")

        with pytest.raises(ParameterError):
            run_batch(["a", "b"], func)
        assert calls == ["a"]

    def test_no_items_at_all_is_fatal(self):
        with pytest.raises(MissingTargetError):
            run_batch([], _process, label="section")

    def test_unexpected_errors_propagate(self):
        with pytest.raises(ZeroDivisionError):
            run_batch([1], lambda item: item / 0)
