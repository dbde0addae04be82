"""Tests for pstore.publish.progress module."""

from __future__ import annotations

import io
import os

import pytest

from pstore.publish.progress import ProgressReader, SourceReader, format_bytes

from ._fakes import BrokenStream


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _reader(data: bytes, reports: list[tuple[int, int]], clock: _Clock) -> ProgressReader:
    return ProgressReader(
        io.BytesIO(data),
        total=len(data),
        report=lambda done, total: reports.append((done, total)),
        interval=3.0,
        clock=clock,
    )


class TestProgressReader:
    def test_forwards_bytes_unchanged(self) -> None:
        data = os.urandom(100)
        reader = _reader(data, [], _Clock())

        chunks = [reader.read(7) for _ in range(20)]

        assert b"".join(chunks) == data

    def test_reports_only_after_interval(self) -> None:
        reports: list[tuple[int, int]] = []
        clock = _Clock()
        reader = _reader(b"x" * 10, reports, clock)

        reader.read(2)
        clock.now = 1.0
        reader.read(2)
        assert reports == []

        clock.now = 3.5
        reader.read(2)
        assert reports == [(6, 10)]

        clock.now = 4.0
        reader.read(2)
        assert reports == [(6, 10)]

    def test_reports_completion_once(self) -> None:
        reports: list[tuple[int, int]] = []
        reader = _reader(b"abc", reports, _Clock())

        reader.read()
        reader.read()
        reader.read()

        assert reports == [(3, 3)]

    def test_rereading_after_seek_does_not_go_backwards(self) -> None:
        reports: list[tuple[int, int]] = []
        clock = _Clock()
        reader = _reader(b"x" * 10, reports, clock)

        reader.read(8)
        reader.seek(0)
        clock.now = 5.0
        reader.read(4)

        assert reader.transferred == 8
        assert reports == [(8, 10)]

    def test_seek_and_tell_pass_through(self) -> None:
        reader = _reader(b"0123456789", [], _Clock())

        assert reader.seek(0, os.SEEK_END) == 10
        assert reader.tell() == 10
        reader.seek(4)
        assert reader.read(2) == b"45"
        assert reader.seekable()
        assert reader.readable()

    def test_failing_callback_does_not_fail_transfer(self) -> None:
        calls: list[int] = []

        def report(done: int, total: int) -> None:
            calls.append(done)
            raise RuntimeError("terminal gone")

        clock = _Clock()
        reader = ProgressReader(io.BytesIO(b"x" * 10), total=10, report=report, clock=clock)

        clock.now = 10.0
        assert reader.read(5) == b"xxxxx"
        clock.now = 20.0
        assert reader.read(5) == b"xxxxx"

        assert calls == [5]

    def test_empty_stream_reports_zero(self) -> None:
        reports: list[tuple[int, int]] = []
        reader = _reader(b"", reports, _Clock())

        assert reader.read() == b""
        assert reports == [(0, 0)]


def test_format_bytes() -> None:
    assert format_bytes(512) == "512 B"
    assert format_bytes(2048) == "2.0 KB"
    assert format_bytes(5 * 1024 * 1024) == "5.0 MB"
    assert format_bytes(3 * 1024**4) == "3072.0 GB"


class TestSourceReader:
    def test_no_error_after_clean_read(self) -> None:
        reader = SourceReader(io.BytesIO(b"mapping"))

        assert reader.read() == b"mapping"
        assert reader.read_error is None

    def test_read_error_is_recorded_and_reraised(self) -> None:
        reader = SourceReader(BrokenStream(b"mapping"))

        with pytest.raises(OSError) as exc:
            reader.read(4)

        assert reader.read_error is exc.value
        assert reader.read_error.strerror == "Input/output error"

    def test_progress_reader_records_read_error(self) -> None:
        reader = ProgressReader(BrokenStream(b"bundle"), total=6, report=lambda done, total: None)

        with pytest.raises(OSError):
            reader.read()

        assert reader.read_error is not None
        assert reader.transferred == 0
