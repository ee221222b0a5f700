"""Tests for the progress stream."""

import asyncio
import json
import time

import pytest

from framework_eval.core.evaluation import (
    ChunkExecutor,
    ErrorEvent,
    ProgressStreamer,
    ProgressUpdate,
    ResultEvent,
    StreamState,
    compute_percent,
    encode_event,
)


def _make_streamer(provider, framework, content, **kwargs):
    return ProgressStreamer(
        framework,
        content,
        ChunkExecutor(provider),
        analysis_id=kwargs.pop("analysis_id", "analysis-1"),
        **kwargs,
    )


async def _collect(streamer):
    return [event async for event in streamer]


class TestComputePercent:
    def test_merge_counts_as_final_unit(self):
        assert compute_percent(0, 2) == 0
        assert compute_percent(1, 2) == 33
        assert compute_percent(2, 2) == 66
        assert compute_percent(0, 0) == 0

    @pytest.mark.parametrize("total", [1, 2, 3, 199, 200, 1000])
    def test_never_100_before_merge(self, total):
        assert compute_percent(total, total) < 100


class TestProgressStreamer:
    @pytest.mark.asyncio
    async def test_event_sequence(self, stub_provider_cls, value_framework, page_content):
        provider = stub_provider_cls({"emotional": {"elements": {"reduces_anxiety": {"score": 0.9}}}})
        streamer = _make_streamer(provider, value_framework, page_content)

        events = await _collect(streamer)

        statuses = [(e.category_key, e.status.value) for e in events if isinstance(e, ProgressUpdate)]
        assert statuses == [
            ("functional", "started"),
            ("functional", "completed"),
            ("emotional", "started"),
            ("emotional", "completed"),
        ]
        assert isinstance(events[-1], ResultEvent)
        assert streamer.state == StreamState.COMPLETED
        assert streamer.report is events[-1].report

    @pytest.mark.asyncio
    async def test_percent_monotonic_and_100_only_on_terminal(
        self, stub_provider_cls, value_framework, page_content
    ):
        streamer = _make_streamer(stub_provider_cls(), value_framework, page_content)

        events = await _collect(streamer)
        percents = [e.to_dict()["percent"] for e in events]

        assert percents == sorted(percents)
        assert percents[-1] == 100
        assert 100 not in percents[:-1]

    @pytest.mark.asyncio
    async def test_failed_chunk_reports_failed_status(self, stub_provider_cls, value_framework, page_content):
        from framework_eval.core.errors import ProviderUnavailableError

        provider = stub_provider_cls({"functional": ProviderUnavailableError("down")})
        streamer = _make_streamer(provider, value_framework, page_content)

        events = await _collect(streamer)

        assert events[1].status.value == "failed"
        report = events[-1].report
        assert report.errors == ["Functional: down"]
        assert report.chunks_completed == 1

    @pytest.mark.asyncio
    async def test_invalid_framework_yields_single_error_event(self, stub_provider_cls, page_content):
        framework = {
            "name": "Broken",
            "categories": [
                {"name": "A", "key": "dup", "elements": ["x"]},
                {"name": "B", "key": "dup", "elements": ["y"]},
            ],
        }
        provider = stub_provider_cls()
        streamer = _make_streamer(provider, framework, page_content)

        events = await _collect(streamer)

        assert len(events) == 1
        assert isinstance(events[0], ErrorEvent)
        assert "duplicate category key" in events[0].error
        assert streamer.state == StreamState.FAILED
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_aclose_after_first_event_stops_provider_calls(
        self, stub_provider_cls, value_framework, page_content
    ):
        provider = stub_provider_cls()
        streamer = _make_streamer(provider, value_framework, page_content)

        first = await streamer.__anext__()
        await streamer.aclose()

        assert first.status.value == "started"
        assert provider.calls == []
        assert streamer.state == StreamState.CANCELLED
        assert streamer.report is None


    @pytest.mark.asyncio
    async def test_aclose_from_another_task_mid_chunk(
        self, stub_provider_cls, value_framework, page_content
    ):
        entered = asyncio.Event()
        release = asyncio.Event()

        class BlockingProvider(stub_provider_cls):
            async def evaluate(self, prompt, meta):
                entered.set()
                await release.wait()
                return await super().evaluate(prompt, meta)

        provider = BlockingProvider()
        streamer = _make_streamer(provider, value_framework, page_content)

        async def consume():
            return [event async for event in streamer]

        consumer = asyncio.create_task(consume())
        await entered.wait()
        await streamer.aclose()
        release.set()
        events = await consumer

        assert len(events) == 1
        assert events[0].status.value == "started"
        assert len(provider.calls) == 1
        assert streamer.state == StreamState.CANCELLED
        assert streamer.report is None
    @pytest.mark.asyncio
    async def test_cancel_between_chunks_emits_no_terminal_event(
        self, stub_provider_cls, value_framework, page_content
    ):
        provider = stub_provider_cls()
        streamer = _make_streamer(provider, value_framework, page_content)

        events = []
        async for event in streamer:
            events.append(event)
            if isinstance(event, ProgressUpdate) and event.status.value == "completed":
                streamer.cancel()

        assert len(provider.calls) == 1
        assert not any(isinstance(e, (ResultEvent, ErrorEvent)) for e in events)
        assert streamer.state == StreamState.CANCELLED

    @pytest.mark.asyncio
    async def test_stream_is_single_use(self, stub_provider_cls, value_framework, page_content):
        streamer = _make_streamer(stub_provider_cls(), value_framework, page_content)
        await _collect(streamer)

        with pytest.raises(RuntimeError, match="only be iterated once"):
            await _collect(streamer)

    @pytest.mark.asyncio
    async def test_store_receives_report(self, stub_provider_cls, value_framework, page_content):
        stored = []

        class RecordingStore:
            def store(self, analysis_id, framework_name, report):
                stored.append((analysis_id, framework_name, report))

        streamer = _make_streamer(
            stub_provider_cls(), value_framework, page_content, store=RecordingStore()
        )
        await _collect(streamer)

        assert stored[0][0] == "analysis-1"
        assert stored[0][1] == "Mini Elements"
        assert stored[0][2] is streamer.report

    @pytest.mark.asyncio
    async def test_store_failure_does_not_alter_report(
        self, stub_provider_cls, value_framework, page_content
    ):
        class FailingStore:
            def store(self, analysis_id, framework_name, report):
                raise OSError("disk full")

        streamer = _make_streamer(
            stub_provider_cls(), value_framework, page_content, store=FailingStore()
        )
        events = await _collect(streamer)

        assert isinstance(events[-1], ResultEvent)
        assert streamer.state == StreamState.COMPLETED
        assert "errors" not in streamer.report.to_dict()

    @pytest.mark.asyncio
    async def test_slow_store_does_not_block_event_loop(
        self, stub_provider_cls, value_framework, page_content
    ):
        class SlowStore:
            def store(self, analysis_id, framework_name, report):
                time.sleep(0.5)

        gaps = []

        async def ticker(stop):
            last = time.monotonic()
            while not stop.is_set():
                await asyncio.sleep(0.02)
                now = time.monotonic()
                gaps.append(now - last)
                last = now

        stop = asyncio.Event()
        tick_task = asyncio.create_task(ticker(stop))
        streamer = _make_streamer(
            stub_provider_cls(), value_framework, page_content, store=SlowStore()
        )
        events = await _collect(streamer)
        stop.set()
        await tick_task

        assert isinstance(events[-1], ResultEvent)
        assert len(gaps) >= 5
        assert max(gaps) < 0.3


class TestEncodeEvent:
    @pytest.mark.asyncio
    async def test_ndjson_lines(self, stub_provider_cls, value_framework, page_content):
        streamer = _make_streamer(stub_provider_cls(), value_framework, page_content)

        lines = [encode_event(e) async for e in streamer]

        assert all(line.endswith("\n") and line.count("\n") == 1 for line in lines)
        decoded = [json.loads(line) for line in lines]
        assert decoded[0]["type"] == "progress"
        assert decoded[0]["categoryName"] == "Functional"
        assert decoded[-1]["type"] == "result"
        assert decoded[-1]["percent"] == 100
        assert decoded[-1]["data"]["analysisId"] == "analysis-1"
