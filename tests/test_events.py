"""Tests for the event emitter."""
import pytest

from r2uploader.utils.events import EventEmitter


class TestEventEmitter:
    @pytest.mark.asyncio
    async def test_sync_and_async_listeners_in_order(self):
        emitter = EventEmitter()
        calls = []

        async def second(value):
            calls.append(("async", value))

        emitter.on("file_complete", lambda value: calls.append(("sync", value)))
        emitter.on("file_complete", second)
        await emitter.emit("file_complete", 1)

        assert calls == [("sync", 1), ("async", 1)]

    @pytest.mark.asyncio
    async def test_off_and_duplicates(self):
        emitter = EventEmitter()
        calls = []
        listener = calls.append

        emitter.on("skip", listener)
        emitter.on("skip", listener)
        await emitter.emit("skip", "a")
        emitter.off("skip", listener)
        await emitter.emit("skip", "b")
        await emitter.emit("unknown", "c")

        assert calls == ["a"]
