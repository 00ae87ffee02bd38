"""Unit tests for the update channel."""

import asyncio

import pytest

from barnine.errors import ChannelClosedError, ErrorCode
from barnine.updates import REDRAW, Redraw, Time, Volume, UpdateChannel


class TestUpdateChannel:
    """FIFO delivery and closing."""

    @pytest.mark.asyncio
    async def test_delivered_in_send_order(self, channel):
        updates = [Time("a"), Volume(1), REDRAW, Time("b")]
        for update in updates:
            channel.send(update)

        received = [await channel.recv() for _ in updates]
        assert received == updates

    @pytest.mark.asyncio
    async def test_send_with_redraw(self, channel):
        channel.send_with_redraw(Time("x"))
        assert await channel.recv() == Time("x")
        assert isinstance(await channel.recv(), Redraw)

    @pytest.mark.asyncio
    async def test_close_drains_queued_updates_first(self, channel):
        channel.send(Time("last"))
        channel.close()

        assert await channel.recv() == Time("last")
        assert await channel.recv() is None
        # Stays closed for later receivers
        assert await channel.recv() is None

    def test_send_after_close_raises(self, channel):
        channel.close()
        with pytest.raises(ChannelClosedError) as exc_info:
            channel.send(Time("late"))
        assert exc_info.value.code == ErrorCode.CHANNEL_CLOSED
        assert channel.closed

    def test_close_is_idempotent(self, channel):
        channel.close()
        channel.close()
        assert channel.qsize() == 0

    def test_qsize_counts_pending_updates(self, channel):
        channel.send_with_redraw(Volume(3))
        assert channel.qsize() == 2

    @pytest.mark.asyncio
    async def test_recv_waits_for_producer(self, channel):
        async def produce():
            await asyncio.sleep(0.01)
            channel.send(Time("later"))

        producer = asyncio.create_task(produce())
        assert await asyncio.wait_for(channel.recv(), timeout=1.0) == Time("later")
        await producer

    @pytest.mark.asyncio
    async def test_concurrent_producers_keep_per_producer_order(self, channel):
        async def produce(prefix):
            for i in range(5):
                channel.send(Time(f"{prefix}{i}"))
                await asyncio.sleep(0)

        await asyncio.gather(produce("a"), produce("b"))
        channel.close()

        received = []
        while (update := await channel.recv()) is not None:
            received.append(update.value)

        assert [v for v in received if v.startswith("a")] == [f"a{i}" for i in range(5)]
        assert [v for v in received if v.startswith("b")] == [f"b{i}" for i in range(5)]
