"""Unit tests for the read/write lock and the OCM client holder."""

import asyncio

import pytest
from unittest.mock import AsyncMock, Mock

from addon_operator.ocm import OCMClient, OCMClientHolder
from addon_operator.utils.locks import ReadWriteLock


class TestReadWriteLock:
    @pytest.mark.asyncio
    async def test_readers_share_the_lock(self):
        lock = ReadWriteLock()
        async with lock.read():
            async with lock.read():
                assert lock.readers == 2
        assert lock.readers == 0

    @pytest.mark.asyncio
    async def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        events = []

        async def writer():
            async with lock.write():
                events.append("write")

        async with lock.read():
            task = asyncio.create_task(writer())
            await asyncio.sleep(0)
            assert events == []
            assert not lock.locked
        await task
        assert events == ["write"]

    @pytest.mark.asyncio
    async def test_waiting_writer_blocks_new_readers(self):
        lock = ReadWriteLock()
        events = []

        async def writer():
            async with lock.write():
                events.append("write")

        async def reader():
            async with lock.read():
                events.append("read")

        async with lock.read():
            w = asyncio.create_task(writer())
            await asyncio.sleep(0)
            r = asyncio.create_task(reader())
            await asyncio.sleep(0)
            assert events == []
        await asyncio.gather(w, r)
        assert events == ["write", "read"]

    @pytest.mark.asyncio
    async def test_cancelled_writer_releases_readers(self):
        lock = ReadWriteLock()

        async def writer():
            async with lock.write():
                pass

        async with lock.read():
            w = asyncio.create_task(writer())
            await asyncio.sleep(0)
            w.cancel()
            with pytest.raises(asyncio.CancelledError):
                await w

        async with lock.read():
            assert lock.readers == 1


class TestOCMClientHolder:
    @pytest.mark.asyncio
    async def test_empty_holder(self):
        holder = OCMClientHolder()
        assert not holder.configured
        async with holder.borrow() as client:
            assert client is None

    @pytest.mark.asyncio
    async def test_replace_returns_previous(self):
        first, second = Mock(spec=OCMClient), Mock(spec=OCMClient)
        holder = OCMClientHolder(first)

        assert await holder.replace(second) is first
        async with holder.borrow() as client:
            assert client is second

    @pytest.mark.asyncio
    async def test_replace_waits_for_borrowers(self):
        first, second = Mock(spec=OCMClient), Mock(spec=OCMClient)
        holder = OCMClientHolder(first)

        async with holder.borrow() as client:
            swap = asyncio.create_task(holder.replace(second))
            await asyncio.sleep(0)
            assert not swap.done()
            assert client is first
        assert await swap is first
        assert holder.configured

    @pytest.mark.asyncio
    async def test_close(self):
        client = Mock(spec=OCMClient)
        client.close = AsyncMock()
        holder = OCMClientHolder(client)

        await holder.close()

        client.close.assert_awaited_once()
        assert not holder.configured
