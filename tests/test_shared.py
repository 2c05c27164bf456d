import asyncio

import pytest

from dmnd_proxy.shared import AbortOnDrop, UserId, sv1_rolling


@pytest.mark.asyncio
async def test_abort_cancels_running_task():
    task = asyncio.create_task(asyncio.sleep(10))
    handle = AbortOnDrop(task)
    assert handle.is_finished() is False
    handle.abort()
    await asyncio.sleep(0)
    assert handle.is_finished() is True
    assert task.cancelled() is True


@pytest.mark.asyncio
async def test_context_manager_aborts_on_exit():
    task = asyncio.create_task(asyncio.sleep(10))
    with AbortOnDrop(task) as handle:
        assert handle.is_finished() is False
    await asyncio.sleep(0)
    assert task.cancelled() is True


@pytest.mark.asyncio
async def test_finished_task_reports_finished_and_keeps_result():
    async def work():
        return 7

    task = asyncio.create_task(work())
    handle = AbortOnDrop(task)
    await task
    assert handle.is_finished() is True
    handle.abort()
    assert task.result() == 7


@pytest.mark.asyncio
async def test_context_manager_does_not_swallow_exceptions():
    task = asyncio.create_task(asyncio.sleep(10))
    with pytest.raises(KeyError):
        with AbortOnDrop(task):
            raise KeyError("boom")
    await asyncio.sleep(0)
    assert task.cancelled() is True


def test_user_id_display():
    assert str(UserId(42)) == "42"
    assert str(UserId(-3)) == "-3"
    assert UserId(5) == UserId(5)


def test_sv1_rolling_masks_requested_bits():
    assert sv1_rolling(0xFFFFFFFF, 2) == (0x1FFFE000, 2)


def test_sv1_rolling_defaults_to_zero():
    assert sv1_rolling(None, None) == (0, 0)


def test_sv1_rolling_mask_is_subset_of_request():
    for requested in (0x0, 0x1FFFE000, 0x00002000, 0xE0001FFF, 0x12345678):
        mask, _ = sv1_rolling(requested, None)
        assert mask & ~requested == 0
        assert mask & ~0x1FFFE000 == 0