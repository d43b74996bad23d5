from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Sequence

from common.config.config import Config
from common.utils.json_logger import log_msg
from .api import BlockWindow, EthBlockModel, SystemStats
from .errors import ConnectivityError, RetrievalError
from .node_provider import NodeProvider

_LOG = logging.getLogger(__name__)


class StatsAggregator:
    def __init__(self, cfg: Config, provider: NodeProvider) -> None:
        self._cfg = cfg
        self._provider = provider

    async def get_system_stats(
        self,
        existing_window: BlockWindow | Sequence[EthBlockModel] | None = None,
        *,
        cached_window: BlockWindow | None = None,
    ) -> SystemStats:
        """Collects the network statistics.

        The node connection is checked first, then peer count, gas price and
        (when no window is passed) the recent blocks are requested in parallel.
        Any failure fails the whole call.

        The blocks of cached_window are reused, only the blocks it misses are requested.
        """
        if not await self._provider.is_connected():
            raise ConnectivityError()

        if existing_window is not None:
            window_req = _existing_window(BlockWindow.from_raw(existing_window))
        else:
            window_req = self._get_block_window(cached_window)

        try:
            peer_cnt, gas_price, window = await self._wait_all(
                "system stats",
                self._provider.get_peer_count(),
                self._provider.get_gas_price(),
                window_req,
            )
        except RetrievalError as exc:
            _LOG.warning(log_msg("abort the system stats: {Error}", Error=str(exc)))
            raise

        return SystemStats(
            is_connected=True,
            peer_count=peer_cnt,
            gas_price=gas_price,
            block_window=window,
            difficulty=calc_average_difficulty(window),
            block_time_list=calc_block_time_list(window),
            hash_rate=calc_hash_rate(window),
        )

    async def update_blocks(self, new_window: BlockWindow | Sequence[EthBlockModel]) -> SystemStats:
        return await self.get_system_stats(BlockWindow.from_raw(new_window))

    async def get_block_window(self, cached_window: BlockWindow | None = None) -> BlockWindow:
        """The recent blocks, from the latest one down to the window size, not below the genesis."""
        return await self._wait_all("block window", self._get_block_window(cached_window))

    async def _get_block_window(self, cached_window: BlockWindow | None = None) -> BlockWindow:
        latest_num = await self._provider.get_block_number()
        first_num = max(latest_num - self._cfg.block_window_size + 1, 0)
        num_list = list(range(latest_num, first_num - 1, -1))

        block_dict = {block.number: block for block in cached_window.block_list} if cached_window else dict()
        missing_num_list = [num for num in num_list if num not in block_dict]

        block_list = await _gather_all(*[self._provider.get_block(num) for num in missing_num_list])
        for num, block in zip(missing_num_list, block_list):
            if block is None:
                raise RetrievalError("block window", error_list=(f"no block {num}",))
            block_dict[num] = block

        window = BlockWindow(block_list=tuple(block_dict[num] for num in num_list))
        if len(missing_num_list) == len(num_list):
            return window
        elif not _is_linked_window(window):
            # the chain was reorganized, the cached blocks are from the abandoned branch
            _LOG.debug("cached blocks don't match the chain, reload the window")
            return await self._get_block_window()

        _LOG.debug("reuse %s cached block(s)", len(num_list) - len(missing_num_list))
        return window

    async def _wait_all(self, call_name: str, *coro_list: Awaitable):
        try:
            result_list = await asyncio.wait_for(_gather_all(*coro_list), self._cfg.request_timeout_sec)
        except asyncio.TimeoutError as exc:
            raise RetrievalError(call_name, exc, error_list=("timeout",)) from exc

        if len(result_list) == 1:
            return result_list[0]
        return result_list


async def _existing_window(window: BlockWindow) -> BlockWindow:
    return window


async def _gather_all(*coro_list: Awaitable) -> list:
    """Like asyncio.gather, but the first failure cancels the rest requests."""
    task_list = [asyncio.ensure_future(coro) for coro in coro_list]
    try:
        return await asyncio.gather(*task_list)
    except BaseException:
        for task in task_list:
            task.cancel()
        raise


def calc_average_difficulty(window: BlockWindow) -> float:
    if window.is_empty:
        return 0.0
    return sum(block.difficulty for block in window.block_list) / window.size


def calc_block_time_list(window: BlockWindow) -> tuple[int, ...]:
    block_list = window.block_list
    return tuple(block_list[i].timestamp - block_list[i + 1].timestamp for i in range(len(block_list) - 1))


def calc_hash_rate(window: BlockWindow) -> float:
    if window.size < 2:
        return 0.0

    latest_block, prev_block = window.block_list[0], window.block_list[1]
    time_delta = latest_block.timestamp - prev_block.timestamp
    if time_delta <= 0:
        return 0.0
    return latest_block.difficulty / time_delta


def _is_linked_window(window: BlockWindow) -> bool:
    block_list = window.block_list
    return all(block_list[i].parentHash == block_list[i + 1].hash for i in range(len(block_list) - 1))
