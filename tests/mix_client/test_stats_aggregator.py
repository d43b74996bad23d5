import asyncio
import os
import unittest
from unittest import mock

from common.config.config import Config
from mix_client.api import BlockWindow
from mix_client.errors import ConnectivityError, RetrievalError
from mix_client.stats_aggregator import (
    StatsAggregator,
    calc_average_difficulty,
    calc_block_time_list,
    calc_hash_rate,
)
from tests.mix_client.fake_node import FakeNodeProvider, make_block, make_chain


class TestStatsMetrics(unittest.TestCase):
    def test_average_difficulty(self):
        window = BlockWindow.from_raw(make_chain(1, [100, 110, 120], [10, 20, 30]))
        self.assertEqual(calc_average_difficulty(window), 20)
        self.assertEqual(calc_average_difficulty(BlockWindow()), 0)

    def test_block_time_list(self):
        window = BlockWindow.from_raw(make_chain(1, [100, 115, 127, 140], [1, 1, 1, 1]))
        self.assertEqual(calc_block_time_list(window), (13, 12, 15))
        self.assertEqual(calc_block_time_list(BlockWindow.from_raw([make_block(1, 100, 1)])), tuple())
        self.assertEqual(calc_block_time_list(BlockWindow()), tuple())

    def test_hash_rate(self):
        window = BlockWindow.from_raw(make_chain(1, [100, 115, 125], [10, 20, 3000]))
        self.assertEqual(calc_hash_rate(window), 300)

    def test_hash_rate_zero_guard(self):
        same_time_window = BlockWindow.from_raw(make_chain(1, [100, 115, 115], [10, 20, 30]))
        self.assertEqual(calc_hash_rate(same_time_window), 0)

        self.assertEqual(calc_hash_rate(BlockWindow.from_raw([make_block(1, 100, 10)])), 0)
        self.assertEqual(calc_hash_rate(BlockWindow()), 0)

    def test_window_order_doesnt_change_metrics(self):
        block_list = make_chain(1, [100, 117, 129, 150], [10, 20, 30, 45])
        oldest_first = BlockWindow.from_raw(block_list)
        newest_first = BlockWindow.from_raw(list(reversed(block_list)))
        for calc in (calc_average_difficulty, calc_block_time_list, calc_hash_rate):
            self.assertEqual(calc(oldest_first), calc(newest_first))


class TestStatsAggregator(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        env_patcher = mock.patch.dict(os.environ, {"BLOCK_WINDOW_SIZE": "3", "REQUEST_TIMEOUT_SEC": "1"})
        env_patcher.start()
        self.addCleanup(env_patcher.stop)

        self._cfg = Config()
        self._chain = make_chain(0, [0, 14, 28, 41, 57], [100, 110, 120, 130, 140])
        self._provider = FakeNodeProvider(self._chain)
        self._aggregator = StatsAggregator(self._cfg, self._provider)

    async def test_system_stats(self):
        stats = await self._aggregator.get_system_stats()
        self.assertTrue(stats.is_connected)
        self.assertEqual(stats.peer_count, 25)
        self.assertEqual(stats.gas_price, 20_000_000_000)
        self.assertEqual(stats.block_window.number_list, (4, 3, 2))
        self.assertEqual(stats.difficulty, 130)
        self.assertEqual(stats.block_time_list, (16, 13))
        self.assertEqual(stats.hash_rate, 140 / 16)

    async def test_existing_window(self):
        fetched_stats = await self._aggregator.get_system_stats()
        self.assertEqual(self._provider.call_cnt["get_block"], 3)

        window = BlockWindow.from_raw(list(reversed(self._chain[2:])))
        stats = await self._aggregator.get_system_stats(window)
        self.assertEqual(self._provider.call_cnt["get_block_number"], 1)
        self.assertEqual(self._provider.call_cnt["get_block"], 3)
        self.assertEqual(stats, fetched_stats)

        updated_stats = await self._aggregator.update_blocks(self._chain[2:])
        self.assertEqual(updated_stats, fetched_stats)

    async def test_connectivity_gate(self):
        self._provider.connected = False
        with self.assertRaises(ConnectivityError):
            await self._aggregator.get_system_stats()

        self.assertEqual(self._provider.call_cnt["is_connected"], 1)
        for name in ("get_peer_count", "get_gas_price", "get_block_number", "get_block"):
            self.assertEqual(self._provider.call_cnt[name], 0)

    async def test_atomic_stats(self):
        for name in ("get_peer_count", "get_gas_price", "get_block_number", "get_block"):
            provider = FakeNodeProvider(self._chain)
            provider.error_dict[name] = RetrievalError(name)
            aggregator = StatsAggregator(self._cfg, provider)

            with self.assertRaises(RetrievalError) as ctx:
                await aggregator.get_system_stats()
            self.assertEqual(ctx.exception.call_name, name)

    async def test_short_chain(self):
        provider = FakeNodeProvider(self._chain[:2])
        stats = await StatsAggregator(self._cfg, provider).get_system_stats()
        self.assertEqual(stats.block_window.number_list, (1, 0))
        self.assertEqual(stats.block_time_list, (14,))

    async def test_missing_block(self):
        del self._provider.block_dict[3]
        with self.assertRaises(RetrievalError):
            await self._aggregator.get_block_window()

    async def test_timeout(self):
        self._provider.delay_dict["get_gas_price"] = 5
        with self.assertRaises(RetrievalError):
            await self._aggregator.get_system_stats()

    async def test_cached_window(self):
        window = await self._aggregator.get_block_window()
        self.assertEqual(self._provider.call_cnt["get_block"], 3)

        same_window = await self._aggregator.get_block_window(window)
        self.assertEqual(same_window, window)
        self.assertEqual(self._provider.call_cnt["get_block"], 3)

        self._provider.block_dict[5] = make_block(5, 70, 150)
        new_window = await self._aggregator.get_block_window(window)
        self.assertEqual(new_window.number_list, (5, 4, 3))
        self.assertEqual(self._provider.call_cnt["get_block"], 4)

        stats = await self._aggregator.get_system_stats(cached_window=new_window)
        self.assertEqual(stats.block_window, new_window)
        self.assertEqual(self._provider.call_cnt["get_block"], 4)

    async def test_reorganized_chain(self):
        window = await self._aggregator.get_block_window()

        fork_hash = "0x" + "44" * 32
        self._provider.block_dict[4] = make_block(4, 41, 131, hash_=fork_hash)
        self._provider.block_dict[5] = make_block(5, 70, 150, parent_hash=fork_hash)

        new_window = await self._aggregator.get_block_window(window)
        self.assertEqual(new_window.number_list, (5, 4, 3))
        self.assertEqual(new_window.block_list[1].hash, fork_hash)
        # 3 blocks at first, the new block 5, then the whole window again
        self.assertEqual(self._provider.call_cnt["get_block"], 7)

    async def test_in_flight_window(self):
        self._provider.delay_dict["get_peer_count"] = 0.05
        old_window = BlockWindow.from_raw(self._chain[1:4])
        new_window = BlockWindow.from_raw(self._chain[2:5])

        old_task = asyncio.create_task(self._aggregator.get_system_stats(old_window))
        await asyncio.sleep(0)
        new_stats = await self._aggregator.update_blocks(new_window)
        old_stats = await old_task

        self.assertEqual(old_stats.block_window, old_window)
        self.assertEqual(new_stats.block_window, new_window)


if __name__ == "__main__":
    unittest.main()
