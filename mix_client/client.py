from __future__ import annotations

import logging
from typing import Mapping, Sequence

from typing_extensions import Self

from common.config.config import Config
from .api import BlockWindow, EthAccountModel, EthBlockModel, EthNetwork, EthTxModel, SearchResult, SystemStats
from .chain_identifier import ChainIdentifier
from .connector import build_strategy_list, connect_node
from .errors import ConnectivityError
from .node_provider import BlockId, BlockSubscription, NodeProvider, OnBlockCallback, OnErrorCallback
from .query_resolver import QueryResolver
from .stats_aggregator import StatsAggregator

_LOG = logging.getLogger(__name__)


class Client:
    """Explorer API over one node connection.

    Use Client.connect() to get a connected client. The constructor doesn't check the provider,
    such a client checks the connection when it enters the `async with` block.

    The client keeps the latest block window: the statistics reuse its blocks
    and request only the new ones.
    """

    def __init__(
        self,
        provider: NodeProvider,
        cfg: Config | None = None,
        *,
        hash_dict: Mapping[str, str] | None = None,
    ) -> None:
        self._cfg = cfg or Config()
        self._provider = provider
        self._resolver = QueryResolver(self._cfg, provider)
        self._identifier = ChainIdentifier(provider, hash_dict)
        self._aggregator = StatsAggregator(self._cfg, provider)

        self._block_window = BlockWindow()
        self._sub_list: list[BlockSubscription] = list()
        self._is_verified = False

    @classmethod
    async def connect(
        cls,
        cfg: Config | None = None,
        *,
        node_url: str | None = None,
        provider: NodeProvider | None = None,
        hash_dict: Mapping[str, str] | None = None,
    ) -> Self:
        cfg = cfg or Config()
        strategy_list = build_strategy_list(cfg, node_url=node_url, provider=provider)
        provider = await connect_node(strategy_list)

        self = cls(provider, cfg, hash_dict=hash_dict)
        self._is_verified = True
        return self

    async def __aenter__(self) -> Self:
        if not self._is_verified:
            if not await self._provider.is_connected():
                raise ConnectivityError()
            self._is_verified = True
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.stop()

    async def stop(self) -> None:
        sub_list, self._sub_list = self._sub_list, list()
        for sub in sub_list:
            await sub.cancel()
        await self._provider.stop()

    @property
    def is_verified(self) -> bool:
        return self._is_verified

    @property
    def block_window(self) -> BlockWindow:
        return self._block_window

    async def is_connected(self) -> bool:
        return await self._provider.is_connected()

    async def watch_new_blocks(self, on_block: OnBlockCallback, on_error: OnErrorCallback) -> BlockSubscription:
        sub = await self._provider.watch_latest(on_block, on_error)
        self._sub_list.append(sub)
        return sub

    async def resolve(self, query: str) -> SearchResult:
        return await self._resolver.resolve(query)

    async def identify_network(self) -> EthNetwork | str:
        return await self._identifier.identify()

    async def get_system_stats(self, existing_window: BlockWindow | Sequence[EthBlockModel] | None = None) -> SystemStats:
        stats = await self._aggregator.get_system_stats(existing_window, cached_window=self._block_window)
        self._update_block_window(stats.block_window)
        return stats

    async def update_blocks(self, new_window: BlockWindow | Sequence[EthBlockModel]) -> SystemStats:
        """Replaces the cached window with the passed one, then recalculates the statistics.

        The window stays cached even if the statistics fail.
        """
        window = BlockWindow.from_raw(new_window)
        self._block_window = window
        return await self._aggregator.get_system_stats(window)

    async def get_blocks(self) -> BlockWindow:
        if not await self._provider.is_connected():
            raise ConnectivityError()

        window = await self._aggregator.get_block_window(self._block_window)
        self._block_window = window
        return window

    async def get_block(self, block_id: BlockId) -> EthBlockModel | None:
        return await self._provider.get_block(block_id)

    async def get_transaction(self, tx_hash: str) -> EthTxModel | None:
        return await self._provider.get_transaction(tx_hash)

    async def get_account_balance(self, address: str) -> EthAccountModel | None:
        return await self._provider.get_balance(address)

    def _update_block_window(self, window: BlockWindow) -> None:
        # a slower request which started earlier doesn't replace the newer window
        if _latest_block_num(window) >= _latest_block_num(self._block_window):
            self._block_window = window


def _latest_block_num(window: BlockWindow) -> int:
    return window.latest_block.number if window.latest_block else -1
