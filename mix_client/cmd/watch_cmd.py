from __future__ import annotations

import asyncio
import logging
from typing import ClassVar

from typing_extensions import Self

from common.config.config import Config
from ..api import EthBlockModel
from .cmd_handler import BaseMixCmdHandler

_LOG = logging.getLogger(__name__)


class WatchHandler(BaseMixCmdHandler):
    command: ClassVar[str] = "watch"

    @classmethod
    async def new_arg_parser(cls, cfg: Config, cmd_list_parser) -> Self:
        self = cls(cfg)
        self._root_parser = cmd_list_parser.add_parser(
            self.command,
            help="print new blocks and the refreshed statistics",
        )
        self._root_parser.add_argument(
            "-c",
            "--count",
            type=int,
            default=0,
            dest="count",
            help="stop after the number of blocks, 0 - never stop",
        )
        self._root_parser.add_argument(
            "--stats",
            action="store_true",
            dest="stats",
            help="print the statistics for each new block",
        )
        return self

    async def _exec_impl(self, arg_space) -> int:
        client = await self._get_client()
        block_queue: asyncio.Queue[EthBlockModel] = asyncio.Queue()

        def _on_error(exc: BaseException) -> None:
            _LOG.warning("error on watching new blocks: %s", str(exc))

        await client.watch_new_blocks(block_queue.put_nowait, _on_error)
        if arg_space.stats:
            await client.get_system_stats()

        block_cnt = 0
        while (arg_space.count <= 0) or (block_cnt < arg_space.count):
            block = await block_queue.get()
            block_cnt += 1

            if not arg_space.stats:
                self._print_json(block)
                continue

            window = client.block_window.with_new_block(block, self._cfg.block_window_size)
            stats = await client.update_blocks(window)
            self._print_json(stats)

        return 0
