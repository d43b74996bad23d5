from __future__ import annotations

from typing import ClassVar

from typing_extensions import Self

from common.config.config import Config
from common.utils.json_logger import logging_context
from .cmd_handler import BaseMixCmdHandler


class SearchHandler(BaseMixCmdHandler):
    command: ClassVar[str] = "search"

    @classmethod
    async def new_arg_parser(cls, cfg: Config, cmd_list_parser) -> Self:
        self = cls(cfg)
        self._root_parser = cmd_list_parser.add_parser(
            self.command,
            help="find a block, an account or a transaction by a number, a hash or an address",
        )
        self._root_parser.add_argument("query", type=str, help="block number, block hash, address or tx hash")
        return self

    async def _exec_impl(self, arg_space) -> int:
        with logging_context(**self._gen_req_id()):
            client = await self._get_client()
            result = await client.resolve(arg_space.query)

        self._print_json(result)
        return 0 if not result.is_empty else 2
