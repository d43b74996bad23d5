from __future__ import annotations

from typing import ClassVar

from typing_extensions import Self

from common.config.config import Config
from .cmd_handler import BaseMixCmdHandler


class NetworkHandler(BaseMixCmdHandler):
    command: ClassVar[str] = "network"

    @classmethod
    async def new_arg_parser(cls, cfg: Config, cmd_list_parser) -> Self:
        self = cls(cfg)
        self._root_parser = cmd_list_parser.add_parser(self.command, help="name the network served by the node")
        return self

    async def _exec_impl(self, _arg_space) -> int:
        client = await self._get_client()
        network = await client.identify_network()
        self._print_json(dict(network=str(network)))
        return 0
