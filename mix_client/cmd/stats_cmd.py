from __future__ import annotations

from typing import ClassVar, Final

from typing_extensions import Self

from common.config.config import Config
from common.utils.json_logger import logging_context
from .cmd_handler import BaseMixCmdHandler


class StatsHandler(BaseMixCmdHandler):
    command: ClassVar[str] = "stats"
    #
    # protected:
    _show: Final[str] = "show"
    _blocks: Final[str] = "blocks"

    @classmethod
    async def new_arg_parser(cls, cfg: Config, cmd_list_parser) -> Self:
        self = cls(cfg)
        self._root_parser = cmd_list_parser.add_parser(self.command, help="network statistics")
        self._cmd_parser = self._root_parser.add_subparsers(
            title="command",
            dest="subcommand",
            description="valid commands",
        )

        self._show_parser = self._cmd_parser.add_parser(cls._show, help="peers, gas price and recent block metrics")
        self._subcmd_dict[cls._show] = self._show_cmd

        self._blocks_parser = self._cmd_parser.add_parser(cls._blocks, help="list the recent blocks")
        self._subcmd_dict[cls._blocks] = self._blocks_cmd

        self._root_parser.set_defaults(subcommand=cls._show)
        return self

    async def _show_cmd(self, _arg_space) -> int:
        with logging_context(**self._gen_req_id()):
            client = await self._get_client()
            stats = await client.get_system_stats()

        self._print_json(stats)
        return 0

    async def _blocks_cmd(self, _arg_space) -> int:
        with logging_context(**self._gen_req_id()):
            client = await self._get_client()
            window = await client.get_blocks()

        self._print_json(window)
        return 0
