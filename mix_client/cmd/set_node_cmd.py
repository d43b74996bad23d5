from __future__ import annotations

import logging
from typing import ClassVar

from typing_extensions import Self

from common.cmd_client.cmd_handler import BaseCmdHandler
from common.config.config import Config
from ..connector import read_stored_node_url, store_node_url

_LOG = logging.getLogger(__name__)


class SetNodeHandler(BaseCmdHandler):
    """Stores the preferred node URL, the connection uses it when no URL is passed explicitly."""

    command: ClassVar[str] = "set-node"

    @classmethod
    async def new_arg_parser(cls, cfg: Config, cmd_list_parser) -> Self:
        self = cls(cfg)
        self._root_parser = cmd_list_parser.add_parser(self.command, help="store the preferred node URL")
        self._root_parser.add_argument(
            "url",
            type=str,
            default=None,
            nargs="?",
            help="node URL, without it the stored URL is printed",
        )
        self._root_parser.add_argument(
            "--clear",
            action="store_true",
            dest="clear",
            help="remove the stored URL",
        )
        return self

    async def _exec_impl(self, arg_space) -> int:
        path = self._cfg.node_uri_path
        if arg_space.clear:
            store_node_url(path, None)
            print(f"removed the node URL from {path}")
            return 0
        elif not arg_space.url:
            print(read_stored_node_url(path) or "")
            return 0

        try:
            store_node_url(path, arg_space.url)
        except ValueError as exc:
            _LOG.error("%s", str(exc))
            return 1

        print(f"stored the node URL into {path}")
        return 0
