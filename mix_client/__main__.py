from __future__ import annotations

import sys

from common.cmd_client.cmd_executor import BaseCmdExecutor
from common.config.config import Config
from .cmd.network_cmd import NetworkHandler
from .cmd.search_cmd import SearchHandler
from .cmd.set_node_cmd import SetNodeHandler
from .cmd.stats_cmd import StatsHandler
from .cmd.watch_cmd import WatchHandler


class CmdExecutor(BaseCmdExecutor):
    def __init__(self, cfg: Config) -> None:
        super().__init__(cfg, description="Command line utility to explore a Mix/Ethereum node.")
        self._handler_type_list.append(SearchHandler)
        self._handler_type_list.append(NetworkHandler)
        self._handler_type_list.append(StatsHandler)
        self._handler_type_list.append(WatchHandler)
        self._handler_type_list.append(SetNodeHandler)

        self._parser.add_argument(
            "-u",
            "--node-url",
            required=False,
            type=str,
            dest="node_url",
            help="Node URL, overrides the stored and the configured URLs",
        )


def main() -> None:
    cfg = Config()
    cmd_executor = CmdExecutor(cfg)

    exit_code = cmd_executor.run()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
