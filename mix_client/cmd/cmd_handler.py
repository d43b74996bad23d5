from __future__ import annotations

import json
import logging

from common.cmd_client.cmd_handler import BaseCmdHandler
from common.utils.cached import cached_method
from common.utils.pydantic import BaseModel
from ..client import Client
from ..errors import MixClientError

_LOG = logging.getLogger(__name__)


class BaseMixCmdHandler(BaseCmdHandler):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._node_url: str | None = None

    async def execute(self, arg_space) -> int:
        self._node_url = getattr(arg_space, "node_url", None)
        try:
            return await super().execute(arg_space)
        except MixClientError as exc:
            _LOG.error("%s failed: %s", self.command, str(exc))
            return 1

    @cached_method
    async def _get_client(self) -> Client:
        async def _connect() -> Client:
            return await Client.connect(self._cfg, node_url=self._node_url)

        return await self._new_client(Client.__name__, _connect)

    @staticmethod
    def _print_json(value: BaseModel | dict) -> None:
        if isinstance(value, BaseModel):
            value = value.to_dict()
        print(json.dumps(value, indent=2, default=str))
