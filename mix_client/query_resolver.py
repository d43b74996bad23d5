from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from common.config.config import Config
from .api import SearchResult
from .errors import RetrievalError
from .node_provider import NodeProvider

_LOG = logging.getLogger(__name__)

_T = TypeVar("_T")


class QueryResolver:
    """Resolves a query which can be a block id, an account address or a transaction hash.

    All three interpretations are requested in parallel, each one is bounded by its own timeout.
    A failed or timed out lookup leaves its slot empty,
    the whole resolving fails only if all three lookups failed.
    """

    def __init__(self, cfg: Config, provider: NodeProvider) -> None:
        self._cfg = cfg
        self._provider = provider

    async def resolve(self, query: str) -> SearchResult:
        query = (query or "").strip()
        if not query:
            raise ValueError("Query can't be empty")

        result_list = await asyncio.gather(
            self._lookup("block", self._provider.get_block(query)),
            self._lookup("balance", self._provider.get_balance(query)),
            self._lookup("transaction", self._provider.get_transaction(query)),
            return_exceptions=True,
        )

        error_list = [res for res in result_list if isinstance(res, RetrievalError)]
        if len(error_list) == len(result_list):
            raise error_list[0]

        for res in result_list:
            # not a transport error, a bug
            if isinstance(res, BaseException) and not isinstance(res, RetrievalError):
                raise res

        for name, error in zip(("block", "account", "transaction"), result_list):
            if isinstance(error, RetrievalError):
                _LOG.debug("skip %s for %s: %s", name, query, str(error))

        block, account, tx = [None if isinstance(res, RetrievalError) else res for res in result_list]
        return SearchResult(query=query, block=block, account=account, transaction=tx)

    async def _lookup(self, call_name: str, call: Awaitable[_T]) -> _T:
        try:
            return await asyncio.wait_for(call, self._cfg.request_timeout_sec)
        except asyncio.TimeoutError as exc:
            raise RetrievalError(call_name, exc, error_list=("timeout",)) from exc
