from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Final, Sequence, TypeVar

from common.config.config import Config
from common.ethereum.commit_level import EthCommit
from common.ethereum.hash import EthNotNoneAddressField, EthNotNoneHash32Field, EthHash32
from common.http.errors import HttpTransportError, PydanticValidationError
from common.http.utils import HttpStrOrURL
from common.jsonrpc.client import JsonRpcClient
from common.jsonrpc.errors import BaseJsonRpcError, InvalidParamError, ParseRespError
from common.utils.format import is_dec_str, is_hex_str
from common.utils.json_logger import logging_context
from common.utils.pydantic import HexUIntField
from .api import EthBlockModel, EthTxModel, EthAccountModel
from .errors import RetrievalError
from .node_provider import NodeProvider, BlockSubscription, BlockId, OnBlockCallback, OnErrorCallback

_LOG = logging.getLogger(__name__)

_T = TypeVar("_T")

# Short hex strings are block numbers, 32-byte ones are block hashes.
_MAX_HEX_NUMBER_BYTE_LEN: Final[int] = 8


class EthNodeClient(JsonRpcClient, NodeProvider):
    """NodeProvider over the Ethereum JSON-RPC HTTP API."""

    def __init__(self, cfg: Config, url_list: Sequence[HttpStrOrURL] | None = None) -> None:
        super().__init__(cfg)

        url_list = tuple(url_list or cfg.node_url_list)
        assert url_list, "node URL isn't defined"
        self.connect(base_url_list=url_list)

        self._sub_set: set[_BlockFilterSubscription] = set()

    async def stop(self) -> None:
        if self._sub_set:
            await asyncio.gather(*[sub.cancel() for sub in list(self._sub_set)])
        await super().stop()

    ##################
    # NodeProvider

    async def is_connected(self) -> bool:
        try:
            await self._net_listening()
        except (HttpTransportError, ParseRespError) as exc:
            _LOG.debug("node doesn't answer: %s", str(exc), extra=self._msg_filter)
            return False
        except BaseJsonRpcError as exc:
            # the node answered, it just doesn't support the method
            _LOG.debug("node answered with error: %s", str(exc), extra=self._msg_filter)
        return True

    async def get_block(self, block_id: BlockId) -> EthBlockModel | None:
        if isinstance(block_id, int):
            raw_block = await self._lookup("block", self._get_block_by_number(hex(block_id), False))
        elif not isinstance(block_id, str):
            raise ValueError(f"Wrong block id type: {type(block_id).__name__}")
        elif is_dec_str(block_id):
            raw_block = await self._lookup("block", self._get_block_by_number(hex(int(block_id, 10)), False))
        elif EthHash32.is_hash_str(block_id):
            raw_block = await self._lookup("block", self._get_block_by_hash(block_id, False))
        elif is_hex_str(block_id) and (2 < len(block_id) <= 2 + _MAX_HEX_NUMBER_BYTE_LEN * 2):
            raw_block = await self._lookup("block", self._get_block_by_number(block_id.lower(), False))
        elif EthCommit.is_tag(block_id):
            tag = EthCommit.from_raw(block_id).value
            raw_block = await self._lookup("block", self._get_block_by_number(tag, False))
        else:
            return None

        return self._to_model("block", EthBlockModel, raw_block)

    async def get_transaction(self, tx_hash: str) -> EthTxModel | None:
        raw_tx = await self._lookup("transaction", self._get_tx_by_hash(tx_hash))
        return self._to_model("transaction", EthTxModel, raw_tx)

    async def get_balance(self, address: str) -> EthAccountModel | None:
        balance = await self._lookup("balance", self._get_balance(address, EthCommit.Latest.value))
        if balance is None:
            return None
        return EthAccountModel(address=address, balance=balance)

    async def get_peer_count(self) -> int:
        return await self._request("peer count", self._get_peer_count())

    async def get_gas_price(self) -> int:
        return await self._request("gas price", self._get_gas_price())

    async def get_block_number(self) -> int:
        return await self._request("block number", self._get_block_number())

    async def watch_latest(self, on_block: OnBlockCallback, on_error: OnErrorCallback) -> BlockSubscription:
        sub = _BlockFilterSubscription(self, on_block, on_error, self._cfg.block_poll_sec)
        await sub.start()
        return sub

    ##################
    # Block filters

    async def new_block_filter(self) -> str:
        return await self._request("block filter", self._new_block_filter())

    async def get_filter_changes(self, filter_id: str) -> list[EthHash32]:
        return await self._request("filter changes", self._get_filter_changes(filter_id))

    async def uninstall_filter(self, filter_id: str) -> bool:
        return await self._request("filter removing", self._uninstall_filter(filter_id))

    ##################
    # Error handling

    async def _lookup(self, call_name: str, call: Awaitable[_T]) -> _T | None:
        """A request with a user input: bad input is "not found", not an error."""
        try:
            return await call
        except PydanticValidationError as exc:
            _LOG.debug("skip %s lookup, bad input: %s", call_name, str(exc).splitlines()[0])
            return None
        except InvalidParamError as exc:
            _LOG.debug("node rejected %s lookup: %s", call_name, str(exc))
            return None
        except (HttpTransportError, BaseJsonRpcError) as exc:
            raise RetrievalError(call_name, exc) from exc

    @staticmethod
    async def _request(call_name: str, call: Awaitable[_T]) -> _T:
        try:
            return await call
        except (HttpTransportError, BaseJsonRpcError) as exc:
            raise RetrievalError(call_name, exc) from exc

    @staticmethod
    def _to_model(call_name: str, model_type: type[_T], raw: dict | None) -> _T | None:
        if raw is None:
            return None

        try:
            return model_type.from_dict(raw)
        except PydanticValidationError as exc:
            raise RetrievalError(call_name, ParseRespError(exc)) from exc

    ##################
    # JSON-RPC methods

    @JsonRpcClient.method(name="net_listening")
    async def _net_listening(self) -> bool: ...

    @JsonRpcClient.method(name="net_peerCount")
    async def _get_peer_count(self) -> HexUIntField: ...

    @JsonRpcClient.method(name="eth_gasPrice")
    async def _get_gas_price(self) -> HexUIntField: ...

    @JsonRpcClient.method(name="eth_blockNumber")
    async def _get_block_number(self) -> HexUIntField: ...

    @JsonRpcClient.method(name="eth_getBlockByNumber")
    async def _get_block_by_number(self, tag: str, full_tx_list: bool) -> dict | None: ...

    @JsonRpcClient.method(name="eth_getBlockByHash")
    async def _get_block_by_hash(self, block_hash: EthNotNoneHash32Field, full_tx_list: bool) -> dict | None: ...

    @JsonRpcClient.method(name="eth_getTransactionByHash")
    async def _get_tx_by_hash(self, tx_hash: EthNotNoneHash32Field) -> dict | None: ...

    @JsonRpcClient.method(name="eth_getBalance")
    async def _get_balance(self, address: EthNotNoneAddressField, tag: str) -> HexUIntField | None: ...

    @JsonRpcClient.method(name="eth_newBlockFilter")
    async def _new_block_filter(self) -> str: ...

    @JsonRpcClient.method(name="eth_getFilterChanges")
    async def _get_filter_changes(self, filter_id: str) -> list[EthNotNoneHash32Field]: ...

    @JsonRpcClient.method(name="eth_uninstallFilter")
    async def _uninstall_filter(self, filter_id: str) -> bool: ...


class _BlockFilterSubscription(BlockSubscription):
    def __init__(
        self,
        node_client: EthNodeClient,
        on_block: OnBlockCallback,
        on_error: OnErrorCallback,
        poll_sec: float,
    ) -> None:
        self._node_client = node_client
        self._on_block = on_block
        self._on_error = on_error
        self._poll_sec = poll_sec

        self._filter_id: str | None = None
        self._stop_event = asyncio.Event()
        self._poll_task: asyncio.Task | None = None

    @property
    def is_active(self) -> bool:
        return (self._poll_task is not None) and (not self._stop_event.is_set())

    async def start(self) -> None:
        self._filter_id = await self._node_client.new_block_filter()
        _LOG.debug("installed block filter %s", self._filter_id)

        self._node_client._sub_set.add(self)  # noqa
        self._poll_task = asyncio.create_task(self._poll_loop())

    async def cancel(self) -> None:
        if not self.is_active:
            return

        self._stop_event.set()
        await self._poll_task
        self._node_client._sub_set.discard(self)  # noqa

        try:
            await self._node_client.uninstall_filter(self._filter_id)
        except RetrievalError as exc:
            _LOG.warning("fail to uninstall block filter %s: %s", self._filter_id, str(exc))

    async def _poll_loop(self) -> None:
        with logging_context(ctx="block-filter"):
            while True:
                with contextlib.suppress(asyncio.TimeoutError, asyncio.CancelledError):
                    await asyncio.wait_for(self._stop_event.wait(), self._poll_sec)
                if self._stop_event.is_set():
                    break

                try:
                    block_list = await self._get_new_block_list()
                except RetrievalError as exc:
                    _LOG.warning("error on polling new blocks: %s", str(exc))
                    self._call_handler(self._on_error, exc)
                    continue

                for block in block_list:
                    self._call_handler(self._on_block, block)

    async def _get_new_block_list(self) -> list[EthBlockModel]:
        block_hash_list = await self._node_client.get_filter_changes(self._filter_id)
        if not block_hash_list:
            return list()

        block_list = await asyncio.gather(*[self._node_client.get_block(h.to_string()) for h in block_hash_list])
        return [block for block in block_list if block is not None]

    @staticmethod
    def _call_handler(handler, value) -> None:
        try:
            handler(value)
        except Exception as exc:
            _LOG.warning("error in the block handler", exc_info=exc)
