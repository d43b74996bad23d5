from __future__ import annotations

import abc
from typing import Callable, Union

from typing_extensions import Self

from .api import EthBlockModel, EthTxModel, EthAccountModel

BlockId = Union[int, str]
OnBlockCallback = Callable[[EthBlockModel], None]
OnErrorCallback = Callable[[BaseException], None]


class BlockSubscription(abc.ABC):
    @property
    @abc.abstractmethod
    def is_active(self) -> bool: ...

    @abc.abstractmethod
    async def cancel(self) -> None: ...


class NodeProvider(abc.ABC):
    """Raw primitives of a blockchain node.

    "Not found" answers are None, transport failures raise RetrievalError.
    """

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.stop()

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    @abc.abstractmethod
    async def is_connected(self) -> bool: ...

    @abc.abstractmethod
    async def get_block(self, block_id: BlockId) -> EthBlockModel | None:
        """Block by height, tag or hash."""

    @abc.abstractmethod
    async def get_transaction(self, tx_hash: str) -> EthTxModel | None: ...

    @abc.abstractmethod
    async def get_balance(self, address: str) -> EthAccountModel | None: ...

    @abc.abstractmethod
    async def get_peer_count(self) -> int: ...

    @abc.abstractmethod
    async def get_gas_price(self) -> int: ...

    @abc.abstractmethod
    async def get_block_number(self) -> int: ...

    @abc.abstractmethod
    async def watch_latest(self, on_block: OnBlockCallback, on_error: OnErrorCallback) -> BlockSubscription: ...
