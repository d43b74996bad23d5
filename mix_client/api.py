from __future__ import annotations

from typing import Sequence

from pydantic import Field, field_validator
from strenum import StrEnum
from typing_extensions import Self

from common.ethereum.bin_str import EthBinStrField, EthBinStr
from common.ethereum.hash import (
    EthAddress,
    EthAddressField,
    EthNotNoneAddressField,
    EthBlockHash,
    EthBlockHashField,
    EthTxHashField,
)
from common.utils.pydantic import BaseModel, NodeModel, HexUIntField, NullHexUIntField


class EthNetwork(StrEnum):
    Mix = "Mix"
    Ethereum = "Ethereum"
    EthereumClassic = "Ethereum Classic"
    Unknown = "Unknown blockchain"

    @property
    def is_unknown(self) -> bool:
        return self == EthNetwork.Unknown


class EthBlockModel(NodeModel):
    # number and hash are null for the pending block
    number: NullHexUIntField = None
    hash: EthBlockHashField = EthBlockHash.default()
    parentHash: EthBlockHashField = EthBlockHash.default()
    timestamp: HexUIntField
    difficulty: HexUIntField
    totalDifficulty: NullHexUIntField = None
    miner: EthAddressField = EthAddress.default()
    gasLimit: HexUIntField = 0
    gasUsed: HexUIntField = 0
    size: NullHexUIntField = None
    nonce: EthBinStrField = EthBinStr.default()
    transactions: list[EthTxHashField] = Field(default_factory=list)

    @property
    def is_pending(self) -> bool:
        return self.number is None

    @property
    def tx_cnt(self) -> int:
        return len(self.transactions)


class EthTxModel(NodeModel):
    hash: EthTxHashField
    blockHash: EthBlockHashField = EthBlockHash.default()
    blockNumber: NullHexUIntField = None
    transactionIndex: NullHexUIntField = None
    fromAddress: EthAddressField = Field(alias="from")
    toAddress: EthAddressField = Field(default=EthAddress.default(), alias="to")
    value: HexUIntField
    gas: HexUIntField
    gasPrice: NullHexUIntField = None
    nonce: HexUIntField
    input: EthBinStrField = EthBinStr.default()

    @property
    def is_pending(self) -> bool:
        return self.blockNumber is None

    @property
    def is_contract_creation(self) -> bool:
        return self.toAddress.is_empty


class EthAccountModel(BaseModel):
    address: EthNotNoneAddressField
    balance: int


class BlockWindow(BaseModel):
    """The most recent blocks, newest first.

    The list is normalized on construction: sorted by number in descending order
    and deduplicated by number, the first occurrence wins.
    A window is never changed, a new block produces a new window.
    """

    block_list: tuple[EthBlockModel, ...] = tuple()

    @field_validator("block_list", mode="before")
    @classmethod
    def _normalize_block_list(cls, value: Sequence[EthBlockModel]) -> tuple[EthBlockModel, ...]:
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"Wrong input type: {type(value).__name__}")

        block_dict: dict[int, EthBlockModel] = dict()
        for block in value:
            if not isinstance(block, EthBlockModel):
                raise ValueError(f"Wrong block type: {type(block).__name__}")
            elif block.is_pending:
                raise ValueError("Pending block can't be a part of the window")
            block_dict.setdefault(block.number, block)

        return tuple(sorted(block_dict.values(), key=lambda b: b.number, reverse=True))

    @classmethod
    def from_raw(cls, block_list: Sequence[EthBlockModel] | BlockWindow | None) -> Self:
        if block_list is None:
            return cls()
        elif isinstance(block_list, cls):
            return block_list
        return cls(block_list=tuple(block_list))

    def with_new_block(self, block: EthBlockModel, window_size: int | None = None) -> Self:
        window_size = window_size or max(len(self.block_list), 1)
        window = BlockWindow(block_list=(block,) + self.block_list)
        return BlockWindow(block_list=window.block_list[:window_size])

    @property
    def is_empty(self) -> bool:
        return not self.block_list

    @property
    def size(self) -> int:
        return len(self.block_list)

    @property
    def latest_block(self) -> EthBlockModel | None:
        return self.block_list[0] if self.block_list else None

    @property
    def number_list(self) -> tuple[int, ...]:
        return tuple(b.number for b in self.block_list)


class SearchResult(BaseModel):
    query: str
    block: EthBlockModel | None = None
    account: EthAccountModel | None = None
    transaction: EthTxModel | None = None

    @property
    def is_empty(self) -> bool:
        return (self.block is None) and (self.account is None) and (self.transaction is None)


class SystemStats(BaseModel):
    is_connected: bool
    peer_count: int
    gas_price: int
    block_window: BlockWindow
    difficulty: float
    block_time_list: tuple[int, ...]
    hash_rate: float
