from __future__ import annotations

from typing import Annotated, ClassVar

import eth_utils

from .bin_str import EthBinStr
from ..utils.cached import cached_method
from ..utils.format import is_hex_str
from ..utils.pydantic import PlainValidator, PlainSerializer


class _BaseHash(EthBinStr):
    """Fixed-size binary value. An empty one means "no value": a pending block has no hash."""

    HashSize: ClassVar[int] = 0

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls.DataSize = cls.HashSize

    @classmethod
    def is_hash_str(cls, value: str) -> bool:
        """Checks the shape of user input without parsing: 0x-prefix and exactly HashSize bytes."""
        return is_hex_str(value, cls.HashSize)

    def to_string(self, default: str | None = None) -> str | None:
        return self._to_string() if self._data else default

    def __str__(self) -> str:
        return self.to_string("None")

    def __repr__(self) -> str:
        return self.to_string("None")


class EthAddress(_BaseHash):
    HashSize: ClassVar[int] = 20
    ZeroAddress: ClassVar[str] = "0x" + "00" * HashSize

    def to_checksum(self, default: str | None = None) -> str | None:
        return self._to_checksum() if self._data else default

    @cached_method
    def _to_checksum(self) -> str:
        return eth_utils.to_checksum_address(self._data)

    def __str__(self) -> str:
        return self.to_checksum("None")

    def __repr__(self) -> str:
        return self.to_checksum("None")


EthAddressField = Annotated[
    EthAddress,
    PlainValidator(EthAddress.from_raw),
    PlainSerializer(lambda v: v.to_checksum(), return_type=str),
]
EthNotNoneAddressField = Annotated[
    EthAddress,
    PlainValidator(EthAddress.from_not_none),
    PlainSerializer(lambda v: v.to_checksum(EthAddress.ZeroAddress), return_type=str),
]


class EthHash32(_BaseHash):
    HashSize: ClassVar[int] = 32
    ZeroHash: ClassVar[str] = "0x" + "00" * HashSize


EthHash32Field = Annotated[
    EthHash32,
    PlainValidator(EthHash32.from_raw),
    PlainSerializer(lambda v: v.to_string(), return_type=str),
]
EthNotNoneHash32Field = Annotated[
    EthHash32,
    PlainValidator(EthHash32.from_not_none),
    PlainSerializer(lambda v: v.to_string(EthHash32.ZeroHash), return_type=str),
]

# Blocks and transactions share the hash type, the aliases keep the models readable
EthBlockHash = EthHash32
EthBlockHashField = EthHash32Field
EthTxHashField = EthNotNoneHash32Field
