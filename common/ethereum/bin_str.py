from __future__ import annotations

from typing import Annotated, ClassVar, Final, Union

from typing_extensions import Self

from ..utils.cached import cached_method
from ..utils.format import hex_to_bytes, bytes_to_hex
from ..utils.pydantic import PlainValidator, PlainSerializer


class EthBinStr:
    """Binary data which the node sends as a 0x-prefixed hex string: a nonce, a tx input, a hash.

    The data is immutable, so an instance can be used as a dict key and compared
    with its hex form in any letter case.
    """

    # 0 means any length
    DataSize: ClassVar[int] = 0
    null_str: ClassVar[str] = "0x"

    def __init__(self, data: bytes):
        # pydantic calls from_raw() for model fields,
        #  the direct constructor call is validated here
        if not isinstance(data, bytes):
            raise ValueError(f"Wrong input type {type(data).__name__}")
        elif self.DataSize and (len(data) not in (0, self.DataSize)):
            raise ValueError(f"Wrong input len: {len(data)} not in (0, {self.DataSize})")

        self._data: Final[bytes] = data

    @classmethod
    def default(cls) -> Self:
        return cls(bytes())

    @classmethod
    def from_raw(cls, raw: _RawBinStr) -> Self:
        if isinstance(raw, cls):
            return raw
        elif isinstance(raw, EthBinStr):
            return cls(raw.to_bytes())
        return cls(hex_to_bytes(raw))

    @classmethod
    def from_not_none(cls, raw: _RawBinStr) -> Self:
        if raw is None:
            raise ValueError("Wrong input: null")
        value = cls.from_raw(raw)
        if value.is_empty:
            raise ValueError("Wrong input: empty")
        return value

    @property
    def is_empty(self) -> bool:
        return not self._data

    def to_string(self, default: str | None = null_str) -> str | None:
        return self._to_string() if self._data else default

    @cached_method
    def _to_string(self) -> str:
        return bytes_to_hex(self._data)

    def to_bytes(self) -> bytes:
        return self._data

    def __str__(self) -> str:
        return self._to_string()

    def __repr__(self) -> str:
        return self._to_string()

    def __len__(self) -> int:
        return len(self._data)

    @cached_method
    def __hash__(self) -> int:
        return hash(self._data)

    def __eq__(self, other: _RawBinStr) -> bool:
        if other is self:
            return True
        elif isinstance(other, EthBinStr):
            return self._data == other._data
        elif isinstance(other, str):
            return self._to_string() == other.lower()
        elif isinstance(other, (bytes, bytearray)):
            return self._data == bytes(other)
        return False


_RawBinStr = Union[str, bytes, bytearray, EthBinStr, None]


EthBinStrField = Annotated[
    EthBinStr,
    PlainValidator(EthBinStr.from_raw),
    PlainSerializer(lambda v: v.to_string(), return_type=str),
]
