from __future__ import annotations

from typing import ClassVar, Sequence

from ..http.errors import BaseHttpError


class BaseJsonRpcError(BaseHttpError):
    """An error answer of the node, or a response the client can't accept.

    The node errors are mapped by code (see JsonRpcErrorDict), unknown codes stay BaseJsonRpcError.
    """

    CODE: ClassVar[int] = -32000
    DEFAULT_MESSAGE: ClassVar[str] = "node error"

    def __init__(
        self,
        src: BaseException | None = None,
        *,
        message: str | None = None,
        error_list: str | Sequence[str] = tuple(),
        code: int | None = None,
        data: str | None = None,
    ) -> None:
        super().__init__(message or self.DEFAULT_MESSAGE, self._create_error_list(src, error_list))
        self._code = self.CODE if code is None else code
        self._data = data

    @property
    def code(self) -> int:
        return self._code

    @property
    def data(self) -> str | None:
        return self._data


class ParseRespError(BaseJsonRpcError):
    """The node answer isn't a valid JSON-RPC response, or its result has a wrong shape"""

    CODE = -32700
    DEFAULT_MESSAGE = "the node returned an invalid JSON-RPC response"


class MethodNotFoundError(BaseJsonRpcError):
    """The node doesn't support the method: a light node or a restricted public endpoint"""

    CODE = -32601
    DEFAULT_MESSAGE = "the node doesn't support the method"


class InvalidParamError(BaseJsonRpcError):
    """The node rejected the parameters, for a lookup it means "not found" """

    CODE = -32602
    DEFAULT_MESSAGE = "invalid parameters"


JsonRpcErrorDict: dict[int, type[BaseJsonRpcError]] = {
    _Error.CODE: _Error for _Error in (ParseRespError, MethodNotFoundError, InvalidParamError)
}
