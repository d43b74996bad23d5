from __future__ import annotations

from typing import Literal

from pydantic import Field

from ..http.utils import HttpRequestIdField
from ..utils.pydantic import BaseModel

BaseJsonRpcModel = BaseModel


class JsonRpcRequest(BaseModel):
    jsonrpc: Literal["2.0"]
    id: HttpRequestIdField
    method: str
    params: list = Field(default_factory=list)


class JsonRpcErrorModel(BaseJsonRpcModel):
    code: int
    message: str
    data: dict | str | None = None


class JsonRpcResp(BaseJsonRpcModel):
    jsonrpc: Literal["2.0"]
    id: HttpRequestIdField
    result: dict | list | str | bool | int | None = None
    error: JsonRpcErrorModel | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_result(self) -> bool:
        return self.result is not None

    def model_post_init(self, _context) -> None:
        if self.is_result and (self.is_error == self.is_result):
            raise ValueError("Response cannot have both 'error' and 'result' fields")
