from __future__ import annotations

import itertools
from typing import Callable, Awaitable, Any

from .api import JsonRpcRequest, JsonRpcResp
from .errors import BaseJsonRpcError, ParseRespError, JsonRpcErrorDict
from .utils import JsonRpcMethod
from ..http.client import HttpClient
from ..http.errors import PydanticValidationError


class JsonRpcClient(HttpClient):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._id = itertools.count()

    @staticmethod
    def method(handler: JsonRpcClientSender | None = None, *, name: str = None) -> Callable:
        """Turns a method stub into a JSON-RPC call.

        The stub's signature defines the request: its annotations validate
        the parameters before the request is sent (pydantic.ValidationError),
        and its return annotation validates the result.
        """

        def _registrator(_handler: JsonRpcClientSender) -> JsonRpcClientSender:
            return _register_sender(_handler, name)

        if handler:
            return _registrator(handler)
        return _registrator


JsonRpcClientSender = Callable[..., Awaitable[Any]]


def _register_sender(handler: JsonRpcClientSender, name: str | None) -> Callable:
    method = JsonRpcMethod.from_handler(handler, name)
    assert method.is_async_def, "JsonRpcClient support only async methods"
    assert method.has_self, "JsonRpcClient support only object methods"

    async def _callback(self: JsonRpcClient, *args, **kwargs) -> Any:
        param_value_list = _kwargs_to_params(method, list(args), **kwargs)
        req_id = str(next(self._id))
        req_model = JsonRpcRequest(
            id=req_id,
            jsonrpc="2.0",
            method=method.name,
            params=param_value_list,
        )
        req_json = req_model.to_json()

        resp_json = await self._send_post_request(req_json)
        try:
            resp_model = JsonRpcResp.from_json(resp_json)
        except ValueError as exc:
            # pydantic.ValidationError or a broken response structure
            raise ParseRespError(exc)

        if req_model.id != resp_model.id:
            raise ParseRespError(None, error_list=("Response id mismatch",))

        return _extract_return(method, resp_model)

    _callback.__name__ = handler.__name__
    _callback.__doc__ = handler.__doc__
    return _callback


def _kwargs_to_params(method: JsonRpcMethod, args: list[Any], **kwargs) -> list:
    param_name_list = method.param_name_list

    assert len(args) <= len(param_name_list), f"Surplus positional arguments {len(args) - len(param_name_list)}"
    for param_name, param_value in zip(param_name_list, args):
        assert param_name not in kwargs, f"Duplicate value for {param_name}"
        kwargs[param_name] = param_value
    assert len(kwargs) <= len(param_name_list)
    params_model = method.RequestValidator(**kwargs)

    param_value_dict = params_model.to_dict()
    return [param_value_dict[param_name] for param_name in param_name_list]


def _extract_return(method: JsonRpcMethod, resp: JsonRpcResp) -> Any:
    if resp.is_error:
        error = resp.error
        error_list: list[str] | str = tuple()
        if isinstance(error.data, dict):
            error_list = error.data.get("errors", tuple())
        elif isinstance(error.data, str):
            error_list = error.data

        _JsonRpcError = JsonRpcErrorDict.get(error.code, BaseJsonRpcError)
        raise _JsonRpcError(
            message=error.message,
            error_list=error_list,
            code=error.code,
        )

    try:
        if method.ReturnValidator:
            return_model = method.ReturnValidator.from_dict(dict(result=resp.result))
            return getattr(return_model, "result")

        return method.ReturnType.from_dict(resp.result)  # noqa

    except PydanticValidationError as exc:
        raise ParseRespError(exc)
