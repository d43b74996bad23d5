from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Callable

import pydantic
from pydantic import Field
from typing_extensions import Self

from ..http.utils import HttpMethod, http_validate_method_name
from ..utils.pydantic import BaseModel


@dataclass(frozen=True)
class JsonRpcMethod(HttpMethod):
    RequestValidator: type[BaseModel]
    ReturnValidator: type[BaseModel] | None

    @classmethod
    def from_handler(cls, handler: Callable, name: str = None) -> Self:
        method = HttpMethod.from_handler(handler)

        kwargs = dataclasses.asdict(method)
        kwargs.pop("name")

        name = name or method.name
        http_validate_method_name(name)

        return cls(
            **kwargs,
            name=name,
            RequestValidator=_create_request_validator(method),
            ReturnValidator=_create_return_validator(method),
        )


def _create_request_validator(method: HttpMethod) -> type[BaseModel]:
    # Get parameters from the method signature
    param_list = [method.signature.parameters.get(n) for n in method.param_name_list]
    param_dict = {
        p.name: (method.type_hint_dict[p.name], Field(...) if p.default is p.empty else p.default) for p in param_list
    }

    # Create pydantic.BaseModel for input parameters validation
    return pydantic.create_model(
        f"_JsonRpcRequest[{method.module}:{method.name}]",
        __module__=method.module,
        __base__=BaseModel,
        **param_dict,
    )


def _create_return_validator(method: HttpMethod) -> type[BaseModel] | None:
    assert "return" in method.type_hint_dict, "Method must return a value"

    if _is_base_model(method.ReturnType):
        # exclude surplus type conversions
        return None

    return pydantic.create_model(
        f"_JsonRpcResp[{method.module}:{method.name}]",
        __module__=method.module,
        __base__=BaseModel,
        result=(method.ReturnType, Field(...)),
    )


def _is_base_model(cls: type) -> bool:
    try:
        return issubclass(cls, BaseModel)
    except (BaseException,):
        return False
