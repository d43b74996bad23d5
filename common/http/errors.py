from __future__ import annotations

from typing import Sequence

from pydantic import ValidationError as PydanticValidationError


class BaseHttpError(Exception):
    def __init__(self, message: str, error_list: str | Sequence[str] = tuple()):
        super().__init__(message)
        self._msg = message
        if isinstance(error_list, str):
            self._error_list = tuple([error_list])
        else:
            self._error_list = tuple(error_list)

    @property
    def message(self) -> str:
        return self._msg

    @property
    def error_list(self) -> Sequence[str]:
        return self._error_list

    def __str__(self) -> str:
        if not self._error_list:
            return self._msg
        return self._msg + ". " + ". ".join(self._error_list)

    @classmethod
    def _create_error_list(
        cls,
        src: BaseException | None,
        src_error_list: str | Sequence[str],
    ) -> list[str]:
        res_error_list: list[str] = list()
        if isinstance(src, PydanticValidationError):
            res_error_list = cls._format_pydantic_error_list(src)
        elif src:
            res_error_list = [str(src) or type(src).__name__]

        if isinstance(src_error_list, str):
            res_error_list.append(src_error_list)
        elif src_error_list:
            res_error_list.extend(src_error_list)

        return res_error_list

    @staticmethod
    def _format_pydantic_error_list(src: PydanticValidationError) -> list[str]:
        error_list: list[str] = list()
        if not src:
            return error_list

        for error in src.errors():
            input_name = ".".join(str(v) for v in error["loc"])
            msg = error["msg"]
            error_list.append(f"The parameter '{input_name}': {msg}.")

        return error_list


class HttpTransportError(BaseHttpError):
    """The remote side didn't answer: connection, timeout or HTTP status failure."""

    def __init__(self, url: str, src: BaseException | None = None, *, attempt_cnt: int = 1) -> None:
        error_list = self._create_error_list(src, tuple())
        super().__init__(f"failed request to {url} after {attempt_cnt} attempt(s)", error_list)
        self._url = url
        self._attempt_cnt = attempt_cnt

    @property
    def url(self) -> str:
        return self._url

    @property
    def attempt_cnt(self) -> int:
        return self._attempt_cnt
