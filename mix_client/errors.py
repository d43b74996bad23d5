from __future__ import annotations

from typing import Sequence

from common.http.errors import BaseHttpError


class MixClientError(BaseHttpError):
    pass


class ConnectivityError(MixClientError):
    def __init__(self, message: str = "not connected to network", error_list: str | Sequence[str] = tuple()) -> None:
        super().__init__(message, error_list)


class RetrievalError(MixClientError):
    """A node call failed on the transport level, it isn't a "not found" answer."""

    def __init__(
        self,
        call_name: str,
        src: BaseException | None = None,
        *,
        error_list: str | Sequence[str] = tuple(),
    ) -> None:
        error_list = self._create_error_list(src, error_list)
        super().__init__(f"failed to get {call_name}", error_list)
        self._call_name = call_name

    @property
    def call_name(self) -> str:
        return self._call_name
