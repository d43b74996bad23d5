from __future__ import annotations

from typing import Sequence

from .config import Config


class _SensitiveInfoMask:
    """Replaces node URLs in log messages: they often carry API keys or credentials."""

    _mask = "*****"

    def __init__(self, sensitive_info_list: Sequence[str]) -> None:
        # longer values first, so a URL isn't partially masked by its own prefix
        self._item_list = sorted({item for item in sensitive_info_list if item}, key=len, reverse=True)

    def __call__(self, value):
        if isinstance(value, str):
            return self._mask_str(value)
        elif isinstance(value, list):
            return [self._mask_str(item) if isinstance(item, str) else item for item in value]
        return value

    def _mask_str(self, value: str) -> str:
        for item in self._item_list:
            value = value.replace(item, self._mask)
        return value


def LogMsgFilter(cfg: Config, extra_info_list: Sequence[str] = tuple()) -> dict:  # noqa
    """The `extra` argument for logger calls.

    Besides the URLs from the environment, the caller can pass the URLs which came
    from other sources: a command line or the stored preference.
    """
    if cfg.hide_sensitive_info:
        return dict(msg_filter=_SensitiveInfoMask(tuple(cfg.sensitive_info_list) + tuple(extra_info_list)))
    return dict()


def hide_sensitive_info(msg_filter: dict, value: str | Sequence[str]) -> str | list[str]:
    if "msg_filter" in msg_filter:
        return msg_filter["msg_filter"](value)
    return value
