from __future__ import annotations

import logging
import os
import re
from decimal import Decimal
from typing import Final

from .constants import (
    ONE_BLOCK_SEC,
    DEFAULT_BLOCK_WINDOW_SIZE,
    DEFAULT_NODE_URI_PATH,
    MIX_CLIENT_VER,
)
from ..utils.cached import cached_property, cached_method
from ..utils.format import str_fmt_object

_LOG = logging.getLogger(__name__)
_RE_SPLIT_REGEX = re.compile(r",|;|\s")


class Config:
    hide_sensitive_info_name: Final[str] = "HIDE_SENSITIVE_INFO"
    # Node settings
    node_url_name: Final[str] = "NODE_URL"
    node_uri_path_name: Final[str] = "NODE_URI_PATH"
    node_timeout_sec_name: Final[str] = "NODE_TIMEOUT_SEC"
    node_max_retry_cnt_name: Final[str] = "NODE_MAX_RETRY_COUNT"
    # Query settings
    request_timeout_sec_name: Final[str] = "REQUEST_TIMEOUT_SEC"
    block_window_size_name: Final[str] = "BLOCK_WINDOW_SIZE"
    block_poll_sec_name: Final[str] = "BLOCK_POLL_SEC"

    _1min: Final[int] = 60
    _1hour: Final[int] = 60 * 60

    @staticmethod
    def _split_str(src: str) -> list[str]:
        str_list = _RE_SPLIT_REGEX.split(src)
        str_list = [s.strip() for s in str_list]
        return [s for s in str_list if s]

    @staticmethod
    def _env_bool(name: str, default_value: bool) -> bool:
        true_value_list = ("TRUE", "YES", "ON", "1")
        false_value_list = ("FALSE", "NO", "OFF", "0")
        os_def_value = true_value_list[0] if default_value else false_value_list[0]

        value = os.environ.get(name, os_def_value).upper().strip()  # fmt: skip
        if (value not in true_value_list) and (value not in false_value_list):
            _LOG.warning(
                "%s can be: %s or %s, force to use the default value %s",
                name,
                true_value_list,
                false_value_list,
                os_def_value,
            )
            return default_value

        return value in true_value_list

    @staticmethod
    def _env_num(
        name: str,
        default_value: int | float | Decimal,
        min_value: int | float | Decimal | None = None,
        max_value: int | float | Decimal | None = None,
    ) -> int | float | Decimal:
        value = os.environ.get(name, None)
        if value is None:
            return default_value

        try:
            if isinstance(default_value, int):
                value = int(value, base=10)
            elif isinstance(default_value, float):
                value = float(value)
            else:
                value = Decimal(value)

            if min_value is not None:
                assert type(min_value) is type(default_value), f"{type(min_value)} is {type(default_value)}"
                if value < min_value:
                    _LOG.warning("%s cannot be less than min value %s", name, min_value)
                    value = min_value

            if max_value is not None:
                assert type(max_value) is type(default_value)
                if value > max_value:
                    _LOG.warning("%s cannot be bigger than max value %s", name, max_value)
                    value = max_value
            return value

        except ValueError:
            _LOG.warning("bad value for %s, force to use the default value %s", name, default_value)
            return default_value

    ###################
    # Base settings

    @cached_property
    def hide_sensitive_info(self) -> bool:
        return self._env_bool(self.hide_sensitive_info_name, True)

    @cached_property
    def sensitive_info_list(self) -> tuple[str, ...]:
        res_set = set([item for item in self.node_url_list if item])
        res_list = sorted(res_set, key=lambda x: len(x), reverse=True)
        return tuple(res_list)

    #################
    # Node settings

    @cached_property
    def node_url_list(self) -> tuple[str, ...]:
        """URLs from the environment, the last step of the connection chain."""
        return tuple(self._split_str(os.environ.get(self.node_url_name, "")))

    @cached_property
    def node_uri_path(self) -> str:
        value = os.environ.get(self.node_uri_path_name, DEFAULT_NODE_URI_PATH)
        return os.path.expanduser(value.strip() or DEFAULT_NODE_URI_PATH)

    @cached_property
    def node_timeout_sec(self) -> float:
        return float(self._env_num(self.node_timeout_sec_name, 30, 1, self._1hour))

    @cached_property
    def node_max_retry_cnt(self) -> int:
        return self._env_num(self.node_max_retry_cnt_name, 1, 1, 100)

    ##################
    # Query settings

    @cached_property
    def request_timeout_sec(self) -> float:
        return float(self._env_num(self.request_timeout_sec_name, self._1min, 1, self._1hour))

    @cached_property
    def block_window_size(self) -> int:
        return self._env_num(self.block_window_size_name, DEFAULT_BLOCK_WINDOW_SIZE, 2, 256)

    @cached_property
    def block_poll_sec(self) -> float:
        default_value = float(min(2.0, ONE_BLOCK_SEC))
        return self._env_num(self.block_poll_sec_name, default_value, 0.1, 600.0)

    @cached_method
    def to_string(self) -> str:
        cfg_dict = {
            "MIX_CLIENT_VER": MIX_CLIENT_VER,
            "NODE_BLOCK_SEC": ONE_BLOCK_SEC,
            self.hide_sensitive_info_name: self.hide_sensitive_info,
            # Node settings
            self.node_url_name: self.node_url_list,
            self.node_uri_path_name: self.node_uri_path,
            self.node_timeout_sec_name: self.node_timeout_sec,
            self.node_max_retry_cnt_name: self.node_max_retry_cnt,
            # Query settings
            self.request_timeout_sec_name: self.request_timeout_sec,
            self.block_window_size_name: self.block_window_size,
            self.block_poll_sec_name: self.block_poll_sec,
        }

        return str_fmt_object(self._filter_sensitive_info(cfg_dict))

    def _filter_sensitive_info(self, cfg_dict: dict) -> dict:
        if not self.hide_sensitive_info:
            return cfg_dict

        sensitive_info_list = self.sensitive_info_list
        hide_key_list: list[str] = list()

        def _is_sensitive_info(_value: str) -> bool:
            return _value in sensitive_info_list

        for key, value in cfg_dict.items():
            if isinstance(value, (list, set, tuple)):
                for item in value:
                    if _is_sensitive_info(item):
                        hide_key_list.append(key)
                        break
            elif _is_sensitive_info(value):
                hide_key_list.append(key)

        for key in hide_key_list:
            cfg_dict[key] = "?*****?"

        return cfg_dict
