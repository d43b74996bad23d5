from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import logging.config
import os
import pathlib
import traceback
from datetime import datetime
from logging import LogRecord, Filter


class Logger:
    """Common logging utilities and setup."""

    @staticmethod
    def setup(level: str | None = None) -> None:
        logging.basicConfig(
            level=(level or os.environ.get("LOG_LEVEL", "INFO")).upper(),
            format="%(asctime)s - pid:%(process)d [%(levelname)-.1s] %(filename)s:%(lineno)d - %(message)s",
        )

        log_cfg_path = pathlib.Path(os.environ.get("LOG_CFG_PATH", "log_cfg.json"))
        if log_cfg_path.exists() and log_cfg_path.is_file():
            with open(log_cfg_path, "r") as log_cfg_file:
                data = json.load(log_cfg_file)
                logging.config.dictConfig(data)


def log_msg(message: str, **kwargs) -> dict:
    return dict(message=message, **kwargs)


def _get_root_path_len() -> int:
    """Extract len of root for the current file.
    Logic is based on the path: $l2_pathname/ common/utils/json_logger.py
    """
    l0_pathname, _ = os.path.split(__file__)
    l1_pathname, _ = os.path.split(l0_pathname)
    l2_pathname, _ = os.path.split(l1_pathname)
    return len(l2_pathname) + 1


_SKIP_ROOTPATH_LEN = _get_root_path_len()
_BASE_ROOTPATH = __file__[:_SKIP_ROOTPATH_LEN]


class JSONFormatter(logging.Formatter):
    """One JSON object per record; dict messages are rendered with str.format()."""

    def format(self, record: LogRecord) -> str:
        pathname = record.pathname
        if pathname.startswith(_BASE_ROOTPATH):
            pathname = pathname[_SKIP_ROOTPATH_LEN:]

        msg_dict = {
            "level": record.levelname,
            "date": datetime.fromtimestamp(record.created).isoformat(),
            "module": pathname + ":" + str(record.lineno),
        }

        msg_filter = getattr(record, "msg_filter", None)
        if isinstance(record.msg, dict):
            if msg_filter:
                msg = {k: msg_filter(v) for k, v in record.msg.items()}
            else:
                msg = dict(record.msg)

            base_msg = msg.pop("message", "")
            msg_dict["message"] = base_msg.format(**msg)
        else:
            msg = record.getMessage()
            if msg_filter:
                msg = msg_filter(msg)
            msg_dict["message"] = msg

        if ctx := getattr(record, "context", None):
            msg_dict.update(ctx)

        if record.exc_info:
            msg_dict["exc_info"] = self._get_exc_info(record, msg_filter)

        return json.dumps(msg_dict, default=str)

    @staticmethod
    def _get_exc_info(record: LogRecord, msg_filter) -> dict:
        exc_msg = str(record.exc_info[1])
        if msg_filter:
            exc_msg = msg_filter(exc_msg)
        exc_tb = map(
            lambda line: line.strip().replace('"', "'").replace("\n", "; ").replace(_BASE_ROOTPATH, ""),
            traceback.format_tb(record.exc_info[2]),
        )
        return {
            "type": str(record.exc_info[0]),
            "error": exc_msg,
            "traceback": tuple(exc_tb),
        }


_LOG_CTX = contextvars.ContextVar("log_context", default=dict())


class ContextFilter(Filter):
    def filter(self, record: LogRecord) -> bool:
        record.context = _LOG_CTX.get()
        return True


@contextlib.contextmanager
def logging_context(**kwargs):
    old_log_ctx = _LOG_CTX.get()

    new_log_ctx = dict(**old_log_ctx)
    new_log_ctx.update(kwargs)
    _LOG_CTX.set(new_log_ctx)

    try:
        yield
    finally:
        _LOG_CTX.set(old_log_ctx)
