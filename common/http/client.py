from __future__ import annotations

import asyncio
import itertools
import logging
import random
from dataclasses import dataclass
from typing import Sequence

import aiohttp.client as _cl
from typing_extensions import Self

from .errors import HttpTransportError
from .utils import HttpURL, HttpStrOrURL
from ..config.config import Config
from ..config.constants import MIX_CLIENT_PKG_VER
from ..config.utils import LogMsgFilter
from ..utils.cached import cached_property

_LOG = logging.getLogger(__name__)

HttpClientSession = _cl.ClientSession
HttpClientTimeout = _cl.ClientTimeout
HttpClientError = _cl.ClientError


@dataclass
class HttpClientRequest:
    data: str
    header_dict: dict[str, str]
    path: HttpURL | None

    base_url: HttpURL | None = None
    url: HttpURL | None = None

    def build_url(self, base_url: HttpURL) -> Self:
        if base_url != self.base_url:
            self.base_url = base_url
            self.url = base_url.join(self.path) if self.path else base_url
        return self


class HttpClient:
    def __init__(self, cfg: Config) -> None:
        self._cfg = cfg
        self._msg_filter = LogMsgFilter(self._cfg)
        self._base_url_list: list[HttpURL] = list()
        self._timeout = HttpClientTimeout(total=cfg.node_timeout_sec)
        self._is_started = False
        self._is_stopped = False
        self._raise_for_status = True
        self._max_retry_cnt = cfg.node_max_retry_cnt
        self._retry_sleep_sec = 1.0
        self._header_dict = {
            "Content-Type": "application/json; charset=utf-8",
            "User-Agent": MIX_CLIENT_PKG_VER,
        }

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.stop()

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        self._is_stopped = True
        if self._is_started:
            await self.session.close()
            self._is_started = False

    @cached_property
    def session(self) -> HttpClientSession:
        self._is_started = True
        return HttpClientSession(base_url=None, timeout=self._timeout)

    @property
    def base_url_list(self) -> Sequence[HttpURL]:
        return tuple(self._base_url_list)

    def set_timeout_sec(self, timeout_sec: float) -> Self:
        assert not self._is_started
        self._timeout = HttpClientTimeout(total=timeout_sec)
        return self

    def set_max_retry_cnt(self, max_retry_cnt: int) -> Self:
        assert max_retry_cnt > 0, "max_retry_cnt must be greater than 0"
        self._max_retry_cnt = max_retry_cnt
        return self

    def set_retry_sleep_sec(self, sleep_sec: float) -> Self:
        self._retry_sleep_sec = sleep_sec
        return self

    def connect(
        self,
        *,
        base_url: HttpStrOrURL | None = None,
        base_url_list: Sequence[HttpStrOrURL] | None = None,
    ) -> Self:
        if base_url is not None:
            assert base_url_list is None, "'base_url' cannot be mixed with 'base_url_list'"
            self._connect_to_url(HttpURL(base_url))
        else:
            assert base_url_list is not None, "method must have parameters"
            for base_url in base_url_list:
                self._connect_to_url(HttpURL(base_url))

        return self

    def _connect_to_url(self, base_url: HttpURL):
        assert base_url.is_absolute(), "'base_url' must be absolute"

        self._base_url_list.append(base_url)
        # the URL can come from a command line, not only from the environment
        self._msg_filter = LogMsgFilter(self._cfg, [str(url) for url in self._base_url_list])
        _LOG.debug("connect to the URL: %s", str(base_url), extra=self._msg_filter)

    async def _send_post_request(self, data: str, *, path: HttpURL | None = None) -> str:
        assert len(self._base_url_list), "HttpClient must have at least one remote URL"

        request = HttpClientRequest(
            data=data,
            header_dict=self._header_dict,
            path=path,
        )
        return await _send_post_request(self, request)

    def _exception_handler(self, request: HttpClientRequest, retry: int, exc: BaseException) -> None:
        """Exception handler for send request.
        Raises HttpTransportError when the attempts are exhausted,
        otherwise writes the exception message to logs.
        """

        msg = dict(
            message="error on attempt {Retry} on request to {Path}: {Error}",
            Retry=retry + 1,
            Path=str(request.url),
            Error=str(exc) or type(exc).__name__,
        )
        _LOG.warning(msg, extra=self._msg_filter)

        if self._is_stopped or (retry + 1 >= self._max_retry_cnt):
            raise HttpTransportError(str(request.url), exc, attempt_cnt=retry + 1) from exc


async def _send_post_request(self: HttpClient, req: HttpClientRequest) -> str:
    base_url_list = self._base_url_list.copy()
    random.shuffle(base_url_list)
    base_url_list = itertools.cycle(base_url_list)
    for retry in itertools.count():
        base_url = next(base_url_list)
        req.build_url(base_url)

        try:
            if self._is_stopped:
                raise HttpClientError("client is stopped")

            async with self.session.post(req.url, data=req.data, headers=req.header_dict) as resp:
                if self._raise_for_status:
                    resp.raise_for_status()
                return await resp.text()
        except (HttpClientError, asyncio.TimeoutError) as exc:
            # Raises HttpTransportError on the last attempt
            self._exception_handler(req, retry, exc)

        await asyncio.sleep(self._retry_sleep_sec)
        _LOG.debug("attempt %d to repeat...", retry + 2)
