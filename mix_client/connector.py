from __future__ import annotations

import abc
import logging
import os
from typing import Sequence

from common.config.config import Config
from common.http.utils import HttpURL
from .errors import ConnectivityError
from .node_client import EthNodeClient
from .node_provider import NodeProvider

_LOG = logging.getLogger(__name__)


class ConnectionStrategy(abc.ABC):
    """One way to get a NodeProvider; None means the way isn't applicable."""

    name: str = "unknown"

    @abc.abstractmethod
    def create_provider(self) -> NodeProvider | None: ...

    async def release(self, provider: NodeProvider) -> None:
        await provider.stop()


class InjectedProviderStrategy(ConnectionStrategy):
    name = "injected provider"

    def __init__(self, provider: NodeProvider | None) -> None:
        self._provider = provider

    def create_provider(self) -> NodeProvider | None:
        return self._provider

    async def release(self, provider: NodeProvider) -> None:
        # the caller owns the provider
        pass


class _BaseUrlStrategy(ConnectionStrategy):
    def __init__(self, cfg: Config) -> None:
        self._cfg = cfg

    @abc.abstractmethod
    def _get_url_list(self) -> Sequence[str]: ...

    def create_provider(self) -> NodeProvider | None:
        url_list = [url for url in self._get_url_list() if is_valid_node_url(url)]
        if not url_list:
            return None
        return EthNodeClient(self._cfg, url_list)


class ExplicitUrlStrategy(_BaseUrlStrategy):
    name = "explicit URL"

    def __init__(self, cfg: Config, node_url: str | None) -> None:
        super().__init__(cfg)
        self._node_url = node_url

    def _get_url_list(self) -> Sequence[str]:
        return (self._node_url,) if self._node_url else tuple()


class StoredUrlStrategy(_BaseUrlStrategy):
    name = "stored URL"

    def _get_url_list(self) -> Sequence[str]:
        node_url = read_stored_node_url(self._cfg.node_uri_path)
        return (node_url,) if node_url else tuple()


class ConfiguredUrlStrategy(_BaseUrlStrategy):
    name = "configured URL"

    def _get_url_list(self) -> Sequence[str]:
        return self._cfg.node_url_list


def build_strategy_list(
    cfg: Config,
    *,
    node_url: str | None = None,
    provider: NodeProvider | None = None,
) -> list[ConnectionStrategy]:
    return [
        InjectedProviderStrategy(provider),
        ExplicitUrlStrategy(cfg, node_url),
        StoredUrlStrategy(cfg),
        ConfiguredUrlStrategy(cfg),
    ]


async def connect_node(strategy_list: Sequence[ConnectionStrategy]) -> NodeProvider:
    """Returns the first provider that is connected to the node.

    A provider which isn't connected is released and the next strategy is tried.
    """
    for strategy in strategy_list:
        provider = strategy.create_provider()
        if provider is None:
            _LOG.debug("skip %s: not applicable", strategy.name)
            continue

        await provider.start()
        if await provider.is_connected():
            _LOG.debug("connected to the node by %s", strategy.name)
            return provider

        _LOG.warning("%s isn't connected to the node, try the next way", strategy.name)
        await strategy.release(provider)

    raise ConnectivityError(error_list=("no viable node provider",))


def is_valid_node_url(node_url: str) -> bool:
    try:
        url = HttpURL(node_url)
    except (TypeError, ValueError):
        return False
    return url.is_absolute() and (url.scheme in ("http", "https"))


def read_stored_node_url(path: str) -> str | None:
    if not os.path.isfile(path):
        return None

    with open(path, "r", encoding="utf-8") as file:
        node_url = file.read().strip()

    if not node_url:
        return None
    elif not is_valid_node_url(node_url):
        _LOG.warning("skip the bad node URL from %s", path)
        return None
    return node_url


def store_node_url(path: str, node_url: str | None) -> None:
    """Saves the preferred node URL, an empty value removes the preference."""
    if not node_url:
        if os.path.isfile(path):
            os.remove(path)
        return

    node_url = node_url.strip()
    if not is_valid_node_url(node_url):
        raise ValueError(f"Wrong node URL: {node_url}")

    dir_name = os.path.dirname(path)
    if dir_name:
        os.makedirs(dir_name, exist_ok=True)
    with open(path, "w", encoding="utf-8") as file:
        file.write(node_url + "\n")
