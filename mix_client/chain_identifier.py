from __future__ import annotations

import logging
from typing import Final, Mapping

from .api import EthNetwork
from .node_provider import NodeProvider

_LOG = logging.getLogger(__name__)

# The first block after the DAO hard fork: the chains have different hashes for it
IDENTIFYING_BLOCK_NUMBER: Final[int] = 1_920_001

IDENTIFYING_BLOCK_HASH_DICT: Final[Mapping[str, EthNetwork]] = {
    "0x4fa57903dad05875ddf78030c16b5da886f7d81714cf66946a4c02566dbb2af5": EthNetwork.Mix,
    "0x87b2bc3f12e3ded808c6d4b9b528381fa2a7e95ff2368ba93191a9495daa7f50": EthNetwork.Ethereum,
    "0xab7668dfd3bedcf9da505d69306e8fd12ad78116429cf8880a9942c6f0605b60": EthNetwork.EthereumClassic,
}


class ChainIdentifier:
    def __init__(self, provider: NodeProvider, hash_dict: Mapping[str, str] | None = None) -> None:
        self._provider = provider

        self._hash_dict: dict[str, str] = dict(IDENTIFYING_BLOCK_HASH_DICT)
        if hash_dict:
            self._hash_dict.update({block_hash.lower(): name for block_hash, name in hash_dict.items()})

    async def identify(self) -> EthNetwork | str:
        """Returns the network name, or EthNetwork.Unknown for an unknown or a short chain.

        Names from the extra chains are returned as they are.
        """
        block = await self._provider.get_block(IDENTIFYING_BLOCK_NUMBER)
        if block is None:
            _LOG.debug("no block %s, the chain is too short", IDENTIFYING_BLOCK_NUMBER)
            return EthNetwork.Unknown

        block_hash = block.hash.to_string("")
        network = self._hash_dict.get(block_hash, EthNetwork.Unknown)
        _LOG.debug("block %s has the hash %s: %s", IDENTIFYING_BLOCK_NUMBER, block_hash, network)
        return network
