import unittest

from pydantic import ValidationError

from mix_client.api import BlockWindow, EthBlockModel, EthNetwork, SearchResult
from tests.mix_client.fake_node import ADDRESS, TX_HASH, make_block, make_chain, make_tx


class TestEthModels(unittest.TestCase):
    def test_block_model(self):
        raw_block = {
            "number": "0x1d4c01",
            "hash": "0x4fa57903dad05875ddf78030c16b5da886f7d81714cf66946a4c02566dbb2af5",
            "parentHash": "0x" + "11" * 32,
            "timestamp": "0x57833ba2",
            "difficulty": "0x3e1d9d3b6f0d",
            "totalDifficulty": "0x3ac4bc4b9b7b0b6f9ff",
            "miner": ADDRESS,
            "gasLimit": "0x47e7c4",
            "gasUsed": "0x0",
            "size": "0x21e",
            "nonce": "0x7ba5b7b0b3b0e6f5",
            "mixHash": "0x" + "22" * 32,
            "transactions": [],
            "uncles": [],
        }
        block = EthBlockModel.from_dict(raw_block)
        self.assertEqual(block.number, 1920001)
        self.assertEqual(block.hash, raw_block["hash"])
        self.assertEqual(block.difficulty, 0x3E1D9D3B6F0D)
        self.assertEqual(block.tx_cnt, 0)
        self.assertFalse(block.is_pending)
        self.assertEqual(block.to_dict()["number"], "0x1d4c01")

        pending_block = EthBlockModel.from_dict(dict(raw_block, number=None, hash=None))
        self.assertTrue(pending_block.is_pending)

    def test_tx_model(self):
        tx = make_tx()
        self.assertEqual(tx.hash, TX_HASH)
        self.assertEqual(tx.value, 10**18)
        self.assertFalse(tx.is_pending)
        self.assertTrue(tx.is_contract_creation)
        self.assertEqual(tx.to_dict()["from"], "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")

    def test_network(self):
        self.assertEqual(EthNetwork.EthereumClassic, "Ethereum Classic")
        self.assertTrue(EthNetwork.Unknown.is_unknown)
        self.assertFalse(EthNetwork.Mix.is_unknown)

    def test_search_result(self):
        result = SearchResult(query="10")
        self.assertTrue(result.is_empty)
        self.assertEqual(result.to_dict(), dict(query="10", block=None, account=None, transaction=None))


class TestBlockWindow(unittest.TestCase):
    def test_normalize(self):
        block_list = make_chain(1, [100, 115, 130], [10, 20, 30])
        window = BlockWindow.from_raw(block_list)
        self.assertEqual(window.number_list, (3, 2, 1))
        self.assertEqual(BlockWindow.from_raw(list(reversed(block_list))), window)
        self.assertIs(BlockWindow.from_raw(window), window)
        self.assertEqual(window.latest_block.number, 3)

    def test_duplicates(self):
        first = make_block(5, 100, 10)
        second = make_block(5, 200, 20, "0x" + "ff" * 32)
        window = BlockWindow.from_raw([first, make_block(4, 90, 10), second])
        self.assertEqual(window.number_list, (5, 4))
        self.assertEqual(window.latest_block.timestamp, 100)

    def test_empty(self):
        window = BlockWindow.from_raw(None)
        self.assertTrue(window.is_empty)
        self.assertIsNone(window.latest_block)
        self.assertEqual(window.size, 0)

    def test_wrong_input(self):
        pending_block = EthBlockModel.from_dict(dict(number=None, timestamp="0x1", difficulty="0x1"))
        with self.assertRaises(ValidationError):
            BlockWindow.from_raw([pending_block])

        with self.assertRaises(ValidationError):
            BlockWindow(block_list=("block",))  # noqa

    def test_with_new_block(self):
        window = BlockWindow.from_raw(make_chain(1, [100, 115, 130], [10, 20, 30]))

        new_window = window.with_new_block(make_block(4, 145, 40))
        self.assertEqual(new_window.number_list, (4, 3, 2))
        self.assertEqual(window.number_list, (3, 2, 1))

        bigger_window = window.with_new_block(make_block(4, 145, 40), 10)
        self.assertEqual(bigger_window.number_list, (4, 3, 2, 1))

        first_window = BlockWindow().with_new_block(make_block(7, 100, 10))
        self.assertEqual(first_window.number_list, (7,))


if __name__ == "__main__":
    unittest.main()
