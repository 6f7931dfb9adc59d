import unittest

from txscope.adapters.source.static_source_adapter import StaticTransactionSource
from txscope.core.dto import RawEvmLog, RawEvmReceipt, RawEvmTransaction
from txscope.core.errors import InvalidReference, NotFound, UnsupportedChain
from txscope.core.models import TransactionStatus
from txscope.core.registry import build_default_registry
from txscope.services.evm_analyzer import (
    TRANSFER_EVENT_SIGNATURE,
    EvmAnalyzer,
    compute_fee,
    decode_transfer,
    extract_transfers,
    parse_tx_hash,
)

TX_HASH = "0x" + "ab" * 32
SENDER = "0x" + "11" * 20
OTHER = "0x" + "22" * 20
RECIPIENT = "0x" + "33" * 20
TOKEN = "0x" + "44" * 20


def _topic(address: str) -> str:
    return "0x" + "00" * 12 + address[2:]


def _word(n: int) -> str:
    return "0x" + n.to_bytes(32, "big").hex()


def _transfer_log(frm: str, to: str, amount: int, token: str = TOKEN) -> RawEvmLog:
    return RawEvmLog(
        address=token,
        topics=(TRANSFER_EVENT_SIGNATURE, _topic(frm), _topic(to)),
        data=_word(amount),
    )


def _tx(**overrides) -> RawEvmTransaction:
    defaults = dict(
        tx_hash=TX_HASH,
        from_address=SENDER,
        to_address=RECIPIENT,
        value_wei=10**18,
        gas_limit=21000,
        gas_price=50_000_000_000,
    )
    defaults.update(overrides)
    return RawEvmTransaction(**defaults)


class EvmAnalyzerTests(unittest.TestCase):
    def _analyzer(self, tx=None, receipt=None) -> EvmAnalyzer:
        source = StaticTransactionSource(
            evm_transactions={TX_HASH: tx} if tx else None,
            evm_receipts={TX_HASH: receipt} if receipt else None,
        )
        self.source = source
        return EvmAnalyzer(build_default_registry(), source)

    def test_settled_success_fee_and_status(self) -> None:
        receipt = RawEvmReceipt(status=1, gas_used=21000, block_number=19_000_000)
        a = self._analyzer(_tx(), receipt).analyze("ethereum", TX_HASH)

        self.assertEqual(a.transaction_fee, 1_050_000_000_000_000)
        self.assertEqual(a.transaction_status, TransactionStatus.SUCCESS)
        self.assertEqual(a.block_number, 19_000_000)
        self.assertEqual(a.gas_used, 21000)
        self.assertEqual(a.chain_name, "Ethereum Mainnet")
        self.assertEqual(a.chain_id, 1)
        self.assertEqual(a.native_token, "ETH")

    def test_failed_receipt(self) -> None:
        receipt = RawEvmReceipt(status=0, gas_used=30000, block_number=5)
        a = self._analyzer(_tx(), receipt).analyze("base", TX_HASH)

        self.assertEqual(a.transaction_status, TransactionStatus.FAILED)
        self.assertEqual(a.transaction_fee, 30000 * 50_000_000_000)

    def test_missing_receipt_is_pending(self) -> None:
        a = self._analyzer(_tx()).analyze("ethereum", TX_HASH)

        self.assertEqual(a.transaction_status, TransactionStatus.PENDING)
        self.assertIsNone(a.transaction_fee)
        self.assertIsNone(a.gas_used)
        self.assertIsNone(a.block_number)
        self.assertEqual(a.erc20_transfers, [])
        self.assertEqual(a.gas_price, 50_000_000_000)

    def test_missing_gas_price_leaves_fee_absent(self) -> None:
        receipt = RawEvmReceipt(status=1, gas_used=21000, block_number=1)
        a = self._analyzer(_tx(gas_price=None), receipt).analyze("ethereum", TX_HASH)

        self.assertIsNone(a.transaction_fee)
        self.assertIsNone(a.gas_price)

    def test_contract_creation_has_no_recipient(self) -> None:
        a = self._analyzer(_tx(to_address=None)).analyze("ethereum", TX_HASH)
        self.assertIsNone(a.to_address)

    def test_transfers_filtered_by_sender(self) -> None:
        logs = (
            _transfer_log(SENDER, RECIPIENT, 500),
            _transfer_log(OTHER, SENDER, 700),
            RawEvmLog(address=TOKEN, topics=("0x" + "ff" * 32,), data="0x"),
        )
        receipt = RawEvmReceipt(status=1, gas_used=60000, block_number=7, logs=logs)
        a = self._analyzer(_tx(), receipt).analyze("ethereum", TX_HASH)

        self.assertEqual(len(a.erc20_transfers), 1)
        t = a.erc20_transfers[0]
        self.assertEqual(t.from_address, SENDER)
        self.assertEqual(t.to_address, RECIPIENT)
        self.assertEqual(t.token_address, TOKEN)
        self.assertEqual(t.amount, 500)

    def test_sender_comparison_ignores_case(self) -> None:
        mixed = "0x" + "Ab" * 20
        log = _transfer_log(mixed.lower(), RECIPIENT, 1)
        receipt = RawEvmReceipt(status=1, gas_used=1, block_number=1, logs=(log,))
        a = self._analyzer(_tx(from_address=mixed), receipt).analyze("ethereum", TX_HASH)

        self.assertEqual(len(a.erc20_transfers), 1)
        self.assertEqual(a.from_address, mixed.lower())

    def test_unknown_chain_makes_no_source_call(self) -> None:
        analyzer = self._analyzer(_tx())
        with self.assertRaises(UnsupportedChain):
            analyzer.analyze("foo", TX_HASH)
        self.assertEqual(self.source.calls, [])

    def test_solana_key_is_not_an_evm_chain(self) -> None:
        with self.assertRaises(UnsupportedChain):
            self._analyzer(_tx()).analyze("solana", TX_HASH)

    def test_malformed_hash(self) -> None:
        analyzer = self._analyzer(_tx())
        for bad in ("", "0x1234", "0x" + "zz" * 32, "0x" + "ab" * 33):
            with self.assertRaises(InvalidReference):
                analyzer.analyze("ethereum", bad)
        self.assertEqual(self.source.calls, [])

    def test_unknown_transaction(self) -> None:
        with self.assertRaises(NotFound):
            self._analyzer().analyze("ethereum", TX_HASH)

    def test_same_input_same_output(self) -> None:
        receipt = RawEvmReceipt(
            status=1, gas_used=21000, block_number=1,
            logs=(_transfer_log(SENDER, RECIPIENT, 42),),
        )
        analyzer = self._analyzer(_tx(), receipt)
        self.assertEqual(analyzer.analyze("ethereum", TX_HASH), analyzer.analyze("ethereum", TX_HASH))

    def test_explorer_link(self) -> None:
        link = self._analyzer().explorer_link("polygon", TX_HASH.upper().replace("0X", "0x"))
        self.assertEqual(link, "https://polygonscan.com/tx/" + TX_HASH)


class TransferDecodingTests(unittest.TestCase):
    def test_short_payload_amount_is_zero(self) -> None:
        log = RawEvmLog(
            address=TOKEN,
            topics=(TRANSFER_EVENT_SIGNATURE, _topic(SENDER), _topic(RECIPIENT)),
            data="0x01",
        )
        t = decode_transfer(log)
        self.assertIsNotNone(t)
        self.assertEqual(t.amount, 0)

    def test_only_first_word_is_read(self) -> None:
        log = RawEvmLog(
            address=TOKEN,
            topics=(TRANSFER_EVENT_SIGNATURE, _topic(SENDER), _topic(RECIPIENT)),
            data=_word(9) + "ff" * 32,
        )
        self.assertEqual(decode_transfer(log).amount, 9)

    def test_two_topics_is_not_a_transfer(self) -> None:
        log = RawEvmLog(address=TOKEN, topics=(TRANSFER_EVENT_SIGNATURE, _topic(SENDER)), data=_word(1))
        self.assertIsNone(decode_transfer(log))

    def test_signature_match_ignores_case(self) -> None:
        log = RawEvmLog(
            address=TOKEN,
            topics=(TRANSFER_EVENT_SIGNATURE.upper().replace("0X", "0x"), _topic(SENDER), _topic(RECIPIENT)),
            data=_word(3),
        )
        self.assertEqual(decode_transfer(log).amount, 3)

    def test_max_uint256_amount(self) -> None:
        max_u256 = 2**256 - 1
        t = decode_transfer(_transfer_log(SENDER, RECIPIENT, max_u256))
        self.assertEqual(t.amount, max_u256)

    def test_undecodable_topic_is_skipped(self) -> None:
        bad = RawEvmLog(address=TOKEN, topics=(TRANSFER_EVENT_SIGNATURE, "0xnothex", _topic(RECIPIENT)))
        good = _transfer_log(SENDER, RECIPIENT, 5)
        out = extract_transfers([bad, good], SENDER)
        self.assertEqual([t.amount for t in out], [5])


class FeeTests(unittest.TestCase):
    def test_fee_is_exact_product(self) -> None:
        self.assertEqual(compute_fee(21000, 50_000_000_000), 1_050_000_000_000_000)
        big = 2**128
        self.assertEqual(compute_fee(big, big), 2**256)

    def test_fee_absent_when_either_side_missing(self) -> None:
        self.assertIsNone(compute_fee(None, 1))
        self.assertIsNone(compute_fee(1, None))
        self.assertIsNone(compute_fee(None, None))

    def test_parse_hash_normalizes(self) -> None:
        self.assertEqual(parse_tx_hash("AB" * 32), TX_HASH)
        self.assertEqual(parse_tx_hash("  " + TX_HASH + " "), TX_HASH)


if __name__ == "__main__":
    unittest.main()
