import unittest
from decimal import Decimal

from swapvol.core.dto import Token, Trade
from swapvol.core.errors import AmountRangeError, ParseError
from swapvol.core.registry import TokenRegistry
from swapvol.core.volume import aggregate_volume, round_volume, total_volume, trade_volume

AZERO = "5Azero"
USDC = "5Usdc"
MEME = "5Meme"


def _trade(amount_in: str, amount_out: str, token_in: str = AZERO, token_out: str = USDC, **overrides) -> Trade:
    fields = dict(
        origin="5User",
        token_in=token_in,
        token_out=token_out,
        path=(token_in, token_out),
        amount_in=amount_in,
        amount_out=amount_out,
        block_num=100,
        extrinsic_index=1,
    )
    fields.update(overrides)
    return Trade(**fields)


class TradeVolumeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = TokenRegistry(
            [
                Token(address=AZERO, symbol="AZERO", decimals=12, price=2.5),
                Token(address=USDC, symbol="USDC", decimals=6, price=1.0),
                Token(address=MEME, symbol="MEME", decimals=18),
            ]
        )

    def test_larger_leg_wins(self) -> None:
        trade = _trade("10000000000000", "24000000")
        self.assertEqual(trade_volume(trade, self.registry), Decimal("25.000"))
        self.assertEqual(str(trade_volume(trade, self.registry)), "25.000")

    def test_output_leg_can_win(self) -> None:
        trade = _trade("10000000000000", "30000000")
        self.assertEqual(str(trade_volume(trade, self.registry)), "30.000")

    def test_both_tokens_unknown_yields_zero(self) -> None:
        trade = _trade("123456", "654321", token_in="5Nope", token_out="5Nada")
        self.assertEqual(str(trade_volume(trade, self.registry)), "0.000")

    def test_missing_price_leg_counts_as_zero(self) -> None:
        trade = _trade("10000000000000", "5" + "0" * 18, token_out=MEME)
        self.assertEqual(str(trade_volume(trade, self.registry)), "25.000")

    def test_both_prices_missing_understates_volume(self) -> None:
        trade = _trade("5" + "0" * 18, "5" + "0" * 18, token_in=MEME, token_out=MEME)
        self.assertEqual(str(trade_volume(trade, self.registry)), "0.000")

    def test_unknown_token_uses_zero_decimals(self) -> None:
        registry = TokenRegistry([Token(address=USDC, symbol="USDC", decimals=6, price=1.0)])
        trade = _trade("7", "1000000", token_in="5Nope")
        self.assertEqual(str(trade_volume(trade, registry)), "1.000")

    def test_rounds_half_up_at_final_step(self) -> None:
        registry = TokenRegistry([Token(address=USDC, symbol="USDC", decimals=4, price=1.0)])
        # 1.0625 is exact in binary, so this is a true tie
        trade = _trade("0", "10625", token_in="5Nope")
        self.assertEqual(str(trade_volume(trade, registry)), "1.063")

    def test_malformed_amount_raises(self) -> None:
        with self.assertRaises(ParseError):
            trade_volume(_trade("-10", "24000000"), self.registry)

    def test_large_volume_keeps_every_integer_digit(self) -> None:
        registry = TokenRegistry([Token(address="5Whale", symbol="WHL", decimals=18, price=1.0)])
        trade = _trade(str(10 ** 45), "0", token_in="5Whale", token_out="5Nope")
        # 1e27 as a float is 1000000000000000013287555072
        self.assertEqual(str(trade_volume(trade, registry)), str(int(1e27)) + ".000")

    def test_unpriced_leg_beyond_float_range_counts_as_zero(self) -> None:
        trade = _trade("1" + "0" * 400, "24000000", token_in="5Nope")
        self.assertEqual(str(trade_volume(trade, self.registry)), "24.000")

    def test_unpriced_leg_still_validates_amount(self) -> None:
        with self.assertRaises(ParseError):
            trade_volume(_trade("abc", "24000000", token_in="5Nope"), self.registry)

    def test_nan_price_fails_on_either_leg(self) -> None:
        registry = TokenRegistry(
            [
                Token(address="5Nan", symbol="NAN", decimals=0, price=float("nan")),
                Token(address=USDC, symbol="USDC", decimals=0, price=1.0),
            ]
        )
        for token_in, token_out in (("5Nan", USDC), (USDC, "5Nan")):
            with self.subTest(token_in=token_in):
                with self.assertRaises(AmountRangeError):
                    trade_volume(_trade("5", "5", token_in=token_in, token_out=token_out), registry)

    def test_round_volume_rejects_non_finite(self) -> None:
        with self.assertRaises(AmountRangeError):
            round_volume(float("inf"))

    def test_overflowing_value_raises(self) -> None:
        registry = TokenRegistry([Token(address="5Big", symbol="BIG", decimals=0, price=1e300)])
        trade = _trade("1" + "0" * 20, "0", token_in="5Big")
        with self.assertRaises(AmountRangeError):
            trade_volume(trade, registry)

    def test_round_volume(self) -> None:
        self.assertEqual(str(round_volume(0.0)), "0.000")
        self.assertEqual(str(round_volume(2.0004)), "2.000")
        self.assertEqual(str(round_volume(2.0006)), "2.001")


class TotalVolumeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = TokenRegistry(
            [
                Token(address=AZERO, symbol="AZERO", decimals=12, price=2.5),
                Token(address=USDC, symbol="USDC", decimals=6, price=1.0),
                Token(address="5Dust", symbol="DUST", decimals=4, price=1.0),
            ]
        )

    def test_empty_sequence(self) -> None:
        self.assertEqual(str(total_volume([], self.registry)), "0.000")

    def test_sums_per_trade_volumes(self) -> None:
        trades = [
            _trade("10000000000000", "24000000"),
            _trade("0", "1500000"),
            _trade("0", "250", token_in="5Nope"),
        ]
        self.assertEqual(str(total_volume(trades, self.registry)), "26.500")

    def test_sums_rounded_values_not_exact_ones(self) -> None:
        # each trade is worth 0.0004; exact sum would be 0.0012 -> 0.001
        trades = [_trade("0", "4", token_in="5Nope", token_out="5Dust") for _ in range(3)]
        self.assertEqual(str(trade_volume(trades[0], self.registry)), "0.000")
        self.assertEqual(str(total_volume(trades, self.registry)), "0.000")

    def test_does_not_mutate_input(self) -> None:
        trades = [_trade("10000000000000", "24000000"), _trade("0", "1000000")]
        before = list(trades)
        total_volume(trades, self.registry)
        self.assertEqual(trades, before)

    def test_bad_trade_is_skipped_and_reported(self) -> None:
        bad = _trade("12.5", "24000000", block_num=7, extrinsic_index=2)
        trades = [_trade("10000000000000", "24000000"), bad]

        with self.assertLogs("swapvol.core.volume", level="WARNING") as logs:
            result = aggregate_volume(trades, self.registry)

        self.assertEqual(str(result.total), "25.000")
        self.assertEqual(result.counted, 1)
        self.assertEqual(len(result.skipped), 1)
        self.assertIs(result.skipped[0].trade, bad)
        self.assertIn("12.5", result.skipped[0].reason)
        self.assertIn("block 7", logs.output[0])

    def test_aggregate_of_256_bit_volume(self) -> None:
        registry = TokenRegistry([Token(address="5Raw", symbol="RAW", decimals=0, price=1.0)])
        trades = [_trade(str(2 ** 255), "0", token_in="5Raw", token_out="5Nope")]

        result = aggregate_volume(trades, registry)

        self.assertEqual(str(result.total), str(2 ** 255) + ".000")
        self.assertEqual(result.volumes, [result.total])
        self.assertEqual(result.skipped, [])

    def test_total_overflow_skips_only_the_overflowing_trade(self) -> None:
        registry = TokenRegistry([Token(address="5Raw", symbol="RAW", decimals=0, price=1.0)])
        big = str(int(1e308))
        trades = [
            _trade(big, "0", token_in="5Raw", token_out="5Nope", block_num=1),
            _trade(big, "0", token_in="5Raw", token_out="5Nope", block_num=2),
        ]

        with self.assertLogs("swapvol.core.volume", level="WARNING"):
            result = aggregate_volume(trades, registry)

        self.assertEqual(result.counted, 1)
        self.assertEqual([s.trade.block_num for s in result.skipped], [2])
        self.assertIsNone(result.volumes[1])

    def test_accepts_any_iterable(self) -> None:
        trades = (t for t in [_trade("10000000000000", "24000000")])
        self.assertEqual(str(total_volume(trades, self.registry)), "25.000")


if __name__ == "__main__":
    unittest.main()
