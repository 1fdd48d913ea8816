import itertools
import sys
import unittest
from pathlib import Path

MODULE_DIR = Path(__file__).resolve().parent

if __package__:
    from .launcher_protocol import StatusBit
    from .launcher_responses import LauncherResponseDecoder, LauncherStatus
else:
    if str(MODULE_DIR) not in sys.path:
        sys.path.insert(0, str(MODULE_DIR))
    from launcher_protocol import StatusBit  # type: ignore
    from launcher_responses import LauncherResponseDecoder, LauncherStatus  # type: ignore


def encode_status_byte(status: LauncherStatus) -> int:
    value = 0
    if status.down_limit:
        value |= StatusBit.DOWN_LIMIT
    if status.up_limit:
        value |= StatusBit.UP_LIMIT
    if status.left_limit:
        value |= StatusBit.LEFT_LIMIT
    if status.right_limit:
        value |= StatusBit.RIGHT_LIMIT
    if status.fired:
        value |= StatusBit.FIRED
    return int(value)


class LauncherResponseDecoderTests(unittest.TestCase):
    def test_mixed_status_byte(self) -> None:
        status = LauncherResponseDecoder.status_byte(0x1B)
        self.assertTrue(status.down_limit)
        self.assertTrue(status.up_limit)
        self.assertFalse(status.left_limit)
        self.assertTrue(status.right_limit)
        self.assertTrue(status.fired)
        self.assertEqual(status.raw, 0x1B)

    def test_zero_byte_is_all_false(self) -> None:
        status = LauncherResponseDecoder.status_byte(0x00)
        self.assertEqual(
            status.as_dict(),
            {
                "upLimit": False,
                "downLimit": False,
                "leftLimit": False,
                "rightLimit": False,
                "fired": False,
            },
        )

    def test_high_bits_are_ignored(self) -> None:
        status = LauncherResponseDecoder.status_byte(0xFF)
        self.assertTrue(all(status.as_dict().values()))
        self.assertEqual(LauncherResponseDecoder.status_byte(0xE0).as_dict(),
                         LauncherResponseDecoder.status_byte(0x00).as_dict())

    def test_decode_inverts_bit_packing(self) -> None:
        for flags in itertools.product((False, True), repeat=5):
            status = LauncherStatus(*flags)
            decoded = LauncherResponseDecoder.status_byte(encode_status_byte(status))
            self.assertEqual(decoded.as_dict(), status.as_dict())

    def test_status_uses_first_byte_of_report(self) -> None:
        self.assertTrue(LauncherResponseDecoder.status([0x10]).fired)
        self.assertTrue(LauncherResponseDecoder.status(bytes([0x04, 0x00])).left_limit)

    def test_empty_report_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            LauncherResponseDecoder.status([])


if __name__ == "__main__":
    unittest.main()
