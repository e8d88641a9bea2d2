"""Tests for the formatting and input helpers in wc.util."""

import unittest
from datetime import date, datetime


class TestFormatting(unittest.TestCase):

    def test_format_hms(self):
        from wc.util import format_hms
        self.assertEqual(format_hms(0), "00:00:00")
        self.assertEqual(format_hms(3725), "01:02:05")
        self.assertEqual(format_hms(36000 + 59), "10:00:59")
        self.assertEqual(format_hms(100 * 3600), "100:00:00")

    def test_format_hms_negative_clamps_to_zero(self):
        from wc.util import format_hms
        self.assertEqual(format_hms(-5), "00:00:00")

    def test_format_hours_minutes(self):
        from wc.util import format_hours_minutes
        self.assertEqual(format_hours_minutes(0), "0h 0m")
        self.assertEqual(format_hours_minutes(9000), "2h 30m")
        self.assertEqual(format_hours_minutes(3599), "0h 59m")
        self.assertEqual(format_hours_minutes(27 * 3600 + 61), "27h 1m")

    def test_week_label(self):
        from wc.util import week_label
        self.assertEqual(week_label(date(2026, 10, 12)), "Oct 12 – Oct 18")
        self.assertEqual(week_label(date(2026, 12, 28)), "Dec 28 – Jan 3")

    def test_now_iso_returns_aware_datetime(self):
        from wc.util import now_iso
        parsed = datetime.fromisoformat(now_iso())
        self.assertIsNotNone(parsed.tzinfo)


class TestManualInput(unittest.TestCase):

    def test_numeric_input_passes_through(self):
        from wc.util import clamp_manual_input
        self.assertEqual(clamp_manual_input("8"), 8)
        self.assertEqual(clamp_manual_input(" 45 "), 45)

    def test_negative_clamps_to_zero(self):
        from wc.util import clamp_manual_input
        self.assertEqual(clamp_manual_input("-3"), 0)

    def test_non_numeric_clamps_to_zero(self):
        from wc.util import clamp_manual_input
        for text in ("", "abc", "2.5", None):
            self.assertEqual(clamp_manual_input(text), 0)


if __name__ == "__main__":
    unittest.main()
