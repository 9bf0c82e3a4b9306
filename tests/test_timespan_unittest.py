import unittest
from datetime import timedelta

from valuetext.errors import ParseFailure
from valuetext.timespan import TimeSpanComponent, format_timedelta, parse_timedelta


class FormatTimedeltaTests(unittest.TestCase):
    def test_constant_style_is_default(self) -> None:
        value = timedelta(days=1, hours=2, minutes=3, seconds=4)
        self.assertEqual(format_timedelta(value), "1.02:03:04")
        self.assertEqual(format_timedelta(value, "c"), "1.02:03:04")

    def test_constant_style_without_days(self) -> None:
        self.assertEqual(format_timedelta(timedelta(minutes=5)), "00:05:00")
        self.assertEqual(format_timedelta(timedelta(0)), "00:00:00")

    def test_constant_style_with_fraction(self) -> None:
        self.assertEqual(format_timedelta(timedelta(seconds=1, microseconds=500)), "00:00:01.000500")

    def test_negative_duration(self) -> None:
        self.assertEqual(format_timedelta(-timedelta(hours=1, minutes=30)), "-01:30:00")
        self.assertEqual(format_timedelta(timedelta(days=-2)), "-2.00:00:00")

    def test_general_short_style(self) -> None:
        value = timedelta(days=1, hours=2, minutes=3, seconds=4)
        self.assertEqual(format_timedelta(value, "g"), "1:2:03:04")
        self.assertEqual(format_timedelta(timedelta(seconds=1, microseconds=500000), "g"), "0:00:01.5")

    def test_general_long_style(self) -> None:
        value = timedelta(hours=2, minutes=3, seconds=4)
        self.assertEqual(format_timedelta(value, "G"), "0:02:03:04.000000")

    def test_template_style(self) -> None:
        value = timedelta(days=1, hours=2, minutes=3, seconds=4)
        self.assertEqual(format_timedelta(value, "{days}d {hours}h {minutes}m"), "1d 2h 3m")
        self.assertEqual(format_timedelta(value, "{total_seconds:.0f}s"), "93784s")

    def test_unknown_template_field_raises(self) -> None:
        with self.assertRaises(KeyError):
            format_timedelta(timedelta(1), "{weeks}")


class ParseTimedeltaTests(unittest.TestCase):
    def test_constant_style(self) -> None:
        self.assertEqual(
            parse_timedelta("1.02:03:04"),
            timedelta(days=1, hours=2, minutes=3, seconds=4),
        )
        self.assertEqual(parse_timedelta("02:03"), timedelta(hours=2, minutes=3))
        self.assertEqual(parse_timedelta("00:00:01.5"), timedelta(seconds=1, microseconds=500000))

    def test_general_style(self) -> None:
        self.assertEqual(
            parse_timedelta("1:2:03:04"),
            timedelta(days=1, hours=2, minutes=3, seconds=4),
        )

    def test_bare_integer_is_days(self) -> None:
        self.assertEqual(parse_timedelta("3"), timedelta(days=3))

    def test_sign_handling(self) -> None:
        self.assertEqual(parse_timedelta("-01:30:00"), -timedelta(hours=1, minutes=30))
        self.assertEqual(parse_timedelta("+01:30:00"), timedelta(hours=1, minutes=30))

    def test_component_selects_unit_for_bare_integer(self) -> None:
        self.assertEqual(parse_timedelta("90", TimeSpanComponent.SECONDS), timedelta(seconds=90))
        self.assertEqual(parse_timedelta("90", TimeSpanComponent.MINUTES), timedelta(minutes=90))
        self.assertEqual(parse_timedelta("-2", TimeSpanComponent.HOURS), timedelta(hours=-2))
        self.assertEqual(parse_timedelta("2", TimeSpanComponent.DAYS), timedelta(days=2))

    def test_component_rejects_non_integer(self) -> None:
        with self.assertRaises(ParseFailure):
            parse_timedelta("01:00", TimeSpanComponent.SECONDS)

    def test_rejects_out_of_range_fields(self) -> None:
        for text in ("24:00:00", "01:60:00", "01:00:60", "1:24:00:00"):
            with self.subTest(text=text):
                with self.assertRaises(ParseFailure):
                    parse_timedelta(text)

    def test_rejects_garbage(self) -> None:
        for text in ("", "   ", "abc", "1.2.3", "+"):
            with self.subTest(text=text):
                with self.assertRaises(ParseFailure):
                    parse_timedelta(text)

    def test_parse_failure_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            parse_timedelta("soon")

    def test_round_trip_through_constant_style(self) -> None:
        value = timedelta(days=3, hours=4, minutes=5, seconds=6, microseconds=7)
        self.assertEqual(parse_timedelta(format_timedelta(value)), value)


if __name__ == "__main__":
    unittest.main()
