import datetime
from unittest import mock

from django.test import SimpleTestCase

from core.numbering import InvalidArgument, fiscal_year, hex_month, two_digit_year
from core.numbering.calendar import fiscal_year_short


class HexMonthTests(SimpleTestCase):
    def test_months_map_to_single_hex_digits(self):
        expected = ["1", "2", "3", "4", "5", "6", "7", "8", "9", "A", "B", "C"]
        self.assertEqual([hex_month(m) for m in range(1, 13)], expected)

    def test_mapping_is_one_to_one(self):
        self.assertEqual(len({hex_month(m) for m in range(1, 13)}), 12)

    def test_out_of_range_months_are_rejected(self):
        for month in (0, 13, -1, 100):
            with self.subTest(month=month), self.assertRaises(InvalidArgument):
                hex_month(month)

    def test_non_integers_are_rejected(self):
        for month in ("3", 3.0, None, True):
            with self.subTest(month=month), self.assertRaises(InvalidArgument):
                hex_month(month)

    def test_invalid_argument_is_a_value_error(self):
        with self.assertRaises(ValueError):
            hex_month(13)


class FiscalYearTests(SimpleTestCase):
    def test_april_starts_a_new_fiscal_year(self):
        self.assertEqual(fiscal_year(datetime.date(2024, 4, 1)), "2425")
        self.assertEqual(fiscal_year(datetime.date(2024, 3, 31)), "2324")

    def test_january_to_march_belong_to_previous_start_year(self):
        self.assertEqual(fiscal_year(datetime.date(2025, 1, 1)), "2425")
        self.assertEqual(fiscal_year(datetime.date(2025, 2, 15)), "2425")

    def test_december(self):
        self.assertEqual(fiscal_year(datetime.date(2024, 12, 31)), "2425")

    def test_century_rollover(self):
        self.assertEqual(fiscal_year(datetime.date(2099, 6, 1)), "9900")
        self.assertEqual(fiscal_year(datetime.date(2000, 1, 1)), "9900")

    def test_defaults_to_local_today(self):
        with mock.patch(
            "core.numbering.calendar.timezone.localdate",
            return_value=datetime.date(2025, 3, 10),
        ):
            self.assertEqual(fiscal_year(), "2425")
            self.assertEqual(two_digit_year(), "25")

    def test_short_label(self):
        self.assertEqual(fiscal_year_short("2425"), "24")

    def test_two_digit_year_is_zero_padded(self):
        self.assertEqual(two_digit_year(datetime.date(2007, 5, 1)), "07")
