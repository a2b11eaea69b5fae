from django.test import SimpleTestCase

from core.numbering import (
    ClientIdComponents,
    InvalidArgument,
    base_client_id,
    format_client_id,
    format_invoice_id,
    format_quotation_id,
    is_valid_client_id,
    parse_client_id,
)


class ClientIdFormatTests(SimpleTestCase):
    def test_format_client_id(self):
        components = ClientIdComponents(
            project_code="E",
            platform_code="A",
            sequence_number="01",
            country_code="IND",
            year="25",
            month="3",
        )
        self.assertEqual(format_client_id(components), "EA701-IND-253")
        self.assertEqual(str(components), "EA701-IND-253")

    def test_parse_client_id(self):
        components = parse_client_id("SW712-USA-24B")
        self.assertEqual(
            components,
            ClientIdComponents(
                project_code="S",
                platform_code="W",
                sequence_number="12",
                country_code="USA",
                year="24",
                month="B",
            ),
        )
        self.assertEqual(format_client_id(components), "SW712-USA-24B")

    def test_valid_ids(self):
        # the grammar accepts month 0; it is not range-checked
        valid = ("EA701-IND-253", "PH799-GBR-00C", "MB700-USA-991", "EA701-IND-250")
        for value in valid:
            with self.subTest(value=value):
                self.assertTrue(is_valid_client_id(value))

    def test_invalid_ids(self):
        invalid = [
            "",
            "ea701-ind-253",     # lower case
            "EA71-IND-253",      # one digit sequence
            "EA7001-IND-253",    # three digit sequence
            "EA801-IND-253",     # format digit must be 7
            "EA701-IN-253",      # two letter country
            "EA701-IND-25D",     # D is not a month
            "EA701-IND-253-",
            "EA701-IND-253\n",
            " EA701-IND-253",
            "EA701IND253",
        ]
        for value in invalid:
            with self.subTest(value=value):
                self.assertIsNone(parse_client_id(value))
                self.assertFalse(is_valid_client_id(value))

    def test_parse_never_raises_on_non_strings(self):
        for value in (None, 123, b"EA701-IND-253", ["EA701-IND-253"]):
            with self.subTest(value=value):
                self.assertIsNone(parse_client_id(value))


class BaseClientIdTests(SimpleTestCase):
    def test_takes_the_part_before_the_first_dash(self):
        self.assertEqual(base_client_id("EA701-IND-253"), "EA701")

    def test_string_without_dash_is_returned_whole(self):
        self.assertEqual(base_client_id("EA701"), "EA701")

    def test_empty_string(self):
        self.assertEqual(base_client_id(""), "")


class DocumentIdFormatTests(SimpleTestCase):
    def test_quotation_id(self):
        self.assertEqual(format_quotation_id("EA701", 1, 1), "QN1-EA701-001")
        self.assertEqual(format_quotation_id("EA701", 2, 42), "QN2-EA701-042")

    def test_invoice_id_uses_first_half_of_fiscal_year(self):
        self.assertEqual(format_invoice_id("EA701", 1, "2425", 1), "IN1-FY24-EA701-001")

    def test_sequence_padding_is_a_minimum_width(self):
        self.assertEqual(format_quotation_id("EA701", 1, 1000), "QN1-EA701-1000")

    def test_non_positive_versions_are_rejected(self):
        for version in (0, -1, "1", 1.5, False):
            with self.subTest(version=version):
                with self.assertRaises(InvalidArgument):
                    format_quotation_id("EA701", version, 1)
                with self.assertRaises(InvalidArgument):
                    format_invoice_id("EA701", version, "2425", 1)
