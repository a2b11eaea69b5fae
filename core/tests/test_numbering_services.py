import datetime
from unittest import mock

from django.test import TestCase, override_settings

from core.numbering import (
    InvalidArgument,
    SequenceAllocationFailed,
    SequenceType,
    is_valid_client_id,
)
from core.services.numbering import (
    SequenceStore,
    generate_client_id,
    generate_invoice_id,
    generate_quotation_id,
)


class GenerateClientIdTests(TestCase):
    def test_first_client_id(self):
        ident = generate_client_id("E", "A", "IND", on=datetime.date(2025, 3, 10))

        self.assertEqual(ident.value, "EA701-IND-253")
        self.assertEqual(ident.sequence_number, 1)
        self.assertEqual(ident.base, "EA701")
        self.assertEqual(ident.year_hex, "253")
        self.assertTrue(is_valid_client_id(ident.value))

    def test_counter_is_shared_by_all_clients(self):
        first = generate_client_id("E", "A", "IND", on=datetime.date(2025, 3, 10))
        second = generate_client_id("S", "W", "USA", on=datetime.date(2025, 11, 2))

        self.assertEqual(first.value, "EA701-IND-253")
        self.assertEqual(second.value, "SW702-USA-25B")

    def test_country_is_upper_cased(self):
        ident = generate_client_id("P", "H", "gbr", on=datetime.date(2024, 12, 1))
        self.assertEqual(ident.value, "PH701-GBR-24C")

    @override_settings(NUMBERING_DEFAULT_COUNTRY="USA")
    def test_default_country_from_settings(self):
        ident = generate_client_id("M", "B", on=datetime.date(2024, 1, 5))
        self.assertEqual(ident.components.country_code, "USA")

    def test_enum_members_are_accepted(self):
        from core.numbering import PlatformCode, ProjectCode

        ident = generate_client_id(ProjectCode.STARTUP, PlatformCode.APP, "IND")
        self.assertTrue(ident.value.startswith("SA701-"))

    def test_invalid_codes_do_not_touch_the_counter(self):
        store = mock.Mock(spec=SequenceStore)
        for project, platform in (("X", "W"), ("E", "Z"), ("e", "w"), ("", "W")):
            with self.subTest(project=project, platform=platform):
                with self.assertRaises(InvalidArgument):
                    generate_client_id(project, platform, "IND", store=store)
        store.allocate.assert_not_called()

    def test_allocation_failure_propagates(self):
        store = mock.Mock(spec=SequenceStore)
        store.allocate.side_effect = SequenceAllocationFailed(SequenceType.CLIENT)

        with self.assertRaises(SequenceAllocationFailed):
            generate_client_id("E", "W", "IND", store=store)


class GenerateQuotationIdTests(TestCase):
    def test_first_quotation_for_client(self):
        ident = generate_quotation_id("EA701-IND-253")
        self.assertEqual(ident.value, "QN1-EA701-001")

    def test_numbering_is_per_client(self):
        generate_quotation_id("EA701-IND-253")
        second = generate_quotation_id("EA701-IND-253", 2)
        other = generate_quotation_id("SW702-USA-24B")

        self.assertEqual(second.value, "QN2-EA701-002")
        self.assertEqual(other.value, "QN1-SW702-001")

    def test_bare_base_id_shares_the_series(self):
        generate_quotation_id("EA701-IND-253")
        self.assertEqual(generate_quotation_id("EA701").value, "QN1-EA701-002")

    def test_invalid_version_does_not_allocate(self):
        store = mock.Mock(spec=SequenceStore)
        for version in (0, -3, "2"):
            with self.subTest(version=version), self.assertRaises(InvalidArgument):
                generate_quotation_id("EA701-IND-253", version, store=store)
        store.allocate.assert_not_called()


class GenerateInvoiceIdTests(TestCase):
    def test_first_invoice_in_fiscal_year(self):
        ident = generate_invoice_id("EA701-IND-253", on=datetime.date(2024, 5, 1))

        self.assertEqual(ident.value, "IN1-FY24-EA701-001")
        self.assertEqual(ident.fiscal_year, "2425")

    def test_numbering_restarts_each_fiscal_year(self):
        generate_invoice_id("EA701-IND-253", on=datetime.date(2024, 5, 1))
        march = generate_invoice_id("EA701-IND-253", on=datetime.date(2025, 3, 31))
        april = generate_invoice_id("EA701-IND-253", on=datetime.date(2025, 4, 1))

        self.assertEqual(march.value, "IN1-FY24-EA701-002")
        self.assertEqual(april.value, "IN1-FY25-EA701-001")

    def test_invoice_and_quotation_series_are_separate(self):
        generate_quotation_id("EA701-IND-253")
        generate_quotation_id("EA701-IND-253")
        ident = generate_invoice_id("EA701-IND-253", on=datetime.date(2024, 5, 1))
        self.assertEqual(ident.sequence_number, 1)

    def test_invalid_version_does_not_allocate(self):
        store = mock.Mock(spec=SequenceStore)
        with self.assertRaises(InvalidArgument):
            generate_invoice_id("EA701-IND-253", 0, store=store)
        store.allocate.assert_not_called()
