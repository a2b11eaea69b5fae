# website/tests.py
from django.core import mail
from django.test import TestCase, override_settings
from django.urls import reverse

from .models import Inquiry


@override_settings(AGENCY_STAFF_EMAILS=["team@zervitra.com"])
class InquiryViewTests(TestCase):
    def form_data(self, **overrides):
        data = {
            "company_name": "Blue Fin",
            "contact_name": "Asha",
            "email": "asha@bluefin.example",
            "phone": "+91 90000 00000",
            "country": "India",
            "city": "Chennai",
            "service_interest": Inquiry.ServiceInterest.APP,
            "project_description": "Booking app for ferries",
            "budget": "5-10k USD",
            "timeline": "3 months",
        }
        data.update(overrides)
        return data

    def test_form_renders(self):
        response = self.client.get(reverse("website:inquiry"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'name="company_name"')

    def test_submit_saves_and_notifies_staff(self):
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(reverse("website:inquiry"), self.form_data())

        self.assertRedirects(response, reverse("website:inquiry_thanks"))
        inquiry = Inquiry.objects.get()
        self.assertEqual(inquiry.status, Inquiry.Status.NEW)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["team@zervitra.com"])
        self.assertIn("Blue Fin", mail.outbox[0].subject)
        self.assertIn("App development", mail.outbox[0].body)

    def test_required_fields(self):
        response = self.client.post(reverse("website:inquiry"), self.form_data(email=""))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Inquiry.objects.exists())

    def test_honeypot_is_dropped_silently(self):
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                reverse("website:inquiry"), self.form_data(website="http://spam.example")
            )

        self.assertRedirects(response, reverse("website:inquiry_thanks"))
        self.assertFalse(Inquiry.objects.exists())
        self.assertEqual(mail.outbox, [])
