# website/forms.py
from django import forms

from .models import Inquiry


class InquiryForm(forms.ModelForm):
    # Honeypot: hidden in the template, bots fill it.
    website = forms.CharField(required=False, widget=forms.HiddenInput)

    class Meta:
        model = Inquiry
        fields = [
            "company_name",
            "contact_name",
            "email",
            "phone",
            "country",
            "city",
            "service_interest",
            "project_description",
            "budget",
            "timeline",
        ]
        widgets = {
            "project_description": forms.Textarea(attrs={"rows": 5}),
        }

    def is_spam(self) -> bool:
        return bool(self.cleaned_data.get("website", "").strip())
