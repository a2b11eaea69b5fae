# portal/forms.py
from django import forms
from django.utils.translation import gettext_lazy as _


class QuotationAcceptanceForm(forms.Form):
    signer_name = forms.CharField(
        max_length=255,
        label=_("Type your full name to sign"),
    )
    agree = forms.BooleanField(
        label=_("I accept this quotation and its terms."),
    )

    def clean_signer_name(self):
        name = self.cleaned_data["signer_name"].strip()
        if len(name) < 2:
            raise forms.ValidationError(_("Please type your full name."))
        return name


class QuotationRejectionForm(forms.Form):
    reason = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 3}),
        label=_("Reason (optional)"),
    )
