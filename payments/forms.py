# payments/forms.py
from django import forms

from .models import PaymentSubmission


class PaymentSubmissionForm(forms.ModelForm):
    """Client form: "I have paid, here is the reference"."""

    class Meta:
        model = PaymentSubmission
        fields = ["method", "amount", "transaction_reference", "payer_name", "remarks"]
        widgets = {
            "remarks": forms.Textarea(attrs={"rows": 3}),
        }

    def __init__(self, *args, invoice=None, **kwargs):
        super().__init__(*args, **kwargs)
        if invoice is not None and not self.is_bound:
            self.initial.setdefault("amount", invoice.total_amount)
