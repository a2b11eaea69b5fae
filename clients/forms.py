# clients/forms.py
from django import forms
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _

from core.numbering import PlatformCode, ProjectCode
from core.permissions import MANAGERS_GROUP

User = get_user_model()


class ClientOnboardingForm(forms.Form):
    """
    Staff form for creating a client account.
    The client id is never typed in; it is allocated on save.
    """

    company_name = forms.CharField(max_length=255, label=_("Company name"))
    email = forms.EmailField(label=_("Login / contact email"))
    phone = forms.CharField(max_length=50, required=False, label=_("Phone"))

    project_code = forms.ChoiceField(
        choices=ProjectCode.choices,
        initial=ProjectCode.ENTERPRISE,
        label=_("Project code"),
    )
    platform_code = forms.ChoiceField(
        choices=PlatformCode.choices,
        initial=PlatformCode.WEB,
        label=_("Platform code"),
    )
    country = forms.RegexField(
        regex=r"^[A-Za-z]{3}$",
        initial="IND",
        max_length=3,
        label=_("Country code"),
        error_messages={"invalid": _("Use a three letter code such as IND or USA.")},
    )

    address = forms.CharField(max_length=255, required=False, label=_("Address"))
    city = forms.CharField(max_length=100, required=False, label=_("City"))
    state = forms.CharField(max_length=100, required=False, label=_("State"))
    zip_code = forms.CharField(max_length=20, required=False, label=_("ZIP"))

    manager = forms.ModelChoiceField(
        queryset=User.objects.none(),
        required=False,
        label=_("Account manager"),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["manager"].queryset = (
            User.objects.filter(groups__name=MANAGERS_GROUP, is_active=True)
            .order_by("username")
        )

    def clean_email(self):
        email = self.cleaned_data["email"].strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError(_("A user with this email already exists."))
        return email

    def clean_country(self):
        return self.cleaned_data["country"].upper()
