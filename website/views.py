# website/views.py
import logging

from django.db import transaction
from django.shortcuts import redirect
from django.urls import reverse_lazy
from django.views.generic import CreateView, TemplateView

from core.domain.dispatcher import emit_on_commit

from .domain import InquiryReceived
from .forms import InquiryForm
from .models import Inquiry

logger = logging.getLogger(__name__)


class InquiryCreateView(CreateView):
    """
    Public "start a project" form.
    - Saves the inquiry and notifies staff by email.
    - Honeypot submissions are dropped without telling the sender.
    """
    model = Inquiry
    form_class = InquiryForm
    template_name = "website/inquiry_form.html"
    success_url = reverse_lazy("website:inquiry_thanks")

    def form_valid(self, form):
        if form.is_spam():
            logger.info("Dropped honeypot inquiry from %s", form.cleaned_data.get("email"))
            return redirect(self.success_url)

        with transaction.atomic():
            response = super().form_valid(form)
            emit_on_commit(InquiryReceived(inquiry_pk=self.object.pk))
        return response


class InquiryThanksView(TemplateView):
    template_name = "website/inquiry_thanks.html"
