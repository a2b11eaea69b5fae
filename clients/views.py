# clients/views.py
import logging

from django.contrib import messages
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse_lazy
from django.utils.translation import gettext_lazy as _
from django.views import View
from django.views.generic import FormView, ListView

from core.numbering import InvalidArgument, NumberingError
from core.permissions import StaffOrManagerRequiredMixin
from website.models import Inquiry

from .forms import ClientOnboardingForm
from .models import Client
from .services import convert_inquiry, onboard_client

logger = logging.getLogger(__name__)


def _error_text(exc: ValidationError) -> str:
    return " ".join(exc.messages)


class ClientListView(StaffOrManagerRequiredMixin, ListView):
    model = Client
    template_name = "clients/client_list.html"
    context_object_name = "clients"
    paginate_by = 25

    def get_queryset(self):
        qs = (
            Client.objects.visible_to(self.request.user)
            .select_related("user", "manager")
            .order_by("-created_at", "-id")
        )

        q = self.request.GET.get("q", "").strip()
        if q:
            qs = qs.filter(
                Q(client_id__icontains=q)
                | Q(company_name__icontains=q)
                | Q(contact_email__icontains=q)
            )
        self.search_query = q
        return qs

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["search_query"] = self.search_query
        return ctx


class ClientCreateView(StaffOrManagerRequiredMixin, FormView):
    form_class = ClientOnboardingForm
    template_name = "clients/client_form.html"
    success_url = reverse_lazy("clients:client_list")

    def form_valid(self, form):
        data = form.cleaned_data
        try:
            result = onboard_client(
                email=data["email"],
                company_name=data["company_name"],
                project_code=data["project_code"],
                platform_code=data["platform_code"],
                country=data["country"],
                phone=data["phone"],
                address=data["address"],
                city=data["city"],
                state=data["state"],
                zip_code=data["zip_code"],
                manager=data["manager"],
                actor=self.request.user,
            )
        except ValidationError as exc:
            form.add_error(None, _error_text(exc))
            return self.form_invalid(form)
        except NumberingError:
            logger.exception("Could not allocate a client id")
            messages.error(
                self.request,
                _("Could not assign a client ID right now. Please try again."),
            )
            return self.form_invalid(form)

        messages.success(
            self.request,
            _("Client %(client_id)s created. A welcome email was sent to %(email)s.")
            % {"client_id": result.client.client_id, "email": result.client.contact_email},
        )
        return super().form_valid(form)


class InquiryConvertView(StaffOrManagerRequiredMixin, View):
    """POST only: turn a website inquiry into a client account."""

    def post(self, request, pk):
        inquiry = get_object_or_404(Inquiry, pk=pk)
        try:
            result = convert_inquiry(
                inquiry,
                project_code=request.POST.get("project_code") or "E",
                platform_code=request.POST.get("platform_code") or "W",
                country=request.POST.get("country") or None,
                actor=request.user,
            )
        except ValidationError as exc:
            messages.error(request, _error_text(exc))
            return redirect("clients:client_list")
        except InvalidArgument as exc:
            messages.error(request, str(exc))
            return redirect("clients:client_list")
        except NumberingError:
            logger.exception("Could not convert inquiry %s", inquiry.pk)
            messages.error(request, _("Could not assign a client ID right now. Please try again."))
            return redirect("clients:client_list")

        messages.success(
            request,
            _("Inquiry converted: client %(client_id)s created.")
            % {"client_id": result.client.client_id},
        )
        return redirect("clients:client_list")
