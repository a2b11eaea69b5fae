# website/handlers.py
from core.domain.dispatcher import register_handler
from core.emails import send_templated_email, staff_recipients

from .domain import InquiryReceived
from .models import Inquiry


@register_handler(InquiryReceived)
def notify_staff_of_inquiry(event: InquiryReceived) -> None:
    inquiry = Inquiry.objects.get(pk=event.inquiry_pk)
    send_templated_email(
        subject=f"New inquiry from {inquiry.company_name}",
        template_name="website/emails/inquiry_received.txt",
        context={"inquiry": inquiry},
        to=staff_recipients(),
    )
