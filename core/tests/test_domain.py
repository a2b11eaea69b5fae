from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import SimpleTestCase, TestCase, override_settings

from core.domain.dispatcher import DomainEventDispatcher
from core.domain.events import DomainEvent
from core.emails import send_templated_email
from core.models import AuditLog, IdSequence
from core.services.audit import log_event


@dataclass(frozen=True)
class SomethingHappened(DomainEvent):
    value: int


class DispatcherTests(SimpleTestCase):
    def test_handlers_receive_the_event(self):
        dispatcher = DomainEventDispatcher()
        received = []

        @dispatcher.register_handler(SomethingHappened)
        def handler(event):
            received.append(event.value)

        dispatcher.emit(SomethingHappened(value=7))
        self.assertEqual(received, [7])

    def test_registering_twice_runs_once(self):
        dispatcher = DomainEventDispatcher()
        received = []

        def handler(event):
            received.append(event.value)

        dispatcher.register_handler(SomethingHappened)(handler)
        dispatcher.register_handler(SomethingHappened)(handler)
        dispatcher.emit(SomethingHappened(value=1))
        self.assertEqual(received, [1])

    def test_failing_handler_does_not_stop_the_others(self):
        dispatcher = DomainEventDispatcher()
        received = []

        @dispatcher.register_handler(SomethingHappened)
        def broken(event):
            raise RuntimeError("smtp down")

        @dispatcher.register_handler(SomethingHappened)
        def working(event):
            received.append(event.value)

        with self.assertLogs("core.domain.dispatcher", level="ERROR"):
            dispatcher.emit(SomethingHappened(value=3))
        self.assertEqual(received, [3])


class EmitOnCommitTests(TestCase):
    def test_handlers_run_after_commit(self):
        dispatcher = DomainEventDispatcher()
        received = []
        dispatcher.register_handler(SomethingHappened)(lambda e: received.append(e.value))

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            dispatcher.emit_on_commit(SomethingHappened(value=5))
            self.assertEqual(received, [])

        self.assertEqual(len(callbacks), 1)
        self.assertEqual(received, [5])


class AuditLogTests(TestCase):
    def test_log_event_with_actor_and_target(self):
        user = get_user_model().objects.create_user("staff", "staff@example.com", "x")
        target = IdSequence.objects.create(sequence_type="client", current_value=1)

        entry = log_event(
            action=AuditLog.Action.ID_ASSIGNED,
            message="assigned",
            actor=user,
            target=target,
            extra={"sequence_number": 1},
        )

        self.assertEqual(entry.actor, user)
        self.assertEqual(entry.target, target)
        self.assertEqual(entry.extra, {"sequence_number": 1})

    def test_unknown_action_is_rejected(self):
        with self.assertRaises(ValueError):
            log_event(action="teleport")


@override_settings(AGENCY_NAME="Zervitra", DEFAULT_FROM_EMAIL="no-reply@zervitra.com")
class TemplatedEmailTests(TestCase):
    def test_subject_is_prefixed_with_agency_name(self):
        sent = send_templated_email(
            subject="Hello",
            template_name="website/emails/inquiry_received.txt",
            context={"inquiry": None},
            to=["a@example.com", ""],
        )

        self.assertEqual(sent, 1)
        self.assertEqual(mail.outbox[0].subject, "Zervitra - Hello")
        self.assertEqual(mail.outbox[0].to, ["a@example.com"])

    def test_no_recipients_sends_nothing(self):
        with self.assertLogs("core.emails", level="WARNING"):
            sent = send_templated_email(
                subject="Hello",
                template_name="website/emails/inquiry_received.txt",
                context={},
                to=[],
            )
        self.assertEqual(sent, 0)
        self.assertEqual(mail.outbox, [])
