# core/permissions.py
from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin

MANAGERS_GROUP = "managers"


def is_admin(user) -> bool:
    return bool(user and user.is_authenticated and (user.is_staff or user.is_superuser))


def is_manager(user) -> bool:
    return bool(
        user
        and user.is_authenticated
        and user.groups.filter(name=MANAGERS_GROUP).exists()
    )


def is_staff_member(user) -> bool:
    """Admins and managers: the people who run the portal."""
    return is_admin(user) or is_manager(user)


class StaffOrManagerRequiredMixin(LoginRequiredMixin, UserPassesTestMixin):
    """
    Restrict a view to admins and managers.
    Anonymous users are sent to the login page, clients get a 403.
    """

    def test_func(self):
        return is_staff_member(self.request.user)
