# clients/managers.py
from django.db import models


class ClientQuerySet(models.QuerySet):
    """
    Ready-made filters for Client.
    """

    def active(self):
        return self.filter(is_active=True)

    def for_manager(self, user):
        return self.filter(manager=user)

    def visible_to(self, user):
        """
        Clients a staff member may see:
        - admins see everyone
        - managers see the clients assigned to them
        """
        from core.permissions import is_admin, is_manager

        if is_admin(user):
            return self
        if is_manager(user):
            return self.for_manager(user)
        return self.none()


class ClientManager(models.Manager.from_queryset(ClientQuerySet)):
    pass


class ProjectQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status=self.model.Status.ACTIVE)

    def for_client(self, client):
        client_id = getattr(client, "pk", client)
        return self.filter(client_id=client_id)
