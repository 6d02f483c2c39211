"""Shared test fixtures for the Task Board tests."""

import json

import pytest

from apps.board import broadcaster
from apps.core.permissions import OwnershipGuard


class RecordingChannelLayer:
    """Channel layer fake que só registra os group_send"""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def group_send(self, group, message):
        if self.fail:
            raise ConnectionError("redis down")
        self.sent.append((group, message))

    def events(self, event=None):
        return [
            (group, message) for group, message in self.sent
            if event is None or message['event'] == event
        ]


@pytest.fixture
def layer(monkeypatch):
    """Substitui o channel layer usado pelo broadcaster"""
    fake = RecordingChannelLayer()
    monkeypatch.setattr(broadcaster, 'get_channel_layer', lambda: fake)
    return fake


@pytest.fixture
def alice(db):
    return OwnershipGuard.ensure_user('alice')


@pytest.fixture
def bob(db):
    return OwnershipGuard.ensure_user('bob')


@pytest.fixture
def alice_project(alice):
    return alice.projects.get()


@pytest.fixture
def alice_lists(alice_project):
    """Listas padrão: To Do, In Progress, Done"""
    return list(alice_project.lists.order_by('order'))


class JsonApi:
    """Wrapper do test client com header de identidade e corpo JSON"""

    def __init__(self, client, username):
        self.client = client
        self.username = username

    def _headers(self):
        return {'HTTP_X_USERNAME': self.username} if self.username else {}

    def get(self, path):
        return self.client.get(path, **self._headers())

    def post(self, path, data=None):
        return self.client.post(
            path, data=json.dumps(data or {}), content_type='application/json', **self._headers()
        )

    def patch(self, path, data=None):
        return self.client.patch(
            path, data=json.dumps(data or {}), content_type='application/json', **self._headers()
        )

    def delete(self, path):
        return self.client.delete(path, **self._headers())


@pytest.fixture
def api(client, alice):
    return JsonApi(client, 'alice')


@pytest.fixture
def bob_api(client, bob):
    return JsonApi(client, 'bob')


@pytest.fixture
def anonymous_api(client, db):
    return JsonApi(client, None)
