"""
Tests for apps/core/permissions.py - identity resolution and ownership guard.
"""

import uuid

import pytest

from apps.core.exceptions import NotFound, Unauthenticated, ValidationFailed
from apps.core.models import Project, TaskList, Task, User
from apps.core.permissions import OwnershipGuard


@pytest.mark.django_db
class TestEnsureUser:
    """Tests for auto-provisioning on first sight of a token."""

    def test_first_use_provisions_project_with_three_lists(self):
        user = OwnershipGuard.ensure_user('carol')

        assert user.username == 'carol'
        assert not user.has_usable_password()

        projects = Project.objects.filter(owner=user)
        assert projects.count() == 1
        project = projects.get()
        assert project.name == 'My Task Board'

        lists = list(project.lists.order_by('order'))
        assert [l.order for l in lists] == [0, 1, 2]
        assert [l.name for l in lists] == ['To Do', 'In Progress', 'Done']

    def test_second_use_is_a_pure_read(self):
        first = OwnershipGuard.ensure_user('carol')
        second = OwnershipGuard.ensure_user('carol')

        assert first.pk == second.pk
        assert User.objects.filter(username='carol').count() == 1
        assert Project.objects.filter(owner=first).count() == 1
        assert TaskList.objects.filter(project__owner=first).count() == 3

    def test_token_is_trimmed(self):
        assert OwnershipGuard.ensure_user('  dave ').username == 'dave'

    @pytest.mark.parametrize('token', [None, '', '   '])
    def test_missing_token_is_unauthenticated(self, token):
        with pytest.raises(Unauthenticated):
            OwnershipGuard.ensure_user(token)

        assert User.objects.count() == 0

    def test_overlong_token_is_rejected(self):
        with pytest.raises(ValidationFailed):
            OwnershipGuard.ensure_user('x' * 151)

        assert User.objects.count() == 0

    def test_existing_user_without_project_is_not_provisioned(self):
        User.objects.create(username='erin')

        user = OwnershipGuard.ensure_user('erin')

        assert user.projects.count() == 0

    def test_failed_provisioning_leaves_no_partial_user(self, monkeypatch):
        def boom(self):
            raise RuntimeError("lists table unavailable")

        monkeypatch.setattr(Project, 'criar_listas_padrao', boom)

        with pytest.raises(RuntimeError):
            OwnershipGuard.ensure_user('frank')

        assert not User.objects.filter(username='frank').exists()
        assert not Project.objects.filter(owner__username='frank').exists()


@pytest.mark.django_db
class TestOwnershipLookups:
    """Absent and unowned entities yield the same NotFound."""

    def test_project_for_owner(self, alice, alice_project):
        assert OwnershipGuard.project_for(alice, alice_project.id) == alice_project

    def test_project_absent_and_unowned_are_indistinguishable(self, alice_project, bob):
        with pytest.raises(NotFound) as absent:
            OwnershipGuard.project_for(bob, uuid.uuid4())
        with pytest.raises(NotFound) as unowned:
            OwnershipGuard.project_for(bob, alice_project.id)

        assert absent.value.message == unowned.value.message == 'Project not found'
        assert absent.value.status_code == unowned.value.status_code == 404

    def test_malformed_id_is_not_found(self, alice):
        with pytest.raises(NotFound):
            OwnershipGuard.project_for(alice, 'not-a-uuid')

    def test_list_for_checks_project_owner(self, alice, bob, alice_lists):
        assert OwnershipGuard.list_for(alice, alice_lists[0].id) == alice_lists[0]

        with pytest.raises(NotFound):
            OwnershipGuard.list_for(bob, alice_lists[0].id)

    def test_task_for_follows_full_chain(self, alice, bob, alice_lists):
        task = Task.objects.create(title='T', task_list=alice_lists[0], created_by=alice)

        assert OwnershipGuard.task_for(alice, task.id) == task

        with pytest.raises(NotFound):
            OwnershipGuard.task_for(bob, task.id)
        with pytest.raises(NotFound):
            OwnershipGuard.task_for(alice, uuid.uuid4())
