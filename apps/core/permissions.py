# apps/core/permissions.py

import logging
from functools import wraps

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from .exceptions import NotFound, Unauthenticated, ValidationFailed
from .models import Project, Task, TaskList, User

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 150


class OwnershipGuard:
    """
    Guarda de propriedade do Task Board

    Resolve o token de identidade em um User e faz todas as buscas
    combinando existência + dono, de modo que "não existe" e
    "não é seu" resultem no mesmo NotFound.
    """

    @staticmethod
    def ensure_user(token):
        """
        Retorna o usuário do token, provisionando na primeira vez

        O provisionamento (usuário + projeto padrão + 3 listas) roda em
        uma única transação. Chamadas seguintes são leituras puras.
        """
        username = (token or '').strip()
        if not username:
            raise Unauthenticated()
        if len(username) > MAX_USERNAME_LENGTH:
            raise ValidationFailed(
                'Validation error',
                details={'username': [f'Ensure this value has at most {MAX_USERNAME_LENGTH} characters.']}
            )

        user = User.objects.filter(username=username).first()
        if user is not None:
            return user

        try:
            with transaction.atomic():
                user = OwnershipGuard._provisionar_usuario(username)
        except IntegrityError:
            # Outra requisição provisionou o mesmo token primeiro
            return User.objects.get(username=username)

        logger.info(f"👤 Usuário auto-provisionado: {user.username}")
        return user

    @staticmethod
    def _provisionar_usuario(username):
        user = User(username=username)
        user.set_unusable_password()
        user.save()

        project = Project.objects.create(
            name=getattr(settings, 'TASKBOARD_DEFAULT_PROJECT_NAME', 'My Task Board'),
            owner=user
        )
        project.criar_listas_padrao()
        return user

    @staticmethod
    def project_for(user, project_id):
        """Projeto do usuário ou NotFound"""
        try:
            return Project.objects.get(id=project_id, owner=user)
        except (Project.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound('Project not found')

    @staticmethod
    def list_for(user, list_id, message='List not found'):
        """Lista cujo projeto pertence ao usuário ou NotFound"""
        try:
            return TaskList.objects.select_related('project').get(
                id=list_id,
                project__owner=user
            )
        except (TaskList.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound(message)

    @staticmethod
    def task_for(user, task_id):
        """Tarefa cuja cadeia tarefa → lista → projeto termina no usuário"""
        try:
            return Task.objects.select_related('task_list__project').get(
                id=task_id,
                task_list__project__owner=user
            )
        except (Task.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound('Task not found')


def get_identity_token(request):
    """Lê o token de identidade do header configurado"""
    header = getattr(settings, 'TASKBOARD_IDENTITY_HEADER', 'X-Username')
    return request.headers.get(header, '')


# Decoradores para views

def requer_identidade(view_func):
    """
    Decorador que resolve o usuário a partir do header de identidade
    Injeta request.board_user para uso na view
    """

    @wraps(view_func)
    def wrapped_view(request, *args, **kwargs):
        request.board_user = OwnershipGuard.ensure_user(get_identity_token(request))
        return view_func(request, *args, **kwargs)

    return wrapped_view
