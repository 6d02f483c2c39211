# apps/core/models.py

import uuid

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Usuário do Task Board

    Identificado apenas pelo nome de exibição (username) enviado no
    header de identidade. Não há senha: usuários são criados
    automaticamente na primeira requisição.
    """

    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'usuario'

    def __str__(self):
        return self.username


class Project(models.Model):
    """Projeto (quadro) - agregador de listas"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    owner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='projects'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'project'
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.name} ({self.owner.username})"

    def criar_listas_padrao(self):
        """Cria as listas padrão (ordem 0, 1, 2) para um novo projeto"""
        nomes = getattr(settings, 'TASKBOARD_DEFAULT_LISTS', ['To Do', 'In Progress', 'Done'])
        return [
            TaskList.objects.create(name=nome, project=self, order=idx)
            for idx, nome in enumerate(nomes)
        ]


class TaskList(models.Model):
    """
    Lista (coluna) do projeto

    A ordem não é única: empates são resolvidos pela ordem de criação.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='lists'
    )
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'list'
        ordering = ['order', 'created_at', 'id']
        indexes = [
            models.Index(fields=['project', 'order'], name='list_project_order_idx'),
        ]

    def __str__(self):
        return f"{self.name} - {self.project.name}"


class Task(models.Model):
    """Tarefa - pertence a exatamente uma lista"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    task_list = models.ForeignKey(
        TaskList,
        on_delete=models.CASCADE,
        related_name='tasks'
    )
    order = models.IntegerField(default=0)
    created_by = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='tasks_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'task'
        ordering = ['order', 'created_at', 'id']
        indexes = [
            models.Index(fields=['task_list', 'order'], name='task_list_order_idx'),
        ]

    def __str__(self):
        return self.title
