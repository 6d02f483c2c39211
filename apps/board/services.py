# apps/board/services.py

"""
Serviços do board: consultas da árvore projeto → listas → tarefas e
mutações de tarefas (criar, atualizar, mover, excluir)

Toda mutação revalida a cadeia de propriedade antes de escrever e
publica o evento correspondente no grupo do projeto.
"""

import logging

from django.db.models import Prefetch
from django.utils import timezone

from apps.core.models import Project, Task, TaskList
from apps.core.permissions import OwnershipGuard
from apps.core.utils import serializar_lista, serializar_projeto, serializar_task

from . import broadcaster

logger = logging.getLogger(__name__)


# === Consultas ===

def _listas_com_tasks():
    """Prefetch otimizado para evitar N+1 queries"""
    return Prefetch(
        'lists',
        queryset=TaskList.objects.order_by('order', 'created_at', 'id').prefetch_related(
            Prefetch('tasks', queryset=Task.objects.order_by('order', 'created_at', 'id'))
        )
    )


def project_board(user, project_id):
    """Board completo: {id, name, lists:[{..., tasks:[...]}]}"""
    project = OwnershipGuard.project_for(user, project_id)
    lists = lists_for(user, project.id, project=project)
    return {
        'id': str(project.id),
        'name': project.name,
        'lists': lists,
    }


def project_detail(user, project_id):
    """Projeto com listas e tarefas aninhadas"""
    OwnershipGuard.project_for(user, project_id)
    project = Project.objects.prefetch_related(_listas_com_tasks()).get(id=project_id)
    return serializar_projeto(project)


def projects_for(user):
    """Todos os projetos do usuário, com listas e tarefas ordenadas"""
    projects = (
        Project.objects
        .filter(owner=user)
        .prefetch_related(_listas_com_tasks())
        .order_by('created_at', 'id')
    )
    return [serializar_projeto(project) for project in projects]


def lists_for(user, project_id, project=None):
    """Listas do projeto em ordem crescente, com tarefas aninhadas"""
    if project is None:
        project = OwnershipGuard.project_for(user, project_id)
    lists = (
        TaskList.objects
        .filter(project=project)
        .prefetch_related(Prefetch('tasks', queryset=Task.objects.order_by('order', 'created_at', 'id')))
        .order_by('order', 'created_at', 'id')
    )
    return [serializar_lista(task_list) for task_list in lists]


def tasks_for(user, list_id):
    """Tarefas da lista em ordem crescente"""
    task_list = OwnershipGuard.list_for(user, list_id)
    tasks = Task.objects.filter(task_list=task_list).order_by('order', 'created_at', 'id')
    return [serializar_task(task) for task in tasks]


# === Mutações ===

def create_task(user, dados):
    """
    Cria tarefa na lista informada

    dados: saída validada de CreateTaskForm
    """
    task_list = OwnershipGuard.list_for(user, dados['listId'])

    task = Task.objects.create(
        title=dados['title'],
        description=dados.get('description'),
        task_list=task_list,
        order=dados.get('order') if dados.get('order') is not None else 0,
        created_by=user
    )

    payload = serializar_task(task)
    broadcaster.publish_task_event(task_list.project_id, broadcaster.TASK_CREATED, payload)
    logger.info(f"✅ Tarefa criada - {task.id} na lista {task_list.id} por {user.username}")
    return payload


def update_task(user, task_id, dados):
    """
    Patch parcial da tarefa

    Somente os campos enviados são persistidos. Se listId mudar, a
    lista de destino também precisa pertencer ao usuário.
    """
    task = OwnershipGuard.task_for(user, task_id)
    project_id = task.task_list.project_id

    campos = []
    if 'listId' in dados and dados['listId'] != task.task_list_id:
        task.task_list = OwnershipGuard.list_for(user, dados['listId'], message='New list not found')
        campos.append('task_list')
    if 'title' in dados:
        task.title = dados['title']
        campos.append('title')
    if 'description' in dados:
        task.description = dados['description']
        campos.append('description')
    if 'order' in dados:
        task.order = dados['order']
        campos.append('order')

    if campos:
        task.updated_at = timezone.now()
        task.save(update_fields=campos + ['updated_at'])

    payload = serializar_task(task)
    broadcaster.publish_task_event(project_id, broadcaster.TASK_UPDATED, payload)
    return payload


def move_task(user, task_id, list_id, order):
    """
    Move a tarefa para (lista, ordem)

    Lista e ordem são gravadas juntas em um único UPDATE; não há
    renumeração das demais tarefas da lista.
    """
    task = OwnershipGuard.task_for(user, task_id)
    project_id = task.task_list.project_id
    destino = OwnershipGuard.list_for(user, list_id, message='Target list not found')

    lista_anterior = task.task_list_id
    task.task_list = destino
    task.order = order
    task.updated_at = timezone.now()
    task.save(update_fields=['task_list', 'order', 'updated_at'])

    payload = serializar_task(task)
    broadcaster.publish_task_event(project_id, broadcaster.TASK_MOVED, payload)
    logger.info(f"🔀 Tarefa {task.id} movida {lista_anterior} → {destino.id} (ordem {order})")
    return payload


def delete_task(user, task_id):
    """Remove a tarefa permanentemente; o evento carrega só o id"""
    task = OwnershipGuard.task_for(user, task_id)
    project_id = task.task_list.project_id
    task_id = str(task.id)

    task.delete()

    broadcaster.publish_task_event(project_id, broadcaster.TASK_DELETED, {'taskId': task_id})
    logger.info(f"🗑️  Tarefa {task_id} removida por {user.username}")
