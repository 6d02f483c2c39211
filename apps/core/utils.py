# apps/core/utils.py

import json
from typing import Dict, List, Optional

from .exceptions import ValidationFailed


def _iso(valor) -> Optional[str]:
    return valor.isoformat() if valor else None


def serializar_usuario(user) -> Dict:
    """Formato JSON do usuário"""
    return {
        'id': user.id,
        'username': user.username,
        'createdAt': _iso(user.criado_em),
        'updatedAt': _iso(user.atualizado_em),
    }


def serializar_task(task) -> Dict:
    """
    Formato JSON da tarefa

    É o registro completo enviado nas respostas e nos eventos
    task:created / task:updated / task:moved.
    """
    return {
        'id': str(task.id),
        'title': task.title,
        'description': task.description,
        'order': task.order,
        'listId': str(task.task_list_id),
        'createdById': task.created_by_id,
        'createdAt': _iso(task.created_at),
        'updatedAt': _iso(task.updated_at),
    }


def serializar_lista(task_list, tasks=None) -> Dict:
    """Lista com as tarefas aninhadas (já ordenadas pelo chamador)"""
    if tasks is None:
        tasks = task_list.tasks.all()
    return {
        'id': str(task_list.id),
        'name': task_list.name,
        'order': task_list.order,
        'projectId': str(task_list.project_id),
        'createdAt': _iso(task_list.created_at),
        'updatedAt': _iso(task_list.updated_at),
        'tasks': [serializar_task(task) for task in tasks],
    }


def serializar_projeto(project, lists=None) -> Dict:
    """Projeto com listas e tarefas aninhadas"""
    if lists is None:
        lists = project.lists.all()
    return {
        'id': str(project.id),
        'name': project.name,
        'ownerId': project.owner_id,
        'createdAt': _iso(project.created_at),
        'updatedAt': _iso(project.updated_at),
        'lists': [serializar_lista(task_list) for task_list in lists],
    }


def ler_json(request) -> Dict:
    """
    Decodifica o corpo JSON da requisição
    Corpo vazio vira dicionário vazio; qualquer coisa que não seja
    objeto JSON é erro de validação.
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationFailed('Invalid JSON body')
    if not isinstance(data, dict):
        raise ValidationFailed('JSON body must be an object')
    return data


def erros_formulario(form) -> Dict[str, List[str]]:
    """Converte erros de formulário em {campo: [mensagens]}"""
    return {
        campo: [str(mensagem) for mensagem in mensagens]
        for campo, mensagens in form.errors.items()
    }
