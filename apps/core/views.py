# apps/core/views.py

import logging

from django.conf import settings
from django.db import connection
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods
from django.views.defaults import page_not_found

from apps.board import services

from .exceptions import ValidationFailed
from .forms import CreateListForm, CreateProjectForm, CreateUserForm
from .models import Project, TaskList, User
from .permissions import OwnershipGuard, requer_identidade
from .utils import ler_json, serializar_lista, serializar_projeto, serializar_usuario

logger = logging.getLogger(__name__)


@require_GET
def api_index(request):
    """Catálogo de endpoints da API"""
    return JsonResponse({
        'message': 'Task Management API',
        'version': '1.0.0',
        'endpoints': {
            'users': {
                'GET /api/me': 'Ensure/create user from x-username header',
                'POST /api/users': 'Create a new user',
                'GET /api/users/me': 'Get current user (requires x-username header)',
            },
            'projects': {
                'POST /api/projects': 'Create a new project',
                'GET /api/projects': 'Get all projects for current user',
                'GET /api/projects/:id': 'Get a specific project',
                'GET /api/projects/:id/board': 'Get project board with lists and tasks',
            },
            'lists': {
                'POST /api/lists': 'Create a new list',
                'GET /api/lists/:projectId': 'Get all lists for a project',
            },
            'tasks': {
                'POST /api/tasks': 'Create a new task',
                'GET /api/tasks/:listId': 'Get all tasks for a list',
                'PATCH /api/tasks/:id': 'Update title/description/list/order',
                'POST /api/tasks/:id/move': 'Move task to new list/order',
                'DELETE /api/tasks/:id': 'Delete a task',
            },
        },
        'socket': {
            'url': '/ws/board/',
            'client': ['join', 'leave', 'ping'],
            'heartbeatInterval': settings.TASKBOARD_WS_HEARTBEAT_INTERVAL,
            'events': ['task:created', 'task:updated', 'task:moved', 'task:deleted'],
        },
    })


@require_GET
def health_check(request):
    """Health check para monitoramento"""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except Exception as e:
        logger.error(f"❌ Health check falhou: {str(e)}")
        return JsonResponse({'status': 'error', 'database': 'unreachable'}, status=503)

    return JsonResponse({'status': 'ok', 'database': 'ok'})


# === USUÁRIOS ===

@require_GET
@requer_identidade
def me(request):
    """Garante (ou cria) o usuário do header de identidade"""
    return JsonResponse(serializar_usuario(request.board_user))


@csrf_exempt
@require_http_methods(['POST'])
def criar_usuario(request):
    """Cria usuário explicitamente (sem projeto padrão)"""
    dados = CreateUserForm(ler_json(request)).validar()

    if User.objects.filter(username=dados['username']).exists():
        raise ValidationFailed('Username already exists')

    user = User(username=dados['username'])
    user.set_unusable_password()
    user.save()

    return JsonResponse(serializar_usuario(user), status=201)


# === PROJETOS ===

@csrf_exempt
@require_http_methods(['GET', 'POST'])
@requer_identidade
def projetos(request):
    """
    GET  - projetos do usuário com listas e tarefas
    POST - cria projeto vazio
    """
    if request.method == 'GET':
        return JsonResponse(services.projects_for(request.board_user), safe=False)

    dados = CreateProjectForm(ler_json(request)).validar()
    project = Project.objects.create(name=dados['name'], owner=request.board_user)
    logger.info(f"📁 Projeto criado - {project.name} por {request.board_user.username}")

    return JsonResponse(serializar_projeto(project, lists=[]), status=201)


@require_GET
@requer_identidade
def detalhe_projeto(request, project_id):
    return JsonResponse(services.project_detail(request.board_user, project_id))


@require_GET
@requer_identidade
def board_projeto(request, project_id):
    """Board do projeto com listas e tarefas ordenadas"""
    return JsonResponse(services.project_board(request.board_user, project_id))


# === LISTAS ===

@csrf_exempt
@require_http_methods(['POST'])
@requer_identidade
def criar_lista(request):
    dados = CreateListForm(ler_json(request)).validar()

    project = OwnershipGuard.project_for(request.board_user, dados['projectId'])
    task_list = TaskList.objects.create(
        name=dados['name'],
        project=project,
        order=dados.get('order') if dados.get('order') is not None else 0
    )

    return JsonResponse(serializar_lista(task_list, tasks=[]), status=201)


@require_GET
@requer_identidade
def listas_projeto(request, project_id):
    return JsonResponse(services.lists_for(request.board_user, project_id), safe=False)


# === ERROS ===

def pagina_nao_encontrada(request, exception):
    """404 em JSON para a API; demais rotas usam a página padrão do Django"""
    if request.path.startswith('/api/'):
        return JsonResponse({'error': 'Not found'}, status=404)
    return page_not_found(request, exception)
