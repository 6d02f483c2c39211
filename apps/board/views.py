# apps/board/views.py

from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from apps.core.forms import CreateTaskForm, MoveTaskForm, UpdateTaskForm
from apps.core.permissions import requer_identidade
from apps.core.utils import ler_json

from . import services


@csrf_exempt
@require_POST
@requer_identidade
def criar_task(request):
    """
    Cria tarefa e notifica o grupo do projeto (task:created)
    """
    dados = CreateTaskForm(ler_json(request)).validar()
    task = services.create_task(request.board_user, dados)
    return JsonResponse(task, status=201)


@csrf_exempt
@require_http_methods(['GET', 'PATCH', 'DELETE'])
@requer_identidade
def task_resource(request, resource_id):
    """
    GET    /api/tasks/<listId> - tarefas da lista em ordem crescente
    PATCH  /api/tasks/<id>     - patch parcial (task:updated)
    DELETE /api/tasks/<id>     - remove (task:deleted)
    """
    user = request.board_user

    if request.method == 'GET':
        return JsonResponse(services.tasks_for(user, resource_id), safe=False)

    if request.method == 'PATCH':
        dados = UpdateTaskForm(ler_json(request)).validar()
        return JsonResponse(services.update_task(user, resource_id, dados))

    services.delete_task(user, resource_id)
    return HttpResponse(status=204)


@csrf_exempt
@require_POST
@requer_identidade
def mover_task(request, task_id):
    """
    Move tarefa entre listas - usado pelo drag-and-drop
    Lista e ordem são obrigatórias e gravadas juntas (task:moved)
    """
    dados = MoveTaskForm(ler_json(request)).validar()
    task = services.move_task(request.board_user, task_id, dados['listId'], dados['order'])
    return JsonResponse(task)
