# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Criação de tarefas
    path('tasks', views.criar_task, name='criar_task'),

    # Listagem por lista (GET) / patch e exclusão por tarefa
    path('tasks/<uuid:resource_id>', views.task_resource, name='task'),

    # Drag-and-drop - movimentação entre listas
    path('tasks/<uuid:task_id>/move', views.mover_task, name='mover_task'),
]
