# apps/core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    # === ÍNDICE E MONITORAMENTO ===
    path('', views.api_index, name='index'),
    path('health/', views.health_check, name='health'),

    # === USUÁRIOS ===
    path('api/me', views.me, name='me'),
    path('api/users', views.criar_usuario, name='criar_usuario'),
    path('api/users/me', views.me, name='usuario_atual'),

    # === PROJETOS ===
    path('api/projects', views.projetos, name='projetos'),
    path('api/projects/<uuid:project_id>', views.detalhe_projeto, name='detalhe_projeto'),
    path('api/projects/<uuid:project_id>/board', views.board_projeto, name='board_projeto'),

    # === LISTAS ===
    path('api/lists', views.criar_lista, name='criar_lista'),
    path('api/lists/<uuid:project_id>', views.listas_projeto, name='listas_projeto'),
]
