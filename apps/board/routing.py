# apps/board/routing.py

from django.urls import re_path
from . import consumers

# Rotas WebSocket para a aplicação board
websocket_urlpatterns = [
    # Conexão única por cliente; join/leave escolhem os projetos
    re_path(r'ws/board/$', consumers.BoardConsumer.as_asgi()),
]
