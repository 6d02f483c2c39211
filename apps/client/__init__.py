# apps/client/__init__.py

"""
Cliente assíncrono do Task Board

- BoardApiClient: API REST com o header de identidade
- RealtimeConnection: conexão WebSocket com ciclo de vida explícito
- BoardViewModel: cache por projeto, movimentação otimista e
  reconciliação por nova busca
"""

from .api import ApiError, BoardApiClient
from .connection import RealtimeConnection
from .view_model import BoardViewModel

__all__ = ['ApiError', 'BoardApiClient', 'RealtimeConnection', 'BoardViewModel']
