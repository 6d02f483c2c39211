# apps/board/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class BoardConfig(AppConfig):
    """Configuração da app Board"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board - Tarefas e tempo real'

    def ready(self):
        logger.debug("🔌 Board App inicializada - WebSockets habilitados")
