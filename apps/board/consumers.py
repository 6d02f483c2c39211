# apps/board/consumers.py

import json
import logging
import uuid

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings
from django.utils import timezone

from apps.core.exceptions import NotFound
from apps.core.permissions import OwnershipGuard

from .broadcaster import grupo_projeto

logger = logging.getLogger(__name__)

CLOSE_UNAUTHENTICATED = 4401


class BoardConsumer(AsyncWebsocketConsumer):
    """
    Consumer WebSocket para atualizações em tempo real dos boards

    Uma conexão por cliente; o cliente entra e sai explicitamente dos
    grupos dos projetos (join/leave). Todo evento publicado no grupo é
    repassado a todos os membros, inclusive ao cliente que originou a
    mutação.
    """

    async def connect(self):
        """
        Aceita a conexão somente com identidade resolvida
        """
        self.user = self.scope.get('board_user')
        self.grupos = set()

        if self.user is None:
            logger.warning("❌ Conexão WebSocket rejeitada - identidade ausente")
            await self.close(code=CLOSE_UNAUTHENTICATED)
            return

        await self.accept()
        logger.info(f"✅ WebSocket conectado - {self.user.username}")

    async def disconnect(self, close_code):
        """
        Sai de todos os grupos em que entrou
        """
        for grupo in list(getattr(self, 'grupos', ())):
            await self.channel_layer.group_discard(grupo, self.channel_name)
        self.grupos = set()

        if getattr(self, 'user', None) is not None:
            logger.info(f"🔌 WebSocket desconectado - {self.user.username} ({close_code})")

    async def receive(self, text_data=None, bytes_data=None):
        """
        Recebe mensagens do cliente WebSocket
        Processa join / leave / ping
        """
        try:
            data = json.loads(text_data or '')
        except json.JSONDecodeError:
            logger.error(f"❌ JSON inválido recebido via WebSocket de {self.user.username}")
            await self.send_json({'type': 'error', 'message': 'Invalid JSON'})
            return

        if not isinstance(data, dict):
            await self.send_json({'type': 'error', 'message': 'Invalid message'})
            return

        message_type = data.get('type')

        # Heartbeat/Ping
        if message_type == 'ping':
            await self.send_json({
                'type': 'pong',
                'timestamp': timezone.now().isoformat(),
                'interval': settings.TASKBOARD_WS_HEARTBEAT_INTERVAL,
            })

        elif message_type == 'join':
            await self.entrar_projeto(data.get('projectId'))

        elif message_type == 'leave':
            await self.sair_projeto(data.get('projectId'))

        else:
            await self.send_json({'type': 'error', 'message': f'Unknown message type: {message_type}'})

    async def entrar_projeto(self, project_id):
        project = await self.buscar_projeto(project_id)
        if project is None:
            await self.send_json({'type': 'error', 'message': 'Project not found'})
            return

        grupo = grupo_projeto(project.id)
        await self.channel_layer.group_add(grupo, self.channel_name)
        self.grupos.add(grupo)

        logger.info(f"👥 {self.user.username} entrou no projeto {project.id}")
        await self.send_json({'type': 'joined', 'projectId': str(project.id)})

    async def sair_projeto(self, project_id):
        # Mesmo formato canônico usado no join
        try:
            project_id = str(uuid.UUID(str(project_id)))
        except ValueError:
            await self.send_json({'type': 'error', 'message': 'Project not found'})
            return

        grupo = grupo_projeto(project_id)
        if grupo in self.grupos:
            await self.channel_layer.group_discard(grupo, self.channel_name)
            self.grupos.discard(grupo)
            logger.info(f"👋 {self.user.username} saiu do projeto {project_id}")

        await self.send_json({'type': 'left', 'projectId': project_id})

    # === Handlers para eventos de tarefas ===

    async def task_created(self, event):
        await self.repassar_evento(event)

    async def task_updated(self, event):
        await self.repassar_evento(event)

    async def task_moved(self, event):
        await self.repassar_evento(event)

    async def task_deleted(self, event):
        await self.repassar_evento(event)

    async def repassar_evento(self, event):
        """
        Envia o evento ao cliente sem tratar o eco do próprio autor
        """
        await self.send_json({
            'type': event['event'],
            'message': event['message'],
        })

    # === Métodos auxiliares ===

    async def send_json(self, content):
        await self.send(text_data=json.dumps(content))

    @database_sync_to_async
    def buscar_projeto(self, project_id):
        """
        Projeto do usuário ou None (inexistente e alheio são iguais)
        """
        try:
            return OwnershipGuard.project_for(self.user, project_id)
        except NotFound:
            return None
