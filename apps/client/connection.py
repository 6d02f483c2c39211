# apps/client/connection.py

import asyncio
import json
import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List, Optional
from urllib.parse import urlencode

import websockets

logger = logging.getLogger(__name__)

DEFAULT_WS_URL = 'ws://localhost:8000/ws/board/'

Handler = Callable[[dict], Awaitable[None]]


class RealtimeConnection:
    """
    Conexão em tempo real com o servidor

    Criada uma vez na inicialização da aplicação, encerrada no
    desligamento e passada explicitamente aos componentes que precisam
    dela. Eventos recebidos são despachados pelos handlers registrados
    por tipo (task:created, task:moved, ...).
    """

    def __init__(self, username: str, url: str = DEFAULT_WS_URL, connect=None):
        self.username = username
        self.url = url
        self._connect = connect or websockets.connect
        self._ws = None
        self._reader: Optional[asyncio.Task] = None
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    @property
    def connected(self) -> bool:
        return self._ws is not None

    async def start(self):
        """Abre o WebSocket e inicia a leitura de eventos"""
        if self._ws is not None:
            return self
        url = f"{self.url}?{urlencode({'username': self.username})}"
        self._ws = await self._connect(url)
        self._reader = asyncio.create_task(self._read_loop())
        logger.info(f"🔌 Conectado ao tempo real como {self.username}")
        return self

    async def close(self):
        """Encerra a conexão; eventos posteriores são perdidos"""
        if self._reader is not None:
            self._reader.cancel()
            try:
                await self._reader
            except asyncio.CancelledError:
                pass
            self._reader = None
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
            logger.info("🔌 Conexão de tempo real encerrada")

    async def __aenter__(self):
        return await self.start()

    async def __aexit__(self, *exc_info):
        await self.close()

    # === Handlers ===

    def on(self, event: str, handler: Handler):
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Optional[Handler] = None):
        """Remove um handler (ou todos os handlers do evento)"""
        if handler is None:
            self._handlers.pop(event, None)
        elif handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    async def dispatch(self, data: dict):
        for handler in list(self._handlers.get(data.get('type'), [])):
            try:
                await handler(data.get('message'))
            except Exception:
                logger.exception(f"❌ Erro no handler de {data.get('type')}")

    # === Mensagens para o servidor ===

    async def emit(self, message_type: str, **payload):
        if self._ws is None:
            raise RuntimeError('RealtimeConnection not started')
        await self._ws.send(json.dumps({'type': message_type, **payload}))

    async def join(self, project_id: str):
        await self.emit('join', projectId=project_id)

    async def leave(self, project_id: str):
        await self.emit('leave', projectId=project_id)

    async def _read_loop(self):
        try:
            async for raw in self._ws:
                try:
                    data = json.loads(raw)
                except json.JSONDecodeError:
                    logger.error("❌ Mensagem inválida recebida do servidor")
                    continue
                if data.get('type') == 'error':
                    logger.warning(f"⚠️  Servidor: {data.get('message')}")
                await self.dispatch(data)
        except websockets.ConnectionClosed:
            logger.warning("⚠️  Conexão de tempo real fechada pelo servidor")
        else:
            logger.info("🔌 Servidor encerrou a conexão de tempo real")

        # Fim da leitura sem close(): o socket não serve mais para emit
        self._ws = None
