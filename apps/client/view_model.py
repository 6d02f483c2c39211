# apps/client/view_model.py

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

import httpx

from .api import ApiError, BoardApiClient
from .connection import RealtimeConnection

logger = logging.getLogger(__name__)

EVENTOS_TAREFA = ('task:created', 'task:updated', 'task:moved', 'task:deleted')


class BoardViewModel:
    """
    Cache local de listas e tarefas de um projeto

    Eventos do servidor são apenas um sinal para buscar de novo as
    tarefas; o payload nunca é mesclado no cache. O eco das próprias
    mutações é tratado igual a qualquer outro evento.
    """

    def __init__(self, api: BoardApiClient, connection: RealtimeConnection, project_id: str):
        self.api = api
        self.connection = connection
        self.project_id = project_id
        self.lists: List[Dict] = []
        self.tasks: Dict[str, List[Dict]] = {}

    # === Carga ===

    async def load(self):
        """Busca listas e as tarefas de cada lista"""
        self.lists = await self.api.fetch_lists(self.project_id)
        await self.refresh_tasks()

    async def refresh_tasks(self, list_ids: Optional[List[str]] = None):
        """Busca de novo as tarefas das listas informadas (padrão: todas)"""
        if list_ids is None:
            list_ids = [task_list['id'] for task_list in self.lists]
        resultados = await asyncio.gather(*(self.api.fetch_tasks(list_id) for list_id in list_ids))
        for list_id, tasks in zip(list_ids, resultados):
            self.tasks[list_id] = tasks

    def columns(self) -> List[Tuple[Dict, List[Dict]]]:
        """Colunas para renderização: (lista, tarefas) em ordem"""
        return [
            (task_list, self.tasks.get(task_list['id'], []))
            for task_list in self.lists
        ]

    def find_task(self, task_id: str) -> Optional[Dict]:
        for tasks in self.tasks.values():
            for task in tasks:
                if task['id'] == task_id:
                    return task
        return None

    # === Tempo real ===

    async def enter(self):
        """Entra no grupo do projeto e passa a reagir aos eventos"""
        for evento in EVENTOS_TAREFA:
            self.connection.on(evento, self._on_task_event)
        await self.connection.join(self.project_id)

    async def leave(self):
        for evento in EVENTOS_TAREFA:
            self.connection.off(evento, self._on_task_event)
        await self.connection.leave(self.project_id)

    async def _on_task_event(self, message):
        await self.refresh_tasks()

    # === Mutações ===

    async def move_task(self, task_id: str, target_list_id: str) -> bool:
        """
        Drag-and-drop: move a tarefa para o fim da lista de destino

        O cache é alterado antes da chamada de rede; em caso de falha a
        alteração é descartada buscando de novo o estado do servidor.
        """
        task = self.find_task(task_id)
        if task is None or task['listId'] == target_list_id:
            return False
        if target_list_id not in self.tasks:
            return False

        source_list_id = task['listId']
        new_order = len(self.tasks[target_list_id])

        # Atualização otimista
        self.tasks[source_list_id] = [t for t in self.tasks[source_list_id] if t['id'] != task_id]
        self.tasks[target_list_id] = self.tasks[target_list_id] + [
            {**task, 'listId': target_list_id, 'order': new_order}
        ]

        try:
            await self.api.move_task(task_id, target_list_id, new_order)
        except (ApiError, httpx.HTTPError) as e:
            logger.error(f"❌ Falha ao mover tarefa {task_id}: {e}")
            await self.refresh_tasks()
            return False

        return True

    async def create_task(self, list_id: str, title: str, description: Optional[str] = None) -> Dict:
        task = await self.api.create_task(list_id, title.strip(), description)
        await self.refresh_tasks([list_id])
        return task
