# apps/client/api.py

import logging
from typing import Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:8000/api'


class ApiError(Exception):
    """Resposta de erro da API (status >= 400)"""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class BoardApiClient:
    """
    Cliente HTTP assíncrono da API do Task Board

    Envia o header de identidade em todas as requisições. Pode receber
    um httpx.AsyncClient já configurado (ex.: com transport de teste).
    """

    def __init__(self, username: str, base_url: str = DEFAULT_BASE_URL,
                 http: Optional[httpx.AsyncClient] = None,
                 identity_header: str = 'X-Username'):
        self.username = username
        self._http = http or httpx.AsyncClient(base_url=base_url)
        self._headers = {identity_header: username}

    async def aclose(self):
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs):
        response = await self._http.request(method, path, headers=self._headers, **kwargs)
        if response.status_code >= 400:
            try:
                message = response.json().get('error', response.reason_phrase)
            except ValueError:
                message = response.reason_phrase
            raise ApiError(response.status_code, message)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # === Usuários e projetos ===

    async def ensure_user(self) -> Dict:
        return await self._request('GET', '/me')

    async def fetch_projects(self) -> List[Dict]:
        return await self._request('GET', '/projects')

    async def create_project(self, name: str) -> Dict:
        return await self._request('POST', '/projects', json={'name': name})

    async def fetch_board(self, project_id: str) -> Dict:
        return await self._request('GET', f'/projects/{project_id}/board')

    # === Listas ===

    async def fetch_lists(self, project_id: str) -> List[Dict]:
        return await self._request('GET', f'/lists/{project_id}')

    async def create_list(self, project_id: str, name: str, order: Optional[int] = None) -> Dict:
        payload = {'projectId': project_id, 'name': name}
        if order is not None:
            payload['order'] = order
        return await self._request('POST', '/lists', json=payload)

    # === Tarefas ===

    async def fetch_tasks(self, list_id: str) -> List[Dict]:
        return await self._request('GET', f'/tasks/{list_id}')

    async def create_task(self, list_id: str, title: str, description: Optional[str] = None,
                          order: Optional[int] = None) -> Dict:
        payload = {'listId': list_id, 'title': title}
        if description:
            payload['description'] = description
        if order is not None:
            payload['order'] = order
        return await self._request('POST', '/tasks', json=payload)

    async def update_task(self, task_id: str, **fields) -> Dict:
        return await self._request('PATCH', f'/tasks/{task_id}', json=fields)

    async def move_task(self, task_id: str, list_id: str, order: int) -> Dict:
        return await self._request('POST', f'/tasks/{task_id}/move', json={'listId': list_id, 'order': order})

    async def delete_task(self, task_id: str) -> None:
        await self._request('DELETE', f'/tasks/{task_id}')
