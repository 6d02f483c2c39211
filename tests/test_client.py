"""
Tests for the async client: HTTP wrapper, realtime connection and the
board view model (optimistic move with rollback by re-fetch).
"""

import asyncio
import json

import httpx
import pytest
import pytest_asyncio
import websockets

from apps.client import ApiError, BoardApiClient, BoardViewModel, RealtimeConnection

pytestmark = pytest.mark.asyncio


# === Fakes ===

class FakeApi:
    """API em memória com o mesmo contrato do BoardApiClient"""

    def __init__(self, lists, tasks):
        self.lists = lists
        self.server_tasks = tasks
        self.fail_moves = False
        self.moves = []
        self.fetches = []

    async def fetch_lists(self, project_id):
        return [dict(task_list) for task_list in self.lists]

    async def fetch_tasks(self, list_id):
        self.fetches.append(list_id)
        return [dict(task) for task in self.server_tasks.get(list_id, [])]

    async def move_task(self, task_id, list_id, order):
        self.moves.append((task_id, list_id, order))
        if self.fail_moves:
            raise ApiError(404, 'Target list not found')
        for tasks in self.server_tasks.values():
            for task in list(tasks):
                if task['id'] == task_id:
                    tasks.remove(task)
                    moved = {**task, 'listId': list_id, 'order': order}
                    self.server_tasks.setdefault(list_id, []).append(moved)
                    return moved
        raise ApiError(404, 'Task not found')

    async def create_task(self, list_id, title, description=None, order=None):
        task = {'id': f't{len(self.moves) + 100}', 'title': title, 'listId': list_id, 'order': 0}
        self.server_tasks.setdefault(list_id, []).append(task)
        return task


class FakeConnection:

    def __init__(self):
        self.handlers = {}
        self.emitted = []

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def off(self, event, handler=None):
        self.handlers.get(event, []).remove(handler)

    async def join(self, project_id):
        self.emitted.append(('join', project_id))

    async def leave(self, project_id):
        self.emitted.append(('leave', project_id))

    async def fire(self, event, message):
        for handler in list(self.handlers.get(event, [])):
            await handler(message)


def _board():
    lists = [
        {'id': 'todo', 'name': 'Todo', 'order': 0},
        {'id': 'doing', 'name': 'Doing', 'order': 1},
        {'id': 'done', 'name': 'Done', 'order': 2},
    ]
    tasks = {
        'todo': [
            {'id': 't1', 'title': 'Write docs', 'listId': 'todo', 'order': 0},
            {'id': 't2', 'title': 'Plan', 'listId': 'todo', 'order': 1},
        ],
        'doing': [
            {'id': 't3', 'title': 'Build', 'listId': 'doing', 'order': 0},
        ],
        'done': [],
    }
    return FakeApi(lists, tasks)


@pytest_asyncio.fixture
async def board():
    api = _board()
    connection = FakeConnection()
    view_model = BoardViewModel(api, connection, 'p1')
    await view_model.load()
    return view_model


# === BoardViewModel ===

class TestBoardViewModel:

    async def test_load_fills_columns_in_order(self, board):
        columns = board.columns()

        assert [task_list['id'] for task_list, _ in columns] == ['todo', 'doing', 'done']
        assert [t['id'] for t in columns[0][1]] == ['t1', 't2']

    async def test_move_is_optimistic_and_appends_to_target(self, board):
        seen_during_call = {}
        original = board.api.move_task

        async def spy(task_id, list_id, order):
            seen_during_call['doing'] = [t['id'] for t in board.tasks['doing']]
            seen_during_call['todo'] = [t['id'] for t in board.tasks['todo']]
            return await original(task_id, list_id, order)

        board.api.move_task = spy

        assert await board.move_task('t1', 'doing') is True

        assert seen_during_call == {'doing': ['t3', 't1'], 'todo': ['t2']}
        assert board.api.moves == [('t1', 'doing', 1)]
        assert board.find_task('t1')['listId'] == 'doing'
        assert board.find_task('t1')['order'] == 1

    async def test_failed_move_is_rolled_back_by_refetch(self, board):
        board.api.fail_moves = True

        assert await board.move_task('t1', 'doing') is False

        assert [t['id'] for t in board.tasks['todo']] == ['t1', 't2']
        assert [t['id'] for t in board.tasks['doing']] == ['t3']

    async def test_network_failure_is_rolled_back(self, board):
        async def unreachable(task_id, list_id, order):
            raise httpx.ConnectError('connection refused')

        board.api.move_task = unreachable

        assert await board.move_task('t2', 'done') is False

        assert board.find_task('t2')['listId'] == 'todo'
        assert board.tasks['done'] == []

    async def test_same_list_drop_is_a_noop(self, board):
        board.api.fetches.clear()

        assert await board.move_task('t1', 'todo') is False

        assert board.api.moves == []
        assert board.api.fetches == []

    async def test_unknown_task_or_list_is_a_noop(self, board):
        assert await board.move_task('missing', 'doing') is False
        assert await board.move_task('t1', 'elsewhere') is False
        assert board.api.moves == []

    async def test_events_trigger_refetch_not_merge(self, board):
        await board.enter()
        board.api.server_tasks['done'].append({'id': 't9', 'title': 'Shipped', 'listId': 'done', 'order': 0})
        board.api.fetches.clear()

        await board.connection.fire('task:created', {'id': 'ignored', 'listId': 'todo'})

        assert sorted(board.api.fetches) == ['doing', 'done', 'todo']
        assert [t['id'] for t in board.tasks['done']] == ['t9']
        assert board.find_task('ignored') is None

    async def test_enter_and_leave_manage_subscription(self, board):
        await board.enter()

        assert board.connection.emitted == [('join', 'p1')]
        assert all(len(board.connection.handlers[e]) == 1 for e in
                   ('task:created', 'task:updated', 'task:moved', 'task:deleted'))

        await board.leave()

        assert board.connection.emitted[-1] == ('leave', 'p1')
        assert all(board.connection.handlers[e] == [] for e in board.connection.handlers)

    async def test_create_task_refreshes_its_list(self, board):
        board.api.fetches.clear()

        task = await board.create_task('done', '  Release  ')

        assert task['title'] == 'Release'
        assert board.api.fetches == ['done']
        assert [t['title'] for t in board.tasks['done']] == ['Release']


# === BoardApiClient ===

def _client(handler):
    http = httpx.AsyncClient(base_url='http://board.test/api', transport=httpx.MockTransport(handler))
    return BoardApiClient('alice', http=http)


class TestBoardApiClient:

    async def test_sends_identity_header_and_json(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={'id': 't1', 'listId': 'l2', 'order': 0})

        async with _client(handler) as client:
            moved = await client.move_task('t1', 'l2', 0)

        assert moved['listId'] == 'l2'
        request = requests[0]
        assert request.method == 'POST'
        assert request.url.path == '/api/tasks/t1/move'
        assert request.headers['x-username'] == 'alice'
        assert json.loads(request.content) == {'listId': 'l2', 'order': 0}

    async def test_error_status_raises_api_error(self):
        def handler(request):
            return httpx.Response(404, json={'error': 'Target list not found'})

        async with _client(handler) as client:
            with pytest.raises(ApiError) as exc:
                await client.move_task('t1', 'nope', 0)

        assert exc.value.status_code == 404
        assert exc.value.message == 'Target list not found'

    async def test_delete_returns_none_on_204(self):
        def handler(request):
            assert request.method == 'DELETE'
            return httpx.Response(204)

        async with _client(handler) as client:
            assert await client.delete_task('t1') is None

    async def test_update_sends_only_given_fields(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={'id': 't1'})

        async with _client(handler) as client:
            await client.update_task('t1', title='New')

        assert bodies == [{'title': 'New'}]


# === RealtimeConnection ===

class FakeSocket:
    """WebSocket falso: entrega mensagens enfileiradas e registra envios"""

    def __init__(self):
        self.sent = []
        self.incoming = asyncio.Queue()
        self.closed = False

    async def send(self, data):
        self.sent.append(json.loads(data))

    async def close(self):
        self.closed = True

    def __aiter__(self):
        return self

    async def __anext__(self):
        message = await self.incoming.get()
        if message is None:
            raise StopAsyncIteration
        if isinstance(message, Exception):
            raise message
        return message


class TestRealtimeConnection:

    async def test_emit_before_start_fails(self):
        connection = RealtimeConnection('alice')

        with pytest.raises(RuntimeError):
            await connection.join('p1')

    async def test_start_join_dispatch_and_close(self):
        socket = FakeSocket()
        urls = []

        async def connect(url):
            urls.append(url)
            return socket

        received = []

        async def on_moved(message):
            received.append(message)

        connection = RealtimeConnection('alice smith', url='ws://board.test/ws/board/', connect=connect)
        connection.on('task:moved', on_moved)

        async with connection:
            await connection.join('p1')
            await socket.incoming.put(json.dumps({'type': 'task:moved', 'message': {'id': 't1'}}))
            await socket.incoming.put('not json')
            await socket.incoming.put(json.dumps({'type': 'task:moved', 'message': {'id': 't2'}}))
            for _ in range(20):
                if len(received) == 2:
                    break
                await asyncio.sleep(0)

        assert urls == ['ws://board.test/ws/board/?username=alice+smith']
        assert socket.sent == [{'type': 'join', 'projectId': 'p1'}]
        assert received == [{'id': 't1'}, {'id': 't2'}]
        assert socket.closed
        assert not connection.connected

    @pytest.mark.parametrize('ending', [None, websockets.ConnectionClosed(None, None)])
    async def test_server_close_marks_connection_closed(self, ending):
        socket = FakeSocket()

        async def connect(url):
            return socket

        connection = RealtimeConnection('alice', connect=connect)
        await connection.start()
        assert connection.connected

        await socket.incoming.put(ending)
        for _ in range(20):
            if not connection.connected:
                break
            await asyncio.sleep(0)

        assert not connection.connected
        with pytest.raises(RuntimeError):
            await connection.join('p1')
        assert socket.sent == []

        await connection.close()

    async def test_failing_handler_does_not_stop_others(self):
        connection = RealtimeConnection('alice')
        calls = []

        async def broken(message):
            raise ValueError('boom')

        async def healthy(message):
            calls.append(message)

        connection.on('task:deleted', broken)
        connection.on('task:deleted', healthy)

        await connection.dispatch({'type': 'task:deleted', 'message': {'taskId': 't1'}})

        assert calls == [{'taskId': 't1'}]

    async def test_off_removes_handler(self):
        connection = RealtimeConnection('alice')
        calls = []

        async def handler(message):
            calls.append(message)

        connection.on('task:created', handler)
        connection.off('task:created', handler)

        await connection.dispatch({'type': 'task:created', 'message': {}})

        assert calls == []
