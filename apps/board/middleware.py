# apps/board/middleware.py

from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.conf import settings

from apps.core.exceptions import BoardError
from apps.core.permissions import OwnershipGuard


def token_do_scope(scope):
    """
    Token de identidade do handshake WebSocket

    Procura primeiro o header configurado e depois o parâmetro
    ?username= (navegadores não enviam headers customizados).
    """
    header = getattr(settings, 'TASKBOARD_IDENTITY_HEADER', 'X-Username').lower().encode()
    for nome, valor in scope.get('headers', []):
        if nome.lower() == header:
            return valor.decode('utf-8', errors='replace')

    query = parse_qs(scope.get('query_string', b'').decode('utf-8', errors='replace'))
    valores = query.get('username') or ['']
    return valores[0]


@database_sync_to_async
def resolver_usuario(token):
    try:
        return OwnershipGuard.ensure_user(token)
    except BoardError:
        return None


class IdentityMiddleware(BaseMiddleware):
    """
    Resolve o usuário do handshake e coloca em scope['board_user']
    (None quando não há identidade válida)
    """

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        scope['board_user'] = await resolver_usuario(token_do_scope(scope))
        return await super().__call__(scope, receive, send)


def IdentityMiddlewareStack(inner):
    return IdentityMiddleware(inner)
