# config/asgi.py

import os
from django.core.asgi import get_asgi_application
from channels.routing import ProtocolTypeRouter, URLRouter

# Configurar Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

# Importar rotas de WebSocket depois de configurar Django
django_asgi_app = get_asgi_application()

from apps.board.middleware import IdentityMiddlewareStack  # noqa: E402
from apps.board.routing import websocket_urlpatterns  # noqa: E402

# Configuração ASGI
application = ProtocolTypeRouter({
    # HTTP tradicional
    "http": django_asgi_app,

    # WebSocket com identidade pelo header/query string
    "websocket": IdentityMiddlewareStack(
        URLRouter(websocket_urlpatterns)
    ),
})
