# config/settings/development.py

from .base import *

# === DESENVOLVIMENTO ===

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# === BANCO DE DADOS ===

# PostgreSQL por padrão (mesmo do production)
# Usar DATABASE_URL se fornecida, senão usar variáveis individuais
if env('DATABASE_URL', default=None):
    import dj_database_url

    DATABASES['default'] = dj_database_url.parse(env('DATABASE_URL'), conn_max_age=600)

# Fallback para SQLite apenas se explicitamente solicitado
if env('USE_SQLITE', cast=bool, default=False):
    print("🔄 Usando SQLite para desenvolvimento")
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }
else:
    print(f"🐘 Usando PostgreSQL: {DATABASES['default']['NAME']}@{DATABASES['default']['HOST']}")

# === LOGGING MAIS VERBOSO ===

LOGGING['handlers']['console']['level'] = 'DEBUG'
LOGGING['loggers']['apps']['level'] = 'DEBUG'

# === CONFIGURAÇÕES DE DESENVOLVIMENTO ===

# Cache simples em desenvolvimento (sem Redis obrigatório)
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'task-board-dev-cache',
    }
}

# Channels simplificado para desenvolvimento (Redis apenas se configurado)
if env('REDIS_URL', default=None):
    CHANNEL_LAYERS['default']['CONFIG']['hosts'] = [env('REDIS_URL')]
    print("🔴 Channel layer no Redis")
else:
    CHANNEL_LAYERS = {
        'default': {
            'BACKEND': 'channels.layers.InMemoryChannelLayer'
        }
    }

# Frontend local (Vite)
CSRF_TRUSTED_ORIGINS = ['http://localhost:5173', 'http://127.0.0.1:5173']

# Configurações mais relaxadas para desenvolvimento
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

# Configurações do shell_plus
SHELL_PLUS_IMPORTS = [
    'from apps.core.models import *',
    'from apps.core.permissions import OwnershipGuard',
    'from apps.board import services',
]

print("🚀 Configurações de DESENVOLVIMENTO carregadas")
print(f"🔑 DEBUG: {DEBUG}")
