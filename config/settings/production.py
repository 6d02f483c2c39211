# config/settings/production.py

import logging

import dj_database_url
from .base import *

# === PRODUÇÃO ===

DEBUG = False

# Hosts permitidos (obrigatório definir)
ALLOWED_HOSTS = env('ALLOWED_HOSTS', default=['localhost'])

# === SEGURANÇA ===

# SSL/HTTPS obrigatório
SECURE_SSL_REDIRECT = env('SECURE_SSL_REDIRECT', cast=bool, default=True)
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

# Cookies seguros
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True

# HSTS (HTTP Strict Transport Security)
SECURE_HSTS_SECONDS = 31536000  # 1 ano
SECURE_HSTS_INCLUDE_SUBDOMAINS = True

X_FRAME_OPTIONS = 'DENY'

# === BANCO DE DADOS ===

# Usar DATABASE_URL em produção (Heroku, Railway, etc)
if env('DATABASE_URL', default=None):
    DATABASES['default'] = dj_database_url.parse(
        env('DATABASE_URL'),
        conn_max_age=600,
        conn_health_checks=True,
    )
else:
    # Configuração manual para outros provedores
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': env('DB_NAME'),
            'USER': env('DB_USER'),
            'PASSWORD': env('DB_PASSWORD'),
            'HOST': env('DB_HOST'),
            'PORT': env('DB_PORT', default='5432'),
            'OPTIONS': {
                'sslmode': 'require',
            },
            'CONN_MAX_AGE': 600,
        }
    }

# === LOGGING ===

LOGGING['handlers']['file']['filename'] = env('LOG_FILE', default='/var/log/task-board/task_board.log')

# Logging para Sentry (se configurado)
if env('SENTRY_DSN', default=None):
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration

    sentry_logging = LoggingIntegration(
        level=logging.INFO,
        event_level=logging.ERROR
    )

    sentry_sdk.init(
        dsn=env('SENTRY_DSN'),
        integrations=[
            DjangoIntegration(),
            sentry_logging,
        ],
        traces_sample_rate=0.1,
        environment=env('ENVIRONMENT', default='production')
    )

# === CACHE / CHANNELS ===

# Redis obrigatório em produção (cache e channel layer)
if not env('REDIS_URL', default=None):
    raise ValueError("REDIS_URL é obrigatório em produção")

# === CONFIGURAÇÕES DE PERFORMANCE ===

# Compressão de responses
MIDDLEWARE = ['django.middleware.gzip.GZipMiddleware'] + MIDDLEWARE

# === VALIDAÇÕES ===

# Verificar variáveis obrigatórias
required_settings = ['SECRET_KEY']
if env('DATABASE_URL', default=None) is None:
    required_settings.extend(['DB_NAME', 'DB_USER', 'DB_PASSWORD', 'DB_HOST'])

for setting in required_settings:
    if not env(setting, default=None):
        raise ValueError(f"Variável de ambiente {setting} é obrigatória em produção")
