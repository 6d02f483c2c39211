# apps/board/broadcaster.py

"""
Broadcaster de eventos de tarefas

Cada projeto tem um grupo no channel layer. Os eventos são publicados
logo após a persistência, em modo fire-and-forget: falhas de publicação
são registradas no log e nunca chegam ao cliente HTTP.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

TASK_CREATED = 'task:created'
TASK_UPDATED = 'task:updated'
TASK_MOVED = 'task:moved'
TASK_DELETED = 'task:deleted'

# Evento público → tipo de mensagem do channel layer (handler do consumer)
TIPOS_CHANNEL = {
    TASK_CREATED: 'task.created',
    TASK_UPDATED: 'task.updated',
    TASK_MOVED: 'task.moved',
    TASK_DELETED: 'task.deleted',
}


def grupo_projeto(project_id):
    """Nome do grupo do channel layer para um projeto"""
    return f'project_{project_id}'


def publish_task_event(project_id, event, message):
    """
    Publica um evento de ciclo de vida no grupo do projeto

    Retorna True se o channel layer aceitou a mensagem.
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning(f"⚠️  Channel layer não configurado - evento {event} descartado")
        return False

    try:
        async_to_sync(channel_layer.group_send)(
            grupo_projeto(project_id),
            {
                'type': TIPOS_CHANNEL[event],
                'event': event,
                'message': message,
            }
        )
    except Exception:
        logger.exception(f"❌ Falha ao publicar {event} no projeto {project_id}")
        return False

    logger.debug(f"📣 {event} publicado no projeto {project_id}")
    return True
