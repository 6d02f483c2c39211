# apps/core/middleware.py

import logging

from django.http import JsonResponse

from .exceptions import BoardError

logger = logging.getLogger(__name__)


class ApiErrorMiddleware:
    """
    Middleware que converte erros da API em respostas JSON

    - BoardError (Unauthenticated, ValidationFailed, NotFound) vira o
      status correspondente com {"error": ...}
    - Qualquer outra exceção em /api/ vira 500 genérico (Unhandled),
      sem vazar detalhes internos
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, BoardError):
            if exception.status_code >= 500:
                logger.error(f"❌ {request.method} {request.path}: {exception.message}")
            return JsonResponse(exception.as_dict(), status=exception.status_code)

        if not request.path.startswith('/api/'):
            return None  # Deixar o Django lidar com o resto

        logger.exception(f"❌ Erro inesperado em {request.method} {request.path}")
        return JsonResponse({'error': 'Internal server error'}, status=500)
