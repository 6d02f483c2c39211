# apps/core/exceptions.py

"""
Erros de domínio do Task Board

Cada erro carrega o status HTTP correspondente; o ApiErrorMiddleware
converte essas exceções em respostas JSON.
"""


class BoardError(Exception):
    """Base de todos os erros reportados ao cliente"""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_dict(self):
        data = {'error': self.message}
        if self.details:
            data['details'] = self.details
        return data


class Unauthenticated(BoardError):
    """Header de identidade ausente"""

    status_code = 401
    default_message = 'x-username header is required'


class ValidationFailed(BoardError):
    """Payload inválido - detectado antes de qualquer escrita"""

    status_code = 400
    default_message = 'Validation error'


class NotFound(BoardError):
    """
    Entidade inexistente OU de outro usuário

    As duas causas são propositalmente indistinguíveis para o cliente.
    """

    status_code = 404
    default_message = 'Not found'
