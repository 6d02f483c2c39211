# apps/__init__.py

"""
Task Board - Aplicações Django

Este pacote contém todas as aplicações do sistema:
- core: Models, identidade, propriedade e API de projetos/listas
- board: Tarefas, consultas do board e WebSockets
- client: Cliente assíncrono (API, conexão em tempo real e view model)
"""

__version__ = '1.0.0'
