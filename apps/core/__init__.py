# apps/core/__init__.py

"""
Core - Base do Task Board

Funcionalidades:
- Models (User, Project, TaskList, Task)
- Identidade por header com auto-provisionamento
- Guarda de propriedade e taxonomia de erros da API
"""
