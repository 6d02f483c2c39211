# apps/board/__init__.py

"""
Board - Tarefas do Task Board

Funcionalidades:
- Consultas do board (projeto → listas → tarefas)
- Criação, edição, movimentação e exclusão de tarefas
- WebSockets para propagação em tempo real por projeto
"""
