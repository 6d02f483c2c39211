# apps/core/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Project, Task, TaskList, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin customizado para o modelo User"""

    list_display = ['username', 'projects_count', 'is_active', 'criado_em']
    list_filter = ['is_staff', 'is_active', 'criado_em']
    search_fields = ['username']
    ordering = ['-criado_em']

    def projects_count(self, obj):
        """Conta projetos do usuário"""
        return obj.projects.count()

    projects_count.short_description = 'Projetos'


class TaskListInline(admin.TabularInline):
    """Inline para listas do projeto"""
    model = TaskList
    extra = 0
    fields = ['name', 'order']
    ordering = ['order', 'created_at']


class TaskInline(admin.TabularInline):
    """Inline para tarefas da lista"""
    model = Task
    extra = 0
    fields = ['title', 'order', 'created_by']
    ordering = ['order', 'created_at']


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """Admin para gerenciamento de projetos"""

    list_display = ['name', 'owner', 'lists_count', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'owner__username']
    readonly_fields = ['created_at', 'updated_at']

    inlines = [TaskListInline]

    def lists_count(self, obj):
        """Conta listas do projeto"""
        return obj.lists.count()

    lists_count.short_description = 'Listas'


@admin.register(TaskList)
class TaskListAdmin(admin.ModelAdmin):
    """Admin para listas (colunas)"""

    list_display = ['name', 'project', 'order', 'tasks_count']
    list_filter = ['project']
    search_fields = ['name', 'project__name']
    ordering = ['project', 'order', 'created_at']

    inlines = [TaskInline]

    def tasks_count(self, obj):
        """Conta tarefas na lista"""
        return obj.tasks.count()

    tasks_count.short_description = 'Tarefas'


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    """Admin para tarefas"""

    list_display = ['title', 'task_list', 'order', 'created_by', 'updated_at']
    list_filter = ['task_list__project']
    search_fields = ['title', 'description']
    readonly_fields = ['created_by', 'created_at', 'updated_at']
    ordering = ['task_list', 'order', 'created_at']
