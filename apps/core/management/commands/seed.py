# apps/core/management/commands/seed.py

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.core.models import Project, Task, TaskList, User

LISTAS_DEMO = ['Todo', 'Doing', 'Done']

TASKS_DEMO = [
    ('Set up project structure', 'Initialize the project with necessary folders and files', 'Done', 0),
    ('Design database schema', 'Create the models for users, projects, lists and tasks', 'Done', 1),
    ('Implement REST API endpoints', 'Build all CRUD endpoints for users, projects, lists, and tasks', 'Doing', 0),
    ('Add real-time integration', 'Implement real-time updates for task changes', 'Doing', 1),
    ('Build frontend UI', 'Create the components for the task board', 'Todo', 0),
    ('Add drag and drop functionality', 'Implement drag and drop for moving tasks between lists', 'Todo', 1),
    ('Write tests', 'Add unit and integration tests for API endpoints', 'Todo', 2),
]


class Command(BaseCommand):
    help = 'Popula o banco com o usuário demo e o projeto "Demo Board" (idempotente)'

    def add_arguments(self, parser):
        parser.add_argument('--username', default='demo', help='Usuário dono dos dados demo')

    def handle(self, *args, **options):
        username = options['username']
        self.stdout.write('🌱 Populando banco com dados demo...')

        with transaction.atomic():
            user, criado = User.objects.get_or_create(username=username)
            if criado:
                user.set_unusable_password()
                user.save()
            self.stdout.write(f'  👤 Usuário: {user.username}')

            project, _ = Project.objects.get_or_create(name='Demo Board', owner=user)
            self.stdout.write(f'  📁 Projeto: {project.name}')

            listas = {}
            for idx, nome in enumerate(LISTAS_DEMO):
                listas[nome], _ = TaskList.objects.get_or_create(
                    name=nome,
                    project=project,
                    defaults={'order': idx}
                )
            self.stdout.write(f'  📋 Listas: {", ".join(LISTAS_DEMO)}')

            novas = 0
            for titulo, descricao, lista, ordem in TASKS_DEMO:
                _, criada = Task.objects.get_or_create(
                    title=titulo,
                    task_list__project=project,
                    defaults={
                        'description': descricao,
                        'task_list': listas[lista],
                        'order': ordem,
                        'created_by': user,
                    }
                )
                novas += int(criada)

        self.stdout.write(
            self.style.SUCCESS(f'✅ Seed concluído! {novas} tarefa(s) criada(s)')
        )
