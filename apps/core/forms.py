# apps/core/forms.py

from django import forms
from django.core.exceptions import ValidationError

from .exceptions import ValidationFailed
from .utils import erros_formulario

# Faixa do IntegerField no banco
ORDEM_MIN = -2 ** 31
ORDEM_MAX = 2 ** 31 - 1


def campo_ordem(required=False):
    return forms.IntegerField(required=required, min_value=ORDEM_MIN, max_value=ORDEM_MAX)


class PayloadForm(forms.Form):
    """
    Formulário base para payloads JSON da API

    validar() devolve apenas os campos realmente enviados pelo cliente,
    o que permite patches parciais.
    """

    def validar(self):
        if not self.is_valid():
            raise ValidationFailed('Validation error', details=erros_formulario(self))
        return {
            campo: valor
            for campo, valor in self.cleaned_data.items()
            if campo in self.data
        }


class CreateUserForm(PayloadForm):
    username = forms.CharField(min_length=1, max_length=50)


class CreateProjectForm(PayloadForm):
    name = forms.CharField(min_length=1, max_length=100)


class CreateListForm(PayloadForm):
    name = forms.CharField(min_length=1, max_length=100)
    projectId = forms.UUIDField()
    order = campo_ordem()


class CreateTaskForm(PayloadForm):
    title = forms.CharField(min_length=1, max_length=200)
    description = forms.CharField(required=False, strip=False, empty_value=None)
    listId = forms.UUIDField()
    order = campo_ordem()


class UpdateTaskForm(PayloadForm):
    """Patch parcial: todos os campos opcionais, mas nunca vazios se enviados"""

    title = forms.CharField(required=False, max_length=200)
    description = forms.CharField(required=False, strip=False, empty_value=None)
    listId = forms.UUIDField(required=False)
    order = campo_ordem()

    def clean_title(self):
        title = self.cleaned_data.get('title')
        if 'title' in self.data and not title:
            raise ValidationError('This field cannot be blank.')
        return title

    def clean_listId(self):
        list_id = self.cleaned_data.get('listId')
        if 'listId' in self.data and list_id is None:
            raise ValidationError('This field cannot be null.')
        return list_id

    def clean_order(self):
        order = self.cleaned_data.get('order')
        if 'order' in self.data and order is None:
            raise ValidationError('This field cannot be null.')
        return order


class MoveTaskForm(PayloadForm):
    """Move exige lista e ordem juntas"""

    listId = forms.UUIDField()
    order = campo_ordem(required=True)
