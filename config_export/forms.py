"""
Configuration Export Forms
"""
from django import forms


class ConfigExportSettingsForm(forms.Form):
    """
    Admin settings form: one checkbox per known configuration name.

    The boxes default to the current allow-list.
    """

    configurations = forms.MultipleChoiceField(
        label='Select configurations to be exposed through the API',
        widget=forms.CheckboxSelectMultiple,
        required=False,
    )

    def __init__(self, *args, catalog=(), selected=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['configurations'].choices = [(name, name) for name in catalog]
        self.fields['configurations'].initial = list(selected)
