# Generated manually to add ConfigObject model
import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ConfigObject',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Unique configuration name (e.g. system.site)', max_length=250, unique=True, validators=[django.core.validators.RegexValidator(message='Configuration names are dotted identifiers, e.g. "system.site".', regex='^[A-Za-z0-9_]+(\\.[A-Za-z0-9_\\-]+)+$')])),
                ('data', models.JSONField(blank=True, default=dict, help_text='Raw configuration content')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Configuration Object',
                'verbose_name_plural': 'Configuration Objects',
                'db_table': 'config_objects',
                'ordering': ['name'],
            },
        ),
    ]
