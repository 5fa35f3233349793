# Generated manually to add ContactMessage model
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ContactMessage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('contact_form', models.CharField(choices=[('personal', 'Personal contact form')], default='personal', help_text='Contact form the message was submitted through', max_length=32)),
                ('subject', models.CharField(help_text='Subject line of the message', max_length=100)),
                ('message', models.TextField(help_text='The message body')),
                ('copy', models.BooleanField(default=False, help_text='Whether the sender asked for a copy of the message')),
                ('name', models.CharField(help_text="Sender's account name at the time of sending", max_length=150)),
                ('mail', models.EmailField(blank=True, default='', help_text="Sender's email address at the time of sending", max_length=254)),
                ('ip_address', models.GenericIPAddressField(blank=True, help_text='IP address of the submitter', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='When the message was submitted')),
                ('recipient', models.ForeignKey(help_text='User the message is addressed to', on_delete=django.db.models.deletion.CASCADE, related_name='received_contact_messages', to=settings.AUTH_USER_MODEL)),
                ('sender', models.ForeignKey(blank=True, help_text='Authenticated user who sent the message', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sent_contact_messages', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Contact Message',
                'verbose_name_plural': 'Contact Messages',
                'db_table': 'contact_messages',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['recipient', 'created_at'], name='contact_msg_recipient_idx')],
            },
        ),
    ]
