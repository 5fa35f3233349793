"""
Load Configuration Objects Command

Imports configuration objects from a directory of JSON files into the
configuration store. Each file name (without the .json extension) is the
configuration name, e.g. ``system.site.json`` -> ``system.site``. Files whose
name is not a dotted configuration name are skipped, as is the export
allow-list record (``config_export.settings``), which is only changed through
the export settings form and API.

Usage:
    python manage.py load_config_objects config/sync              # Create missing objects
    python manage.py load_config_objects config/sync --force      # Also overwrite existing ones
    python manage.py load_config_objects config/sync --names system.site system.mail
"""
import json
from pathlib import Path

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from config_export.models import ConfigObject, SETTINGS_CONFIG_NAME
from config_export.services import ConfigStorage


class Command(BaseCommand):
    help = 'Load configuration objects from a directory of JSON files'

    def add_arguments(self, parser):
        parser.add_argument(
            'directory',
            help='Directory containing <config.name>.json files'
        )
        parser.add_argument(
            '--force',
            action='store_true',
            help='Overwrite configuration objects that already exist'
        )
        parser.add_argument(
            '--names',
            nargs='+',
            help='Only load these configuration names'
        )

    def handle(self, *args, **options):
        directory = Path(options['directory'])
        if not directory.is_dir():
            raise CommandError(f'Directory not found: {directory}')

        storage = ConfigStorage()
        name_field = ConfigObject._meta.get_field('name')
        wanted = set(options['names'] or [])
        created = updated = skipped = 0

        for path in sorted(directory.glob('*.json')):
            name = path.stem
            if wanted and name not in wanted:
                continue

            try:
                data = json.loads(path.read_text(encoding='utf-8'))
            except json.JSONDecodeError as exc:
                raise CommandError(f'Invalid JSON in {path.name}: {exc}') from exc

            if not isinstance(data, dict):
                raise CommandError(f'{path.name} must contain a JSON object')

            try:
                name_field.run_validators(name)
            except ValidationError as exc:
                self.stdout.write(self.style.ERROR(
                    f'  Skipped (invalid name): {name} ({" ".join(exc.messages)})'
                ))
                skipped += 1
                continue

            if name == SETTINGS_CONFIG_NAME:
                self.stdout.write(self.style.WARNING(
                    f'  Skipped (use the export settings form): {name}'
                ))
                skipped += 1
                continue

            if storage.exists(name):
                if not options['force']:
                    self.stdout.write(f'  Skipped (exists): {name}')
                    skipped += 1
                    continue
                storage.write(name, data)
                self.stdout.write(self.style.WARNING(f'  Updated: {name}'))
                updated += 1
            else:
                storage.write(name, data)
                self.stdout.write(self.style.SUCCESS(f'  Created: {name}'))
                created += 1

        self.stdout.write(self.style.SUCCESS(
            f'\nDone: {created} created, {updated} updated, {skipped} skipped'
        ))
