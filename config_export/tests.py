"""
Tests for the Configuration Export allow-list and gate
"""
import json
from io import StringIO

import pytest
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from rest_framework import status

from config_export.cache_tags import (
    CACHE_TAGS_HEADER,
    CACHE_STATUS_HEADER,
    cache_key_for,
    invalidate_tags,
    tag_version,
)
from config_export.exceptions import NotExposed, NothingExposed
from config_export.models import ConfigObject, SETTINGS_CONFIG_NAME
from config_export.services import AllowListManager, ConfigStorage, ConfigurationExportGate

SETTINGS_TAG = f'config:{SETTINGS_CONFIG_NAME}'


@pytest.fixture
def site_config(db):
    return ConfigObject.objects.create(
        name='system.site',
        data={'name': 'Example', 'page': {'front': '/node', '403': '', '404': ''}},
    )


@pytest.fixture
def mail_config(db):
    return ConfigObject.objects.create(
        name='system.mail',
        data={'interface': {'default': 'php_mail'}},
    )


@pytest.fixture
def manager(db):
    return AllowListManager()


@pytest.fixture
def gate(db):
    return ConfigurationExportGate()


class TestAllowListManager:
    """Test reading and replacing the allow-list."""

    def test_selection_empty_when_never_configured(self, manager):
        assert manager.get_selection() == []

    def test_list_catalog_returns_every_name_sorted(self, manager, site_config, mail_config):
        assert manager.list_catalog() == ['system.mail', 'system.site']

    def test_set_selection_persists_list(self, manager, site_config, mail_config):
        manager.set_selection(['system.site', 'system.mail'])

        assert manager.get_selection() == ['system.site', 'system.mail']
        stored = ConfigObject.objects.get(name=SETTINGS_CONFIG_NAME)
        assert stored.data == {'selected_configs': ['system.site', 'system.mail']}

    def test_set_selection_drops_unchecked_entries(self, manager):
        checkboxes = {
            'system.site': 'system.site',
            'system.mail': 0,
            'system.date': '',
            'system.theme': None,
            'system.performance': 'system.performance',
        }

        selected = manager.set_selection(checkboxes)

        assert selected == ['system.site', 'system.performance']
        assert manager.get_selection() == ['system.site', 'system.performance']

    def test_set_selection_drops_falsy_items_from_sequence(self, manager):
        manager.set_selection(['system.site', '', None, False, 'system.mail'])
        assert manager.get_selection() == ['system.site', 'system.mail']

    def test_set_selection_removes_duplicates(self, manager):
        manager.set_selection(['system.site', 'system.mail', 'system.site'])
        assert manager.get_selection() == ['system.site', 'system.mail']

    def test_set_selection_is_idempotent(self, manager):
        manager.set_selection(['system.site', 'system.mail'])
        first = manager.get_selection()
        manager.set_selection(['system.site', 'system.mail'])

        assert manager.get_selection() == first
        assert ConfigObject.objects.filter(name=SETTINGS_CONFIG_NAME).count() == 1

    def test_set_selection_replaces_whole_list(self, manager):
        manager.set_selection(['system.site', 'system.mail'])
        manager.set_selection(['system.date'])
        assert manager.get_selection() == ['system.date']

    def test_set_selection_invalidates_settings_tag(self, manager):
        before = tag_version(SETTINGS_TAG)
        manager.set_selection(['system.site'])
        assert tag_version(SETTINGS_TAG) != before

    def test_malformed_settings_record_reads_as_empty(self, manager):
        ConfigObject.objects.create(name=SETTINGS_CONFIG_NAME, data=['system.site'])
        assert manager.get_selection() == []

    def test_string_selection_is_not_split_into_characters(self, manager):
        ConfigObject.objects.create(name=SETTINGS_CONFIG_NAME, data={'selected_configs': 'ab'})

        assert manager.get_selection() == []
        assert not manager.is_selected('a')

    def test_non_string_entries_are_ignored(self, manager):
        ConfigObject.objects.create(
            name=SETTINGS_CONFIG_NAME,
            data={'selected_configs': ['system.site', 7, None, {'x': 1}]},
        )
        assert manager.get_selection() == ['system.site']

    def test_set_selection_replaces_malformed_record(self, manager):
        ConfigObject.objects.create(name=SETTINGS_CONFIG_NAME, data=['system.site'])

        manager.set_selection(['system.mail'])

        assert ConfigObject.objects.get(name=SETTINGS_CONFIG_NAME).data == {
            'selected_configs': ['system.mail']
        }

    def test_uses_injected_storage(self):
        class MemoryStorage:
            def __init__(self):
                self.records = {}

            def list_all(self):
                return sorted(self.records)

            def read(self, name):
                return self.records.get(name)

            def write(self, name, data):
                self.records[name] = data

        storage = MemoryStorage()
        manager = AllowListManager(storage=storage)
        manager.set_selection(['system.site'])

        assert storage.records[SETTINGS_CONFIG_NAME] == {'selected_configs': ['system.site']}
        assert manager.get_selection() == ['system.site']


class TestConfigObjectValidation:
    """Test model-level validation of configuration objects."""

    def test_name_must_be_dotted(self, db):
        with pytest.raises(ValidationError) as excinfo:
            ConfigObject(name='foo', data={}).full_clean()
        assert 'name' in excinfo.value.message_dict

    def test_settings_record_must_be_an_object(self, db):
        with pytest.raises(ValidationError) as excinfo:
            ConfigObject(name=SETTINGS_CONFIG_NAME, data=['system.site']).full_clean()
        assert 'data' in excinfo.value.message_dict

    def test_settings_selection_must_be_list_of_names(self, db):
        with pytest.raises(ValidationError):
            ConfigObject(name=SETTINGS_CONFIG_NAME, data={'selected_configs': 'system.site'}).full_clean()

        with pytest.raises(ValidationError):
            ConfigObject(name=SETTINGS_CONFIG_NAME, data={'selected_configs': [1, 2]}).full_clean()

    def test_valid_settings_record(self, db):
        ConfigObject(name=SETTINGS_CONFIG_NAME, data={'selected_configs': ['system.site']}).full_clean()

    def test_other_records_accept_any_json(self, db):
        ConfigObject(name='system.site', data=['anything', 1]).full_clean()


class TestConfigurationExportGate:
    """Test the membership check and export payloads."""

    def test_get_one_returns_raw_content_for_allowed_name(self, gate, manager, site_config):
        manager.set_selection(['system.site'])

        assert gate.get_one('system.site') == {'system.site': site_config.data}

    def test_get_one_returns_current_content(self, gate, manager, site_config):
        manager.set_selection(['system.site'])
        site_config.data = {'name': 'Renamed'}
        site_config.save()

        assert gate.get_one('system.site') == {'system.site': {'name': 'Renamed'}}

    def test_get_one_rejects_name_not_on_list(self, gate, manager, site_config, mail_config):
        manager.set_selection(['system.site'])

        with pytest.raises(NotExposed) as excinfo:
            gate.get_one('system.mail')

        assert excinfo.value.config_name == 'system.mail'
        assert excinfo.value.status_code == 400
        assert 'system.mail' in str(excinfo.value.detail)

    def test_get_one_rejects_everything_when_list_empty(self, gate, site_config):
        with pytest.raises(NotExposed):
            gate.get_one('system.site')

    def test_get_one_listed_but_missing_exports_empty_mapping(self, gate, manager):
        manager.set_selection(['system.removed'])
        assert gate.get_one('system.removed') == {'system.removed': {}}

    def test_get_all_raises_when_nothing_exposed(self, gate):
        with pytest.raises(NothingExposed):
            gate.get_all()

    def test_get_all_returns_stored_list(self, gate, manager):
        manager.set_selection(['system.site', 'system.mail'])
        assert gate.get_all() == ['system.site', 'system.mail']

    def test_cache_tags(self, gate):
        assert gate.cache_tags() == [SETTINGS_TAG]
        assert gate.cache_tags('system.site') == [SETTINGS_TAG, 'config:system.site']
        assert gate.cache_tags(SETTINGS_CONFIG_NAME) == [SETTINGS_TAG]


class TestCacheTags:
    """Test tag versions and response cache keys."""

    def test_tag_version_is_stable_until_invalidated(self):
        assert tag_version('config:system.site') == tag_version('config:system.site')

    def test_invalidation_changes_cache_key(self):
        key = cache_key_for('/api/allowed-configs', [SETTINGS_TAG])
        invalidate_tags([SETTINGS_TAG])
        assert cache_key_for('/api/allowed-configs', [SETTINGS_TAG]) != key

    def test_unrelated_tag_keeps_cache_key(self):
        key = cache_key_for('/api/allowed-configs', [SETTINGS_TAG])
        invalidate_tags(['config:system.site'])
        assert cache_key_for('/api/allowed-configs', [SETTINGS_TAG]) == key

    def test_saving_config_object_invalidates_its_tag(self, site_config):
        before = tag_version('config:system.site')
        site_config.save()
        assert tag_version('config:system.site') != before

    def test_deleting_config_object_invalidates_its_tag(self, site_config):
        before = tag_version('config:system.site')
        site_config.delete()
        assert tag_version('config:system.site') != before


class TestAllowedConfigsEndpoint:
    """GET /api/allowed-configs"""

    url = '/api/allowed-configs'

    def test_requires_authentication(self, api_client, db):
        response = api_client.get(self.url)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_empty_allow_list_is_client_error(self, user_client):
        response = user_client.get(self.url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['detail'] == (
            'No configurations have been allowed for viewing by the site administrator.'
        )
        assert CACHE_TAGS_HEADER not in response

    def test_returns_allowed_names_with_cache_tag(self, user_client, manager):
        manager.set_selection(['system.site', 'system.mail'])

        response = user_client.get(self.url)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == ['system.site', 'system.mail']
        assert response[CACHE_TAGS_HEADER] == SETTINGS_TAG

    def test_second_request_is_served_from_cache(self, user_client, manager):
        manager.set_selection(['system.site'])

        first = user_client.get(self.url)
        second = user_client.get(self.url)

        assert first[CACHE_STATUS_HEADER] == 'MISS'
        assert second[CACHE_STATUS_HEADER] == 'HIT'
        assert second.json() == ['system.site']
        assert second[CACHE_TAGS_HEADER] == SETTINGS_TAG

    def test_saving_allow_list_makes_cached_response_stale(self, user_client, manager):
        manager.set_selection(['system.site'])
        user_client.get(self.url)

        manager.set_selection(['system.site', 'system.mail'])
        response = user_client.get(self.url)

        assert response[CACHE_STATUS_HEADER] == 'MISS'
        assert response.json() == ['system.site', 'system.mail']

    def test_clearing_allow_list_after_cached_response(self, user_client, manager):
        manager.set_selection(['system.site'])
        user_client.get(self.url)

        manager.set_selection([])
        response = user_client.get(self.url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_malformed_settings_record_is_nothing_exposed(self, user_client, db):
        ConfigObject.objects.create(name=SETTINGS_CONFIG_NAME, data=['system.site'])

        response = user_client.get(self.url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['detail'].code == 'nothing_exposed'

    def test_not_cached_without_shared_cache(self, settings, user_client, manager):
        settings.CONFIG_EXPORT_RESPONSE_CACHE = False
        manager.set_selection(['system.site'])

        first = user_client.get(self.url)
        second = user_client.get(self.url)

        assert CACHE_STATUS_HEADER not in first
        assert CACHE_STATUS_HEADER not in second
        assert second[CACHE_TAGS_HEADER] == SETTINGS_TAG
        assert second.json() == ['system.site']


class TestConfigurationExportEndpoint:
    """GET /api/configuration-export/<name>"""

    def url(self, name):
        return f'/api/configuration-export/{name}'

    def test_requires_authentication(self, api_client, site_config):
        response = api_client.get(self.url('system.site'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_exports_allowed_configuration(self, user_client, manager, site_config):
        manager.set_selection(['system.site'])

        response = user_client.get(self.url('system.site'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'system.site': site_config.data}
        assert response[CACHE_TAGS_HEADER] == f'{SETTINGS_TAG} config:system.site'

    def test_rejects_configuration_not_exposed(self, user_client, manager, site_config, mail_config):
        manager.set_selection(['system.site'])

        response = user_client.get(self.url('system.mail'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['detail'] == 'The configuration (system.mail) is not exposed for viewing.'

    def test_removed_from_list_after_cached_export(self, user_client, manager, site_config):
        manager.set_selection(['system.site'])
        assert user_client.get(self.url('system.site')).status_code == status.HTTP_200_OK

        manager.set_selection([])
        response = user_client.get(self.url('system.site'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_edited_configuration_is_exported_fresh(self, user_client, manager, site_config):
        manager.set_selection(['system.site'])
        user_client.get(self.url('system.site'))

        site_config.data = {'name': 'Renamed'}
        site_config.save()
        response = user_client.get(self.url('system.site'))

        assert response[CACHE_STATUS_HEADER] == 'MISS'
        assert response.json() == {'system.site': {'name': 'Renamed'}}

    def test_stale_tag_version_is_not_served_without_shared_cache(self, settings, user_client, manager, site_config):
        settings.CONFIG_EXPORT_RESPONSE_CACHE = False
        manager.set_selection(['system.site'])
        assert user_client.get(self.url('system.site')).status_code == status.HTTP_200_OK

        # Another worker's cache would still hold the payload under this key
        response_key = cache_key_for(self.url('system.site'), [SETTINGS_TAG, 'config:system.site'])
        cache.set(response_key, {'system.site': site_config.data})
        ConfigObject.objects.filter(name=SETTINGS_CONFIG_NAME).update(data={'selected_configs': []})

        response = user_client.get(self.url('system.site'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestConfigExportSettingsAPI:
    """GET/PUT /api/admin/config-export/settings"""

    url = '/api/admin/config-export/settings'

    def test_non_staff_forbidden(self, user_client):
        assert user_client.get(self.url).status_code == status.HTTP_403_FORBIDDEN
        response = user_client.put(self.url, {'selected_configs': []}, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_get_returns_catalog_and_selection(self, staff_client, manager, site_config, mail_config):
        manager.set_selection(['system.site'])

        response = staff_client.get(self.url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['catalog'] == [SETTINGS_CONFIG_NAME, 'system.mail', 'system.site']
        assert response.data['selected_configs'] == ['system.site']

    def test_put_replaces_selection_dropping_blanks(self, staff_client, manager, site_config, mail_config):
        response = staff_client.put(
            self.url,
            {'selected_configs': ['system.mail', '', 'system.site']},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['selected_configs'] == ['system.mail', 'system.site']
        assert manager.get_selection() == ['system.mail', 'system.site']

    def test_put_rejects_unknown_names(self, staff_client, manager, site_config):
        response = staff_client.put(
            self.url,
            {'selected_configs': ['system.site', 'does.not_exist']},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'selected_configs' in response.data
        assert manager.get_selection() == []

    @pytest.mark.parametrize('unchecked', [0, False, None, ''])
    def test_put_drops_unchecked_values(self, staff_client, manager, site_config, unchecked):
        response = staff_client.put(
            self.url,
            {'selected_configs': ['system.site', unchecked]},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert manager.get_selection() == ['system.site']

    def test_put_accepts_checkbox_mapping(self, staff_client, manager, site_config, mail_config):
        response = staff_client.put(
            self.url,
            {'selected_configs': {'system.site': 'system.site', 'system.mail': 0}},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['selected_configs'] == ['system.site']
        assert manager.get_selection() == ['system.site']

    @pytest.mark.parametrize('selected_configs', ['system.site', [1], [True], [['system.site']]])
    def test_put_rejects_non_name_values(self, staff_client, manager, site_config, selected_configs):
        response = staff_client.put(self.url, {'selected_configs': selected_configs}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'selected_configs' in response.data
        assert manager.get_selection() == []


class TestConfigExportSettingsForm:
    """Admin HTML settings form."""

    url = '/admin/config-export/settings/'

    def test_anonymous_redirected_to_login(self, client, db):
        response = client.get(self.url)
        assert response.status_code == 302
        assert '/admin/login/' in response['Location']

    def test_form_lists_catalog_with_current_selection_checked(self, admin_client, manager, site_config, mail_config):
        manager.set_selection(['system.site'])

        response = admin_client.get(self.url)

        assert response.status_code == 200
        form = response.context['form']
        assert [value for value, _ in form.fields['configurations'].choices] == [
            SETTINGS_CONFIG_NAME, 'system.mail', 'system.site'
        ]
        assert form.fields['configurations'].initial == ['system.site']
        assert b'system.mail' in response.content

    def test_submit_saves_checked_configurations(self, admin_client, manager, site_config, mail_config):
        response = admin_client.post(self.url, {'configurations': ['system.mail']})

        assert response.status_code == 302
        assert manager.get_selection() == ['system.mail']

    def test_submit_with_nothing_checked_clears_selection(self, admin_client, manager, site_config):
        manager.set_selection(['system.site'])

        admin_client.post(self.url, {})

        assert manager.get_selection() == []


class TestConfigObjectAdmin:
    """Django admin changelist for configuration objects."""

    url = '/admin/config_export/configobject/'

    def test_changelist_flags_exposed_objects(self, admin_client, manager, site_config, mail_config):
        manager.set_selection(['system.site'])

        response = admin_client.get(self.url)

        assert response.status_code == 200
        exposed = {obj.name: obj.exposed for obj in response.context['cl'].result_list}
        assert exposed == {SETTINGS_CONFIG_NAME: False, 'system.mail': False, 'system.site': True}

    def test_changelist_follows_current_selection(self, admin_client, manager, site_config):
        manager.set_selection(['system.site'])
        admin_client.get(self.url)

        manager.set_selection([])
        response = admin_client.get(self.url)

        assert not any(obj.exposed for obj in response.context['cl'].result_list)

    def test_changelist_without_settings_record(self, admin_client, site_config):
        response = admin_client.get(self.url)

        assert response.status_code == 200
        assert [obj.exposed for obj in response.context['cl'].result_list] == [False]

    def test_settings_record_rejects_malformed_data(self, admin_client, manager):
        manager.set_selection([])
        settings_record = ConfigObject.objects.get(name=SETTINGS_CONFIG_NAME)

        response = admin_client.post(
            f'{self.url}{settings_record.pk}/change/',
            {'name': SETTINGS_CONFIG_NAME, 'data': '["system.site"]'},
        )

        assert response.status_code == 200
        assert 'data' in response.context['adminform'].form.errors
        assert ConfigObject.objects.get(name=SETTINGS_CONFIG_NAME).data == {'selected_configs': []}


class TestLoadConfigObjectsCommand:
    """python manage.py load_config_objects"""

    def test_loads_json_files(self, db, tmp_path):
        (tmp_path / 'system.site.json').write_text(json.dumps({'name': 'Example'}))
        (tmp_path / 'system.mail.json').write_text(json.dumps({'interface': {}}))

        call_command('load_config_objects', str(tmp_path))

        assert ConfigStorage().list_all() == ['system.mail', 'system.site']
        assert ConfigStorage().read('system.site') == {'name': 'Example'}

    def test_existing_objects_kept_without_force(self, site_config, tmp_path):
        (tmp_path / 'system.site.json').write_text(json.dumps({'name': 'From file'}))

        call_command('load_config_objects', str(tmp_path))
        assert ConfigStorage().read('system.site') == site_config.data

        call_command('load_config_objects', str(tmp_path), '--force')
        assert ConfigStorage().read('system.site') == {'name': 'From file'}

    def test_invalid_json_raises(self, db, tmp_path):
        (tmp_path / 'system.site.json').write_text('{not json')

        with pytest.raises(CommandError):
            call_command('load_config_objects', str(tmp_path))

    def test_missing_directory_raises(self, db, tmp_path):
        with pytest.raises(CommandError):
            call_command('load_config_objects', str(tmp_path / 'missing'))

    def test_invalid_name_is_skipped(self, db, tmp_path):
        (tmp_path / 'foo.json').write_text(json.dumps({'name': 'Example'}))
        (tmp_path / 'system.site.json').write_text(json.dumps({'name': 'Example'}))
        out = StringIO()

        call_command('load_config_objects', str(tmp_path), stdout=out)

        assert ConfigStorage().list_all() == ['system.site']
        assert 'Skipped (invalid name): foo' in out.getvalue()
        assert '1 created, 0 updated, 1 skipped' in out.getvalue()

    def test_settings_record_is_never_overwritten(self, manager, tmp_path):
        manager.set_selection(['system.site'])
        (tmp_path / f'{SETTINGS_CONFIG_NAME}.json').write_text(
            json.dumps({'selected_configs': ['a', 'b']})
        )
        out = StringIO()

        call_command('load_config_objects', str(tmp_path), '--force', stdout=out)

        assert manager.get_selection() == ['system.site']
        assert f'Skipped (use the export settings form): {SETTINGS_CONFIG_NAME}' in out.getvalue()
