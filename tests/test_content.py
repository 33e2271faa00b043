import pytest

from apps.content.models import SiteContent
from apps.content.services import active_content_map, get_section, save_section
from apps.core.exceptions import NotFoundException, ValidationException

pytestmark = pytest.mark.django_db

HERO = {'title': 'Timeless Elegance', 'button_text': 'Shop Now', 'button_link': '/shop'}


class TestSaveSection:

    def test_creates_then_replaces(self):
        save_section('hero', HERO)
        item = save_section('hero', {'title': 'Summer Edit'})

        assert SiteContent.objects.count() == 1
        assert item.content == {'title': 'Summer Edit'}
        assert item.is_active is True

    def test_is_active_kept_when_given(self):
        assert save_section('newsletter', {'title': 'Join'}, is_active=False).is_active is False
        assert save_section('newsletter', {'title': 'Join'}).is_active is True

    def test_unknown_section(self):
        with pytest.raises(ValidationException):
            save_section('sidebar', {'title': 'x'})
        assert not SiteContent.objects.exists()


class TestReadContent:

    def test_map_holds_active_sections_only(self):
        save_section('hero', HERO)
        save_section('brand_story', {'title': 'Our Story'}, is_active=False)

        assert active_content_map() == {'hero': HERO}

    def test_missing_section(self):
        with pytest.raises(NotFoundException):
            get_section('hero')


class TestContentEndpoints:

    def test_public_map_and_section(self, api_client):
        save_section('hero', HERO)

        assert api_client.get('/api/content/').data == {'hero': HERO}

        response = api_client.get('/api/content/hero/')
        assert response.status_code == 200
        assert response.data['section'] == 'hero'
        assert response.data['content'] == HERO

    def test_missing_section_is_404(self, api_client):
        response = api_client.get('/api/content/hero/')
        assert response.status_code == 404
        assert response.data['code'] == 'NOT_FOUND'

    def test_admin_upsert(self, admin_client):
        response = admin_client.put('/api/content/hero/', {'content': HERO}, format='json')
        assert response.status_code == 200
        assert response.data['is_active'] is True

        response = admin_client.put(
            '/api/content/hero/', {'content': {'title': 'Sale'}, 'is_active': False}, format='json'
        )
        assert response.data['content'] == {'title': 'Sale'}
        assert response.data['is_active'] is False
        assert SiteContent.objects.count() == 1

    def test_unknown_section_rejected(self, admin_client):
        response = admin_client.put('/api/content/sidebar/', {'content': HERO}, format='json')
        assert response.status_code == 400
        assert response.data['details'] == {'field': 'section'}

    def test_upsert_requires_admin(self, api_client):
        response = api_client.put('/api/content/hero/', {'content': HERO}, format='json')
        assert response.status_code == 403
        assert not SiteContent.objects.exists()

    def test_admin_list_includes_inactive(self, admin_client):
        save_section('newsletter', {'title': 'Join'})
        save_section('brand_story', {'title': 'Our Story'}, is_active=False)

        response = admin_client.get('/api/admin/content/')
        assert [item['section'] for item in response.data] == ['brand_story', 'newsletter']
