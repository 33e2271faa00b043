import pytest
from django.contrib.auth import get_user_model

pytestmark = pytest.mark.django_db


@pytest.fixture
def customer(db):
    return get_user_model().objects.create_user(
        username='noura', email='noura@example.com', password='secret-pass'
    )


class TestAdminUsers:

    def test_list(self, admin_client, admin_user, customer):
        response = admin_client.get('/api/admin/users/')
        assert response.status_code == 200
        roles = {user['username']: user['role'] for user in response.data}
        assert roles == {'backoffice': 'admin', 'noura': 'user'}
        assert 'password' not in response.data[0]

    def test_promote_and_demote(self, admin_client, customer):
        url = f'/api/admin/users/{customer.pk}/role/'

        response = admin_client.patch(url, {'role': 'admin'}, format='json')
        assert response.status_code == 200
        assert response.data['role'] == 'admin'
        customer.refresh_from_db()
        assert customer.is_staff is True

        admin_client.patch(url, {'role': 'user'}, format='json')
        customer.refresh_from_db()
        assert customer.is_staff is False

    def test_invalid_role(self, admin_client, customer):
        response = admin_client.patch(f'/api/admin/users/{customer.pk}/role/', {'role': 'owner'}, format='json')
        assert response.status_code == 400
        customer.refresh_from_db()
        assert customer.is_staff is False

    def test_missing_user(self, admin_client):
        assert admin_client.patch('/api/admin/users/9999/role/', {'role': 'admin'}, format='json').status_code == 404
        assert admin_client.delete('/api/admin/users/9999/').status_code == 404

    def test_cannot_demote_self(self, admin_client, admin_user):
        response = admin_client.patch(f'/api/admin/users/{admin_user.pk}/role/', {'role': 'user'}, format='json')
        assert response.status_code == 422
        assert response.data['code'] == 'SELF_DEMOTION'

    def test_delete(self, admin_client, customer):
        response = admin_client.delete(f'/api/admin/users/{customer.pk}/')
        assert response.status_code == 200
        assert not get_user_model().objects.filter(pk=customer.pk).exists()

    def test_cannot_delete_self(self, admin_client, admin_user):
        response = admin_client.delete(f'/api/admin/users/{admin_user.pk}/')
        assert response.status_code == 422
        assert get_user_model().objects.filter(pk=admin_user.pk).exists()

    def test_requires_admin(self, api_client, customer):
        api_client.force_authenticate(user=customer)
        assert api_client.get('/api/admin/users/').status_code == 403
        assert api_client.delete(f'/api/admin/users/{customer.pk}/').status_code == 403
