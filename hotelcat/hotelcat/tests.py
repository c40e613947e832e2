from django.db import IntegrityError
from django.test import SimpleTestCase, TestCase
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.test import APIClient

from hotels.models import Hotel
from users.authentication import issue_access_token
from users.models import User

from .exceptions import AppError, Conflict, api_exception_handler


class HealthTest(SimpleTestCase):

    def test_health(self):
        resp = self.client.get('/health')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {'status': 'ok'})


class ExceptionHandlerTest(SimpleTestCase):

    def test_validation_error_is_422(self):
        resp = api_exception_handler(ValidationError({'name': ['Too short.']}), {})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.data['message'], 'Validation failed')
        self.assertEqual(resp.data['issues'], {'name': ['Too short.']})

    def test_app_error_keeps_status_and_details(self):
        resp = api_exception_handler(AppError('Nope', status_code=404, details={'id': 3}), {})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data, {'message': 'Nope', 'details': {'id': 3}})

    def test_conflict_default_message(self):
        resp = api_exception_handler(Conflict(), {})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data['message'], 'Conflicts with existing data.')

    def test_drf_errors_reshaped(self):
        resp = api_exception_handler(NotFound('Missing'), {})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data, {'message': 'Missing'})

    def test_integrity_error_is_conflict(self):
        with self.assertLogs('hotelcat.exceptions', level='WARNING'):
            resp = api_exception_handler(IntegrityError('duplicate key'), {})
        self.assertEqual(resp.status_code, 409)

    def test_unexpected_error_is_hidden(self):
        with self.assertLogs('hotelcat.exceptions', level='ERROR'):
            resp = api_exception_handler(RuntimeError('boom'), {})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.data, {'message': 'Unexpected server error'})


class NoStoreMiddlewareTest(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.hotel = Hotel.objects.create(name='Magna Riviera', slug='magna-riviera')
        cls.manager = User.objects.create_user(
            email='manager@example.com', password='secret-pass',
            role=User.Role.MANAGER, hotel=cls.hotel,
        )

    def setUp(self):
        self.client = APIClient()

    def test_auth_paths_are_not_stored(self):
        resp = self.client.post('/api/auth/login', {'email': 'x@example.com'}, format='json')
        self.assertEqual(resp['Cache-Control'], 'no-store')

    def test_authenticated_requests_are_not_stored(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_access_token(self.manager)}')
        resp = self.client.get('/api/admin/categories')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp['Cache-Control'], 'no-store')

    def test_anonymous_public_reads_are_cacheable(self):
        resp = self.client.get('/api/public/categories', {'hotelId': 'magna-riviera'})
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.has_header('Cache-Control'))
