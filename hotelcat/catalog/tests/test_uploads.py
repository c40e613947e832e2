"""Tests for image uploads and the storage path helpers."""
import io
import shutil
import tempfile
from pathlib import Path

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase, override_settings
from PIL import Image
from rest_framework.test import APIClient

from catalog.storage import build_relative_path, generate_filename, sanitize_segment
from hotels.models import Hotel
from users.authentication import issue_access_token
from users.models import User

UPLOAD_URL = '/api/admin/uploads/images'


def make_image(name='photo.png', size=(64, 48), fmt='PNG', content_type='image/png'):
    buffer = io.BytesIO()
    Image.new('RGB', size, color=(200, 30, 30)).save(buffer, format=fmt)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)


class ImageUploadTest(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.hotel = Hotel.objects.create(name='Magna Riviera', slug='magna-riviera')
        cls.manager = User.objects.create_user(
            email='manager@example.com', password='secret-pass',
            role=User.Role.MANAGER, hotel=cls.hotel,
        )

    def setUp(self):
        self.media_root = tempfile.mkdtemp(prefix='hotelcat-test-media-')
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)
        media_override = override_settings(MEDIA_ROOT=self.media_root)
        media_override.enable()
        self.addCleanup(media_override.disable)

        self.client = APIClient()
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_access_token(self.manager)}')

    def stored_file(self, resp):
        return Path(self.media_root) / resp.data['relativePath']

    def test_product_image_is_stored_as_webp(self):
        resp = self.client.post(UPLOAD_URL, {
            'type': 'product', 'productSlug': 'Ravioles Caseros', 'file': make_image(),
        })
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['format'], 'webp')
        self.assertTrue(resp.data['relativePath'].startswith('magna-riviera/products/ravioles-caseros/photo-'))
        self.assertTrue(resp.data['relativePath'].endswith('.webp'))
        self.assertEqual(resp.data['url'], f'/uploads/{resp.data["relativePath"]}')

        path = self.stored_file(resp)
        self.assertTrue(path.exists())
        self.assertEqual(path.stat().st_size, resp.data['size'])
        with Image.open(path) as stored:
            self.assertEqual(stored.format, 'WEBP')

    def test_qr_and_category_paths(self):
        resp = self.client.post(UPLOAD_URL, {'type': 'qr', 'file': make_image('qr.png')})
        self.assertEqual(resp.status_code, 201)
        self.assertTrue(resp.data['relativePath'].startswith('magna-riviera/qr/qr-'))

        banner = make_image('banner.jpg', fmt='JPEG', content_type='image/jpeg')
        resp = self.client.post(UPLOAD_URL, {
            'type': 'category', 'categoryKey': 'viandas', 'file': banner,
        })
        self.assertEqual(resp.status_code, 201)
        self.assertTrue(resp.data['relativePath'].startswith('magna-riviera/categories/viandas/banner-'))

    def test_large_image_is_downscaled(self):
        resp = self.client.post(UPLOAD_URL, {'type': 'qr', 'file': make_image(size=(3000, 1500))})
        self.assertEqual(resp.status_code, 201)
        with Image.open(self.stored_file(resp)) as stored:
            self.assertEqual(stored.size, (2048, 1024))

    def test_missing_file(self):
        resp = self.client.post(UPLOAD_URL, {'type': 'qr'})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['message'], 'Image file is required')

    def test_category_key_required_for_category_images(self):
        resp = self.client.post(UPLOAD_URL, {'type': 'category', 'file': make_image()})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('categoryKey', resp.data['details'])

    def test_unknown_type(self):
        resp = self.client.post(UPLOAD_URL, {'type': 'avatar', 'file': make_image()})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['message'], 'Invalid request')

    def test_non_image_content_type(self):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
        resp = self.client.post(UPLOAD_URL, {'type': 'qr', 'file': upload})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['message'], 'Only image files are allowed')

    def test_corrupt_image(self):
        upload = SimpleUploadedFile('broken.png', b'\x89PNG not really', content_type='image/png')
        resp = self.client.post(UPLOAD_URL, {'type': 'qr', 'file': upload})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['message'], 'Invalid or corrupted image file.')

    def test_too_large(self):
        upload = SimpleUploadedFile('huge.png', b'0' * (5 * 1024 * 1024 + 1), content_type='image/png')
        resp = self.client.post(UPLOAD_URL, {'type': 'qr', 'file': upload})
        self.assertEqual(resp.status_code, 413)

    def test_requires_authentication(self):
        resp = APIClient().post(UPLOAD_URL, {'type': 'qr', 'file': make_image()})
        self.assertEqual(resp.status_code, 401)


class StoragePathTest(SimpleTestCase):

    def test_sanitize_segment(self):
        self.assertEqual(sanitize_segment('Ñoquis de Papá', 'x'), 'noquis-de-papa')
        self.assertEqual(sanitize_segment('--Hello__World!!--', 'x'), 'hello__world')
        self.assertEqual(sanitize_segment('../../etc', 'x'), 'etc')
        self.assertEqual(sanitize_segment('!!!', 'fallback'), 'fallback')
        self.assertEqual(sanitize_segment(None, 'fallback'), 'fallback')

    def test_generate_filename(self):
        name = generate_filename('Mi Foto.JPG')
        self.assertRegex(name, r'^mi-foto-[0-9a-f]{12}\.webp$')
        self.assertRegex(generate_filename(''), r'^image-[0-9a-f]{12}\.webp$')

    def test_build_relative_path_falls_back_to_general(self):
        path = build_relative_path('magna-riviera', 'product', 'a.webp')
        self.assertEqual(path, 'magna-riviera/products/general/a.webp')
