"""
API tests for image uploads.

Tests cover:
- Storing an allowed image and returning its URL
- Type, size and missing-file validation
- Authentication
"""

import os

import pytest
from unittest.mock import patch
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from rest_framework import status

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 32


@pytest.fixture
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path


def image(name='receipt.png', content=PNG_BYTES, content_type='image/png'):
    return SimpleUploadedFile(name, content, content_type=content_type)


@pytest.mark.django_db
class TestUpload:
    """Tests for POST /api/upload/"""

    def test_upload_image(self, member_client, media_root):
        response = member_client.post(reverse('uploads:upload'), {'file': image()}, format='multipart')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['public_id'].startswith('billkhata/')
        assert response.data['public_id'].endswith('.png')
        assert response.data['url'].startswith('http://testserver/media/billkhata/')
        assert os.path.exists(media_root / response.data['public_id'])

    def test_rejects_non_image(self, member_client, media_root):
        response = member_client.post(
            reverse('uploads:upload'),
            {'file': image('notes.txt', b'hello', 'text/plain')},
            format='multipart',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid file type. Only images are allowed.'
        assert not any(media_root.iterdir())

    def test_rejects_large_file(self, member_client, media_root):
        with patch('apps.uploads.services.MAX_UPLOAD_SIZE', 10):
            response = member_client.post(reverse('uploads:upload'), {'file': image()}, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'too large' in response.data['error']

    def test_missing_file(self, member_client, media_root):
        response = member_client.post(reverse('uploads:upload'), {}, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'No file provided'

    def test_requires_authentication(self, api_client, media_root):
        response = api_client.post(reverse('uploads:upload'), {'file': image()}, format='multipart')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
