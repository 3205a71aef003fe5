# petconnect/api/uploads/test_uploads.py

from unittest import mock

import pytest


@pytest.fixture
def bucket(app):
    """Binds a mock bucket to the storage service."""
    mock_bucket = mock.Mock()
    blob = mock_bucket.blob.return_value
    blob.generate_signed_url.return_value = 'https://storage.example.com/signed'
    blob.public_url = 'https://storage.example.com/public.jpg'
    app.services['storage'].bucket = mock_bucket
    return mock_bucket


def test_upload_url_without_bucket_is_503(client, signup):
    _, headers = signup('uploader')

    response = client.post('/api/uploads/url', json={
        'upload_type': 'post_media', 'filename': 'a.jpg', 'content_type': 'image/jpeg'
    }, headers=headers)

    assert response.status_code == 503


def test_upload_url_puts_file_under_type_folder(client, signup, bucket):
    user, headers = signup('uploader')

    response = client.post('/api/uploads/url', json={
        'upload_type': 'pet_image', 'filename': 'Rex.PNG', 'content_type': 'image/png'
    }, headers=headers)

    assert response.status_code == 200
    body = response.get_json()
    assert body['upload_url'] == 'https://storage.example.com/signed'
    assert body['file_path'].startswith(f"pets/{user['user_id']}/")
    assert body['file_path'].endswith('.png')
    kwargs = bucket.blob.return_value.generate_signed_url.call_args.kwargs
    assert (kwargs['method'], kwargs['content_type']) == ('PUT', 'image/png')


def test_upload_url_rejects_unknown_type(client, signup, bucket):
    _, headers = signup('uploader')

    response = client.post('/api/uploads/url', json={
        'upload_type': 'banner', 'filename': 'a.jpg', 'content_type': 'image/jpeg'
    }, headers=headers)

    assert response.status_code == 400


def test_finalize(client, signup, bucket):
    _, headers = signup('uploader')
    blob = bucket.blob.return_value

    blob.exists.return_value = True
    published = client.post('/api/uploads/finalize', json={'file_path': 'posts/u/x.jpg'}, headers=headers)
    blob.exists.return_value = False
    missing = client.post('/api/uploads/finalize', json={'file_path': 'posts/u/y.jpg'}, headers=headers)

    assert published.get_json() == {'public_url': 'https://storage.example.com/public.jpg'}
    blob.make_public.assert_called_once()
    assert missing.status_code == 404
