# petconnect/api/notifications/test_notifications.py

import pytest


@pytest.fixture
def liked_posts(client, signup):
    """Two posts by 'author', both liked by 'fan'."""
    author, author_headers = signup('author')
    _, fan_headers = signup('fan')
    posts = []
    for caption in ('one', 'two'):
        post = client.post('/api/posts/', json={'caption': caption}, headers=author_headers).get_json()
        client.post(f"/api/posts/{post['post_id']}/like", headers=fan_headers)
        posts.append(post)
    return author_headers, fan_headers, posts


def test_list_is_newest_first_and_formatted(client, liked_posts):
    author_headers, _, posts = liked_posts

    notifications = client.get('/api/notifications/', headers=author_headers).get_json()

    assert [n['post_id'] for n in notifications] == [posts[1]['post_id'], posts[0]['post_id']]
    assert notifications[0]['sender_username'] == 'fan'
    assert notifications[0]['sender_profile_pic'] == '/default-profile.png'
    assert notifications[0]['read'] is False


def test_pagination(client, liked_posts):
    author_headers, _, posts = liked_posts

    page_two = client.get('/api/notifications/?page=2&limit=1', headers=author_headers).get_json()

    assert [n['post_id'] for n in page_two] == [posts[0]['post_id']]


def test_mark_read_and_unread_count(client, liked_posts):
    author_headers, fan_headers, _ = liked_posts
    notifications = client.get('/api/notifications/', headers=author_headers).get_json()
    url = f"/api/notifications/{notifications[0]['notification_id']}/read"

    assert client.get('/api/notifications/unread-count', headers=author_headers).get_json()['unread_count'] == 2
    assert client.put(url, headers=fan_headers).status_code == 403
    assert client.put(url, headers=author_headers).get_json()['read'] is True
    assert client.get('/api/notifications/unread-count', headers=author_headers).get_json()['unread_count'] == 1

    response = client.put('/api/notifications/read-all', headers=author_headers)

    assert response.get_json()['updated_count'] == 1
    assert client.get('/api/notifications/unread-count', headers=author_headers).get_json()['unread_count'] == 0


def test_delete_is_recipient_only(client, liked_posts):
    author_headers, fan_headers, _ = liked_posts
    notification_id = client.get('/api/notifications/', headers=author_headers).get_json()[0]['notification_id']
    url = f'/api/notifications/{notification_id}'

    assert client.delete(url, headers=fan_headers).status_code == 403
    assert client.delete(url, headers=author_headers).status_code == 200
    assert client.delete(url, headers=author_headers).status_code == 404
    assert len(client.get('/api/notifications/', headers=author_headers).get_json()) == 1
