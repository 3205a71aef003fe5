# petconnect/api/posts/test_posts.py
"""
Usage: python -m pytest petconnect/api/posts -v
"""

import pytest


@pytest.fixture
def author(signup):
    return signup('post_author')


@pytest.fixture
def fan(signup):
    return signup('post_fan')


def _create_post(client, headers, **fields):
    body = {'caption': 'Morning walk', 'media': 'https://cdn.example.com/walk.jpg'}
    body.update(fields)
    response = client.post('/api/posts/', json=body, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def _notifications(client, headers):
    return client.get('/api/notifications/', headers=headers).get_json()


def test_create_post_copies_author_and_pet_tags(client, author):
    user, headers = author
    pet = client.post('/api/pets/', json={'name': 'Rex', 'species': 'Dog', 'breed': 'Beagle'},
                      headers=headers).get_json()

    post = _create_post(client, headers, pet_id=pet['pet_id'], tags=['Park', 'park'])

    assert post['username'] == 'post_author'
    assert post['pet_name'] == 'Rex'
    assert post['tags'] == ['park', 'dog', 'beagle']
    assert post['likes'] == [] and post['comments_count'] == 0
    pet_detail = client.get(f"/api/pets/{pet['pet_id']}", headers=headers).get_json()
    assert [p['post_id'] for p in pet_detail['posts']] == [post['post_id']]


def test_create_post_with_someone_elses_pet_is_forbidden(client, author, fan):
    _, author_headers = author
    _, fan_headers = fan
    pet = client.post('/api/pets/', json={'name': 'Rex', 'species': 'dog'}, headers=author_headers).get_json()

    response = client.post('/api/posts/', json={'caption': 'hi', 'pet_id': pet['pet_id']}, headers=fan_headers)

    assert response.status_code == 403


def test_feed_is_newest_first(client, author):
    _, headers = author
    first = _create_post(client, headers, caption='first')
    second = _create_post(client, headers, caption='second')

    feed = client.get('/api/posts/', headers=headers).get_json()

    assert [p['post_id'] for p in feed] == [second['post_id'], first['post_id']]


def test_like_toggle_adds_once_and_notifies_once(client, author, fan):
    author_user, author_headers = author
    fan_user, fan_headers = fan
    post = _create_post(client, author_headers)

    liked = client.post(f"/api/posts/{post['post_id']}/like", headers=fan_headers).get_json()

    assert liked['likes'] == [fan_user['user_id']]
    assert liked['is_liked'] is True
    notifications = _notifications(client, author_headers)
    assert len(notifications) == 1
    assert notifications[0]['type'] == 'like'
    assert notifications[0]['sender_username'] == 'post_fan'
    assert notifications[0]['post_image'] == post['media']

    unliked = client.post(f"/api/posts/{post['post_id']}/like", headers=fan_headers).get_json()

    assert unliked['likes'] == []
    assert unliked['is_liked'] is False
    assert _notifications(client, author_headers) == []


def test_liking_own_post_creates_no_notification(client, author):
    _, headers = author
    post = _create_post(client, headers)

    client.post(f"/api/posts/{post['post_id']}/like", headers=headers)

    assert _notifications(client, headers) == []


def test_like_missing_post_is_404(client, author):
    _, headers = author
    assert client.post('/api/posts/no-such-post/like', headers=headers).status_code == 404


def test_comment_add_and_delete_keeps_count_and_notification_in_step(client, author, fan):
    _, author_headers = author
    fan_user, fan_headers = fan
    post = _create_post(client, author_headers)

    response = client.post(f"/api/posts/{post['post_id']}/comments", json={'content': ' Cute! '}, headers=fan_headers)

    assert response.status_code == 201
    detail = response.get_json()
    assert detail['comments_count'] == 1
    comment = detail['comments'][0]
    assert comment['content'] == 'Cute!'
    assert comment['user'] == {'user_id': fan_user['user_id'], 'username': 'post_fan', 'profile_pic': None}
    notifications = _notifications(client, author_headers)
    assert [(n['type'], n['comment_id'], n['content']) for n in notifications] == \
        [('comment', comment['comment_id'], 'Cute!')]

    response = client.delete(f"/api/posts/{post['post_id']}/comments/{comment['comment_id']}", headers=fan_headers)

    assert response.status_code == 200
    assert response.get_json()['comments_count'] == 0
    assert response.get_json()['comments'] == []
    assert _notifications(client, author_headers) == []


def test_post_author_may_delete_any_comment_but_others_may_not(client, author, fan, signup):
    _, author_headers = author
    _, fan_headers = fan
    _, stranger_headers = signup('stranger')
    post = _create_post(client, author_headers)
    detail = client.post(f"/api/posts/{post['post_id']}/comments", json={'content': 'hello'},
                         headers=fan_headers).get_json()
    comment_id = detail['comments'][0]['comment_id']
    url = f"/api/posts/{post['post_id']}/comments/{comment_id}"

    assert client.delete(url, headers=stranger_headers).status_code == 403
    assert client.delete(url, headers=author_headers).status_code == 200


def test_delete_post_removes_comments_but_not_notifications(client, author, fan):
    _, author_headers = author
    _, fan_headers = fan
    post = _create_post(client, author_headers)
    client.post(f"/api/posts/{post['post_id']}/like", headers=fan_headers)
    client.post(f"/api/posts/{post['post_id']}/comments", json={'content': 'nice'}, headers=fan_headers)

    assert client.delete(f"/api/posts/{post['post_id']}", headers=fan_headers).status_code == 403
    assert client.delete(f"/api/posts/{post['post_id']}", headers=author_headers).status_code == 200

    assert client.get(f"/api/posts/{post['post_id']}", headers=author_headers).status_code == 404
    assert client.get(f"/api/comments/?post_id={post['post_id']}", headers=author_headers).get_json() == []
    # like and comment notifications outlive the post
    notifications = _notifications(client, author_headers)
    assert sorted(n['type'] for n in notifications) == ['comment', 'like']
    assert all(n['post_image'] is None for n in notifications)


def test_update_post_is_author_only(client, author, fan):
    _, author_headers = author
    _, fan_headers = fan
    post = _create_post(client, author_headers)
    url = f"/api/posts/{post['post_id']}"

    assert client.put(url, json={'caption': 'hijacked'}, headers=fan_headers).status_code == 403
    response = client.put(url, json={'caption': 'Evening walk', 'tags': ['Sunset']}, headers=author_headers)

    assert response.status_code == 200
    assert response.get_json()['caption'] == 'Evening walk'
    assert response.get_json()['tags'] == ['sunset']


def test_update_post_tags_keep_pet_species_and_breed(client, author):
    _, headers = author
    pet = client.post('/api/pets/', json={'name': 'Rex', 'species': 'Dog', 'breed': 'Beagle'},
                      headers=headers).get_json()
    post = _create_post(client, headers, pet_id=pet['pet_id'], tags=['cute'])

    response = client.put(f"/api/posts/{post['post_id']}", json={'tags': ['Sunny']}, headers=headers)

    assert response.status_code == 200
    assert response.get_json()['tags'] == ['sunny', 'dog', 'beagle']


def test_blank_comment_is_rejected(client, author, fan):
    _, author_headers = author
    _, fan_headers = fan
    post = _create_post(client, author_headers)

    response = client.post(f"/api/posts/{post['post_id']}/comments", json={'content': '   '}, headers=fan_headers)

    assert response.status_code == 400
    detail = client.get(f"/api/posts/{post['post_id']}", headers=author_headers).get_json()
    assert detail['comments_count'] == 0
    assert _notifications(client, author_headers) == []
