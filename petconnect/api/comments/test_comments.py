# petconnect/api/comments/test_comments.py


def test_comment_routes_share_the_post_side_effects(client, signup):
    _, author_headers = signup('author')
    commenter, commenter_headers = signup('commenter')
    post = client.post('/api/posts/', json={'caption': 'hello'}, headers=author_headers).get_json()

    response = client.post('/api/comments/', json={'post_id': post['post_id'], 'content': 'first!'},
                           headers=commenter_headers)

    assert response.status_code == 201
    comment = response.get_json()
    assert comment['user']['username'] == 'commenter'
    detail = client.get(f"/api/posts/{post['post_id']}", headers=author_headers).get_json()
    assert detail['comments_count'] == 1
    assert len(client.get('/api/notifications/', headers=author_headers).get_json()) == 1

    assert client.delete(f"/api/comments/{comment['comment_id']}", headers=commenter_headers).status_code == 200
    detail = client.get(f"/api/posts/{post['post_id']}", headers=author_headers).get_json()
    assert detail['comments_count'] == 0
    assert client.get('/api/notifications/', headers=author_headers).get_json() == []


def test_comment_on_missing_post_is_404(client, signup):
    _, headers = signup('commenter')

    response = client.post('/api/comments/', json={'post_id': 'no-such-post', 'content': 'hi'}, headers=headers)

    assert response.status_code == 404


def test_list_by_post_newest_first(client, signup):
    _, headers = signup('author')
    post = client.post('/api/posts/', json={'caption': 'hello'}, headers=headers).get_json()
    for text in ('one', 'two', 'three'):
        client.post(f"/api/posts/{post['post_id']}/comments", json={'content': text}, headers=headers)

    comments = client.get(f"/api/comments/?post_id={post['post_id']}", headers=headers).get_json()

    assert [c['content'] for c in comments] == ['three', 'two', 'one']


def test_update_is_author_only(client, signup):
    _, author_headers = signup('author')
    _, other_headers = signup('other')
    post = client.post('/api/posts/', json={'caption': 'hello'}, headers=author_headers).get_json()
    comment = client.post('/api/comments/', json={'post_id': post['post_id'], 'content': 'typo'},
                          headers=author_headers).get_json()
    url = f"/api/comments/{comment['comment_id']}"

    assert client.put(url, json={'content': 'edit'}, headers=other_headers).status_code == 403
    updated = client.put(url, json={'content': 'fixed'}, headers=author_headers).get_json()
    assert updated['content'] == 'fixed'
    assert updated['updated_at'] >= comment['updated_at']


def test_blank_content_is_rejected_on_create_and_update(client, signup):
    _, headers = signup('author')
    post = client.post('/api/posts/', json={'caption': 'hello'}, headers=headers).get_json()

    response = client.post('/api/comments/', json={'post_id': post['post_id'], 'content': ' \n '}, headers=headers)
    assert response.status_code == 400

    comment = client.post('/api/comments/', json={'post_id': post['post_id'], 'content': ' kept '},
                          headers=headers).get_json()
    assert comment['content'] == 'kept'
    response = client.put(f"/api/comments/{comment['comment_id']}", json={'content': '   '}, headers=headers)
    assert response.status_code == 400
    assert client.get(f"/api/comments/{comment['comment_id']}", headers=headers).get_json()['content'] == 'kept'
