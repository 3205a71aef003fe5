# petconnect/api/messages/test_messages.py
"""
Usage: python -m pytest petconnect/api/messages petconnect/api/chats -v
"""

from petconnect.models.chat import chat_id_for


def _send(client, headers, receiver_id, content):
    return client.post('/api/messages/send', json={'receiver_id': receiver_id, 'content': content}, headers=headers)


def test_send_trims_content_and_updates_chat_caches(client, db, signup):
    alice, alice_headers = signup('alice')
    bob, _ = signup('bob')

    response = _send(client, alice_headers, bob['user_id'], '  hi bob  ')

    assert response.status_code == 201
    message = response.get_json()
    assert message['content'] == 'hi bob'
    assert message['is_read'] is False
    chat = db.collection('chats').document(chat_id_for(alice['user_id'], bob['user_id'])).get().to_dict()
    assert chat['last_message']['content'] == 'hi bob'
    assert chat['unread_count'] == {alice['user_id']: 0, bob['user_id']: 1}


def test_send_validation(client, signup):
    _, alice_headers = signup('alice')
    bob, _ = signup('bob')

    blank = _send(client, alice_headers, bob['user_id'], '    ')
    too_long = _send(client, alice_headers, bob['user_id'], 'x' * 501)
    nobody = _send(client, alice_headers, 'no-such-user', 'hello')

    assert blank.status_code == 400
    assert too_long.status_code == 400
    assert nobody.status_code == 404


def test_unread_count_and_mark_read(client, signup):
    alice, alice_headers = signup('alice')
    bob, bob_headers = signup('bob')
    _send(client, alice_headers, bob['user_id'], 'one')
    _send(client, alice_headers, bob['user_id'], 'two')

    assert client.get('/api/messages/unread/count', headers=bob_headers).get_json()['unread_count'] == 2
    assert client.get('/api/messages/unread/count', headers=alice_headers).get_json()['unread_count'] == 0

    response = client.patch('/api/messages/mark-read', json={'sender_id': alice['user_id']}, headers=bob_headers)

    assert response.get_json()['updated_count'] == 2
    assert client.get('/api/messages/unread/count', headers=bob_headers).get_json()['unread_count'] == 0
    chats = client.get('/api/chats/', headers=bob_headers).get_json()
    assert chats[0]['unread_count'] == 0


def test_conversations_and_thread_pagination(client, signup):
    alice, alice_headers = signup('alice')
    bob, bob_headers = signup('bob')
    carol, _ = signup('carol')
    for i in range(3):
        _send(client, alice_headers, bob['user_id'], f'to bob {i}')
    _send(client, bob_headers, alice['user_id'], 'reply')
    _send(client, alice_headers, carol['user_id'], 'to carol')

    conversations = client.get('/api/messages/conversations', headers=alice_headers).get_json()

    assert [c['participant']['username'] for c in conversations] == ['carol', 'bob']
    assert conversations[1]['last_message']['content'] == 'reply'
    assert conversations[1]['unread_count'] == 1

    thread = client.get(f"/api/messages/thread/{bob['user_id']}?page=1&limit=3", headers=alice_headers).get_json()
    assert [m['content'] for m in thread['messages']] == ['reply', 'to bob 2', 'to bob 1']
    assert thread['pagination'] == {'current_page': 1, 'total_pages': 2, 'total_messages': 4}


def test_delete_message_is_sender_only_and_soft(client, db, signup):
    _, alice_headers = signup('alice')
    bob, bob_headers = signup('bob')
    message = _send(client, alice_headers, bob['user_id'], 'oops').get_json()
    url = f"/api/messages/{message['message_id']}"

    assert client.delete(url, headers=bob_headers).status_code == 403
    assert client.delete(url, headers=alice_headers).status_code == 200

    stored = db.collection('messages').document(message['message_id']).get().to_dict()
    assert stored['is_deleted'] is True
    assert client.get('/api/messages/unread/count', headers=bob_headers).get_json()['unread_count'] == 0


def test_sending_to_yourself_is_rejected(client, db, signup):
    alice, alice_headers = signup('alice')

    response = _send(client, alice_headers, alice['user_id'], 'note to self')

    assert response.status_code == 400
    assert list(db.collection('chats').stream()) == []
    assert client.get('/api/chats/', headers=alice_headers).get_json() == []
