# petconnect/api/pets/test_pets.py


def _create_pet(client, headers, **fields):
    body = {'name': 'Milo', 'species': 'cat'}
    body.update(fields)
    response = client.post('/api/pets/', json=body, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_create_pet_links_owner(client, signup):
    user, headers = signup('pet_owner')

    pet = _create_pet(client, headers, breed='Siamese', age=3)

    assert pet['user_id'] == user['user_id']
    assert pet['posts'] == []
    me = client.get('/api/auth/me', headers=headers).get_json()
    assert me['pets'] == [pet['pet_id']]
    detail = client.get(f"/api/pets/{pet['pet_id']}", headers=headers).get_json()
    assert detail['owner']['username'] == 'pet_owner'


def test_create_pet_validation(client, signup):
    _, headers = signup('pet_owner')

    response = client.post('/api/pets/', json={'name': 'Milo', 'species': 'cat', 'age': -1}, headers=headers)

    assert response.status_code == 400
    assert 'age' in response.get_json()['details']


def test_list_pets_by_owner(client, signup):
    owner, headers = signup('owner_a')
    _, other_headers = signup('owner_b')
    mine = _create_pet(client, headers)
    _create_pet(client, other_headers, name='Rex', species='dog')

    pets = client.get(f"/api/pets/?user_id={owner['user_id']}", headers=headers).get_json()

    assert [p['pet_id'] for p in pets] == [mine['pet_id']]


def test_update_and_delete_are_owner_only(client, signup):
    _, headers = signup('owner_a')
    _, other_headers = signup('owner_b')
    pet = _create_pet(client, headers)
    url = f"/api/pets/{pet['pet_id']}"

    assert client.put(url, json={'name': 'Stolen'}, headers=other_headers).status_code == 403
    updated = client.put(url, json={'name': 'Milo Jr', 'age': 2}, headers=headers).get_json()
    assert (updated['name'], updated['age']) == ('Milo Jr', 2)

    assert client.delete(url, headers=other_headers).status_code == 403
    assert client.delete(url, headers=headers).status_code == 200
    assert client.get(url, headers=headers).status_code == 404
    assert client.get('/api/auth/me', headers=headers).get_json()['pets'] == []


def test_post_back_references(client, signup):
    _, headers = signup('owner_a')
    pet = _create_pet(client, headers)
    post = client.post('/api/posts/', json={'caption': 'no pet yet'}, headers=headers).get_json()
    url = f"/api/pets/{pet['pet_id']}/posts"

    client.post(url, json={'post_id': post['post_id']}, headers=headers)
    linked = client.post(url, json={'post_id': post['post_id']}, headers=headers).get_json()
    assert linked['posts'] == [post['post_id']]

    unlinked = client.delete(f"{url}/{post['post_id']}", headers=headers).get_json()
    assert unlinked['posts'] == []
