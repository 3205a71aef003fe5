# petconnect/client/test_api_client.py

from unittest import mock

import pytest
import requests

from petconnect.client.api_client import ApiError, PetConnectClient


def _response(status_code, body):
    response = mock.Mock(status_code=status_code, reason='reason')
    response.json.return_value = body
    return response


@pytest.fixture
def session():
    return mock.Mock()


def test_login_stores_token_and_sends_it_afterwards(session):
    session.request.side_effect = [
        _response(200, {'token': 'jwt', 'user': {'user_id': 'u1'}}),
        _response(200, [])
    ]
    client = PetConnectClient('http://api.test/', session=session)

    client.login('sam', 'Secret123')
    client.get_feed()

    assert client.token == 'jwt'
    login_call, feed_call = session.request.call_args_list
    assert login_call.args == ('POST', 'http://api.test/api/auth/login')
    assert login_call.kwargs['headers'] == {}
    assert feed_call.kwargs['headers'] == {'Authorization': 'Bearer jwt'}


def test_error_answer_raises_api_error_with_field(session):
    session.request.return_value = _response(400, {
        'error_code': 'DUPLICATE_FIELD', 'message': 'Username is already taken', 'field': 'username'
    })
    client = PetConnectClient('http://api.test')

    client.session = session
    with pytest.raises(ApiError) as exc_info:
        client.register('sam', 'sam@example.com', 'Secret123', 'Secret123')

    assert exc_info.value.status_code == 400
    assert exc_info.value.field == 'username'
    assert client.token is None


def test_transport_failure_is_status_zero(session):
    session.request.side_effect = requests.ConnectionError('connection refused')
    client = PetConnectClient('http://api.test', token='jwt', session=session)

    with pytest.raises(ApiError) as exc_info:
        client.like_post('p1')

    assert exc_info.value.status_code == 0


def test_logout_drops_token_even_on_failure(session):
    session.request.return_value = _response(500, {'message': 'Server error during logout'})
    client = PetConnectClient('http://api.test', token='jwt', session=session)

    with pytest.raises(ApiError):
        client.logout()

    assert client.token is None


def test_availability_checks_pass_the_excluded_user(session):
    session.request.return_value = _response(200, {'available': True, 'message': 'Email is available'})
    client = PetConnectClient('http://api.test', token='jwt', session=session)

    assert client.check_email('sam@example.com', exclude_user_id='u1')['available'] is True
    client.check_username('sam')

    email_call, username_call = session.request.call_args_list
    assert email_call.args == ('GET', 'http://api.test/api/users/check/email/sam@example.com')
    assert email_call.kwargs['params'] == {'exclude_user_id': 'u1'}
    assert username_call.args == ('GET', 'http://api.test/api/users/check/username/sam')
    assert username_call.kwargs['params'] is None
