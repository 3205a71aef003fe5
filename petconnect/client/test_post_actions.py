# petconnect/client/test_post_actions.py

import threading
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from unittest import mock

import pytest

from petconnect.client.api_client import ApiError
from petconnect.client.post_actions import PostActions

USER = 'u1'


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=4)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def api():
    return mock.Mock()


def _post(post_id, likes=()):
    return {'post_id': post_id, 'likes': list(likes)}


def test_like_is_optimistic_then_confirmed(api, executor):
    release = threading.Event()

    def like_post(post_id):
        release.wait(5)
        return _post(post_id, [USER])
    api.like_post.side_effect = like_post
    actions = PostActions(api, executor)

    future = actions.toggle_like('p1', USER)

    assert actions.is_liked('p1')
    release.set()
    assert future.result(5)['likes'] == [USER]
    assert actions.is_liked('p1')


def test_like_takes_server_answer(api, executor):
    # the server says the user does not like the post after the toggle
    api.like_post.return_value = _post('p1', ['someone-else'])
    actions = PostActions(api, executor)

    actions.toggle_like('p1', USER).result(5)

    assert not actions.is_liked('p1')


def test_failed_unlike_reverts(api, executor):
    api.like_post.side_effect = ApiError(0, 'connection refused')
    actions = PostActions(api, executor, initial_liked=['p1'])

    future = actions.toggle_like('p1', USER)

    with pytest.raises(ApiError):
        future.result(5)
    assert actions.is_liked('p1')


def test_failed_save_reverts(api, executor):
    api.save_post.side_effect = ApiError(500, 'Failed to save post')
    actions = PostActions(api, executor)

    future = actions.toggle_save('p1', USER)

    with pytest.raises(ApiError):
        future.result(5)
    assert not actions.is_saved('p1')
    api.save_post.assert_called_once_with(USER, 'p1')


def test_unsave_replaces_local_set_with_server_list(api, executor):
    api.unsave_post.return_value = {'user_id': USER, 'saved_posts': ['p3']}
    actions = PostActions(api, executor, initial_saved=['p1', 'p2'])

    actions.toggle_save('p1', USER).result(5)

    api.unsave_post.assert_called_once_with(USER, 'p1')
    assert actions.saved_posts == {'p3'}


def test_save_reconcile_keeps_other_in_flight_posts(api, executor):
    p2_release = threading.Event()

    def save_post(user_id, post_id):
        if post_id == 'p2':
            p2_release.wait(5)
            return {'saved_posts': ['p1', 'p2']}
        # p2 has not reached the server yet
        return {'saved_posts': ['p1']}
    api.save_post.side_effect = save_post
    actions = PostActions(api, executor)

    slow = actions.toggle_save('p2', USER)
    actions.toggle_save('p1', USER).result(5)

    assert actions.saved_posts == {'p1', 'p2'}
    p2_release.set()
    slow.result(5)
    assert actions.saved_posts == {'p1', 'p2'}


def test_double_click_sends_two_requests(api, executor):
    api.like_post.return_value = _post('p1')
    actions = PostActions(api, executor)

    first = actions.toggle_like('p1', USER)
    second = actions.toggle_like('p1', USER)
    first.result(5)
    second.result(5)

    assert api.like_post.call_count == 2


def test_like_answer_waits_for_the_last_click(api, executor):
    lock = threading.Lock()
    first_release, second_release = threading.Event(), threading.Event()
    # answers in arrival order: liked after the first toggle, unliked after the second
    answers = iter([(first_release, [USER]), (second_release, [])])

    def like_post(post_id):
        with lock:
            release, likes = next(answers)
        release.wait(5)
        return _post(post_id, likes)
    api.like_post.side_effect = like_post
    actions = PostActions(api, executor)

    first = actions.toggle_like('p1', USER)
    second = actions.toggle_like('p1', USER)
    first_release.set()
    done, _ = wait([first, second], timeout=5, return_when=FIRST_COMPLETED)

    assert [f.result()['likes'] for f in done] == [[USER]]
    assert not actions.is_liked('p1')
    second_release.set()
    first.result(5)
    second.result(5)
    assert not actions.is_liked('p1')


def test_seed_from_server_only_once(api, executor):
    actions = PostActions(api, executor)
    posts = [_post('p1', [USER]), _post('p2', ['x'])]

    assert actions.seed_from_server(posts, {'user_id': USER, 'saved_posts': ['p2']})
    assert not actions.seed_from_server([_post('p2', [USER])], {'user_id': USER, 'saved_posts': []})

    assert actions.liked_posts == {'p1'}
    assert actions.saved_posts == {'p2'}


def test_sync_liked_from_posts(api, executor):
    actions = PostActions(api, executor, initial_liked=['p1'])

    assert not actions.sync_liked_from_posts([_post('p1', [USER]), _post('p2')], USER)
    assert actions.sync_liked_from_posts([_post('p1'), _post('p2', [USER])], USER)
    assert actions.liked_posts == {'p2'}


def test_sync_skips_posts_with_a_request_in_flight(api, executor):
    release = threading.Event()

    def like_post(post_id):
        release.wait(5)
        return _post(post_id, [USER])
    api.like_post.side_effect = like_post
    actions = PostActions(api, executor)

    future = actions.toggle_like('p1', USER)
    # stale server copy: neither post liked yet, p3 liked elsewhere
    changed = actions.sync_liked_from_posts([_post('p1'), _post('p3', [USER])], USER)

    assert changed
    assert actions.liked_posts == {'p1', 'p3'}
    release.set()
    future.result(5)
    assert actions.is_liked('p1')
