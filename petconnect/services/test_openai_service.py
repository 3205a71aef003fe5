# petconnect/services/test_openai_service.py

from unittest import mock

import pytest

from petconnect.services.openai_service import (
    OpenAIService, canned_response, is_animal_related,
    OFF_TOPIC_REPLY, GENERAL_TIPS, SOURCE_OPENAI, SOURCE_FALLBACK
)


def _completion(text):
    return mock.Mock(choices=[mock.Mock(message=mock.Mock(content=text))])


def test_is_animal_related():
    assert is_animal_related("How often should I walk my Dog?")
    assert not is_animal_related("What is the capital of France?")
    assert not is_animal_related("")


def test_canned_response_branches():
    assert canned_response("Who won the election?") == OFF_TOPIC_REPLY
    assert canned_response("Is a dog a good first pet?").startswith("Dogs make wonderful companions")
    assert canned_response("My lizard won't eat").startswith("Reptiles can be fascinating")
    assert canned_response("Any advice on pet adoption?") in GENERAL_TIPS


def test_chat_without_client_uses_fallback(app):
    service = app.services['openai']

    assert service.is_enabled is False
    assert service.chat("Tell me about cats") == {
        "message": canned_response("Tell me about cats"),
        "source": SOURCE_FALLBACK
    }


def test_chat_sends_system_prompt_and_history():
    service = OpenAIService()
    service.client = mock.Mock()
    service.client.chat.completions.create.return_value = _completion("Feed twice a day.")
    history = [{"role": "user", "content": "I have a puppy"}, {"role": "assistant", "content": "Nice!"}]

    answer = service.chat("How often should I feed it?", history)

    assert answer == {"message": "Feed twice a day.", "source": SOURCE_OPENAI}
    sent = service.client.chat.completions.create.call_args.kwargs['messages']
    assert sent[0]['role'] == 'system'
    assert sent[1:3] == history
    assert sent[-1] == {"role": "user", "content": "How often should I feed it?"}


def test_api_failure_falls_back():
    service = OpenAIService()
    service.client = mock.Mock()
    service.client.chat.completions.create.side_effect = RuntimeError("rate limited")

    answer = service.get_breed_info("Beagle", "dog")

    assert answer['source'] == SOURCE_FALLBACK
    assert answer['message'].startswith("Dogs make wonderful companions")


@pytest.mark.parametrize('path, key', [
    ('/api/ai/breed-info?breed=Siamese&animal=cat', 'information'),
    ('/api/ai/pet-care?animal=rabbit&age=young', 'tips'),
])
def test_assistant_get_routes(client, signup, path, key):
    _, headers = signup('curious')

    body = client.get(path, headers=headers).get_json()

    assert body['source'] == SOURCE_FALLBACK
    assert body[key]


def test_assistant_chat_route(client, signup):
    _, headers = signup('curious')

    off_topic = client.post('/api/ai/chat', json={'message': 'Tell me a joke about taxes'}, headers=headers)
    recommendations = client.post('/api/ai/recommendations',
                                  json={'preferences': {'home_type': 'apartment', 'allergies': True}},
                                  headers=headers)
    empty = client.post('/api/ai/chat', json={'message': ''}, headers=headers)

    assert off_topic.get_json() == {'message': OFF_TOPIC_REPLY, 'source': SOURCE_FALLBACK}
    assert recommendations.status_code == 200
    assert recommendations.get_json()['recommendations']
    assert empty.status_code == 400
