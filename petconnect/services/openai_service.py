# petconnect/services/openai_service.py
import logging
import random
from typing import Optional, Dict, Any, List
from flask import Flask
from openai import OpenAI

SYSTEM_PROMPT = (
    "You are a helpful pet care assistant that only answers questions about animals and pets. "
    "If asked about other topics, politely decline and steer the conversation back to "
    "pet-related topics. Be friendly, informative, and concise."
)

OFF_TOPIC_REPLY = (
    "I'm sorry, but I can only answer questions about animals and pet care. If you have any "
    "questions about pets, breeds, training, care, or adoption, I'd be happy to help!"
)

ANIMAL_KEYWORDS = [
    'animal', 'pet', 'dog', 'cat', 'bird', 'fish', 'rabbit', 'hamster', 'guinea pig',
    'reptile', 'lizard', 'snake', 'turtle', 'frog', 'amphibian', 'mammal',
    'puppy', 'kitten', 'breed', 'species', 'veterinarian', 'vet', 'adoption',
    'food', 'feed', 'diet', 'nutrition', 'train', 'training', 'walk', 'groom', 'grooming',
    'care', 'health', 'vaccine', 'vaccination', 'illness', 'disease', 'treatment',
    'behavior', 'toy', 'play', 'exercise', 'shelter', 'rescue', 'kennel', 'cage', 'leash',
    'collar', 'fur', 'feather', 'scale', 'habitat', 'crate', 'litter', 'aquarium', 'tank'
]

# Checked in order; the first matching keyword group wins.
SPECIES_REPLIES = [
    (('dog',), "Dogs make wonderful companions! They're loyal, affectionate, and come in various "
               "breeds to match different lifestyles."),
    (('cat',), "Cats are independent yet loving pets. They're perfect for people who want "
               "companionship without needing constant attention."),
    (('fish',), "Fish can be fascinating pets! Watching an aquarium can be relaxing, and many "
                "species are relatively low-maintenance."),
    (('bird',), "Birds are intelligent and social creatures. Many species can learn to talk or "
                "whistle tunes!"),
    (('rabbit',), "Rabbits are wonderful pets! They're quiet, can be litter-trained, and each has a "
                  "unique personality. They need daily exercise outside their cage and a diet "
                  "rich in hay."),
    (('reptile', 'snake', 'lizard'), "Reptiles can be fascinating pets! They generally require "
                                     "specific temperature and humidity conditions. Bearded "
                                     "dragons and leopard geckos are good beginner reptiles."),
    (('hamster', 'guinea pig'), "Small rodents like hamsters and guinea pigs make great first "
                                "pets! They're relatively low-maintenance but still interactive "
                                "and each has its own personality."),
]

GENERAL_TIPS = [
    "I'd recommend a Labrador Retriever for an active family. They're friendly, good with kids, and love outdoor activities.",
    "Cats are relatively low-maintenance pets. They're independent but still affectionate, perfect for busy individuals.",
    "For apartment living, consider smaller breeds like a Bichon Frise or a cat. They adapt well to smaller spaces.",
    "To keep your pet healthy, regular vet check-ups, proper diet, and daily exercise are essential.",
    "When training a new puppy, consistency is key. Use positive reinforcement and establish a routine.",
    "Goldfish can be great starter pets for children. They teach responsibility without requiring too much care.",
    "Birds like parakeets are social creatures that need daily interaction. They're intelligent and can learn tricks.",
    "If you have allergies, hypoallergenic breeds like Poodles or Bichon Frises might be good options.",
    "Rabbits make wonderful indoor pets. They're quiet, can be litter-trained, and have distinct personalities.",
    "Senior pets often make wonderful companions. They're usually calmer and already trained.",
]

SOURCE_OPENAI = "openai"
SOURCE_FALLBACK = "fallback"


def is_animal_related(message: str) -> bool:
    text = (message or '').lower()
    return any(keyword in text for keyword in ANIMAL_KEYWORDS)


def canned_response(message: str) -> str:
    """Offline answer: a refusal for off-topic input, a species answer, or a random general tip."""
    if not is_animal_related(message):
        return OFF_TOPIC_REPLY

    text = message.lower()
    for keywords, reply in SPECIES_REPLIES:
        if any(keyword in text for keyword in keywords):
            return reply
    return random.choice(GENERAL_TIPS)


class OpenAIService:
    """
    Pet assistant backed by the OpenAI chat-completion API.
    Every public method answers {"message", "source"}; any failure falls back to canned_response.
    """

    def __init__(self):
        self.client = None
        self.model = 'gpt-3.5-turbo'
        self.max_tokens = 500
        self.temperature = 0.7

    def init_app(self, app: Flask):
        """
        Creates the OpenAI client when ENABLE_AI_FEATURES is on and OPENAI_API_KEY is set.
        Otherwise the service only serves canned answers.
        """
        self.model = app.config.get('OPENAI_MODEL', self.model)
        self.max_tokens = app.config.get('OPENAI_MAX_TOKENS', self.max_tokens)
        self.temperature = app.config.get('OPENAI_TEMPERATURE', self.temperature)

        api_key = app.config.get('OPENAI_API_KEY')
        if not app.config.get('ENABLE_AI_FEATURES') or not api_key:
            logging.warning("OpenAIService: AI features disabled, using canned responses.")
            return

        self.client = OpenAI(api_key=api_key)
        logging.info("OpenAIService: OpenAI client initialized.")

    @property
    def is_enabled(self) -> bool:
        return self.client is not None

    def chat(self, message: str, history: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
        """
        Answers a user message, optionally continuing a conversation.

        :param message: the user's question
        :param history: previous turns as [{"role": "user"|"assistant", "content": ...}]
        """
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        messages.extend(history or [])
        messages.append({"role": "user", "content": message})
        return self._complete(messages, fallback_text=message)

    def get_recommendations(self, preferences: Dict[str, Any]) -> Dict[str, Any]:
        prompt = (
            "Recommend suitable pets for someone with these preferences. "
            f"Lifestyle: {preferences.get('lifestyle', 'unspecified')}. "
            f"Experience with pets: {preferences.get('experience', 'unspecified')}. "
            f"Home type: {preferences.get('home_type', 'unspecified')}. "
            f"Allergies: {'yes' if preferences.get('allergies') else 'no'}."
        )
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]
        # Preferences always concern pets, so the fallback sees a pet question.
        return self._complete(messages, fallback_text=f"pet recommendation {preferences.get('home_type', '')}")

    def get_breed_info(self, breed: str, animal: str) -> Dict[str, Any]:
        prompt = f"Give a short overview of the {breed} {animal} breed: temperament, size, care needs and health concerns."
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]
        return self._complete(messages, fallback_text=f"{animal} breed {breed}")

    def get_care_tips(self, animal: str, age: Optional[str] = None, query: Optional[str] = None) -> Dict[str, Any]:
        prompt = f"Give practical care tips for a {age + ' ' if age else ''}{animal}."
        if query:
            prompt += f" Specifically: {query}"
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]
        return self._complete(messages, fallback_text=f"{animal} care {query or ''}")

    def _complete(self, messages: List[Dict[str, str]], fallback_text: str) -> Dict[str, Any]:
        if not self.client:
            return {"message": canned_response(fallback_text), "source": SOURCE_FALLBACK}

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature
            )
            return {"message": response.choices[0].message.content, "source": SOURCE_OPENAI}
        except Exception as e:
            logging.error(f"OpenAI chat completion failed, using canned response: {e}", exc_info=True)
            return {"message": canned_response(fallback_text), "source": SOURCE_FALLBACK}
