# petconnect/api/pets/services.py
import uuid
import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, List
from firebase_admin import firestore

from petconnect.models.pet import Pet
from petconnect.utils.datetime_utils import DateTimeUtils


class PetService:
    """
    Pet profiles. The owner's user.pets list and pet.posts are back-reference
    arrays maintained here by hand.
    """
    def __init__(self):
        self.db = firestore.client()
        self.pets_ref = self.db.collection('pets')
        self.users_ref = self.db.collection('users')
        self.posts_ref = self.db.collection('posts')

    def list_pets(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        query = self.pets_ref.where('user_id', '==', user_id) if user_id else self.pets_ref
        pets = [doc.to_dict() for doc in query.stream() if doc.exists]
        pets.sort(key=lambda p: DateTimeUtils.coerce_datetime(p.get('created_at')))
        return pets

    def get_pet(self, pet_id: str) -> Optional[Dict[str, Any]]:
        doc = self.pets_ref.document(pet_id).get()
        return doc.to_dict() if doc.exists else None

    def get_pet_populated(self, pet_id: str) -> Optional[Dict[str, Any]]:
        """Pet with its posts and an owner summary."""
        pet = self.get_pet(pet_id)
        if not pet:
            return None

        posts = []
        for post_id in pet.get('posts', []):
            post_doc = self.posts_ref.document(post_id).get()
            if post_doc.exists:
                posts.append(post_doc.to_dict())
        pet['posts'] = posts

        owner_doc = self.users_ref.document(pet['user_id']).get()
        pet['owner'] = owner_doc.to_dict() if owner_doc.exists else None
        return pet

    def create_pet(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        user_ref = self.users_ref.document(user_id)
        user_doc = user_ref.get()
        if not user_doc.exists:
            raise ValueError("User not found")

        pet = Pet(
            pet_id=str(uuid.uuid4()),
            user_id=user_id,
            name=data['name'],
            species=data['species'],
            breed=data.get('breed'),
            age=data.get('age'),
            image=data.get('image')
        )
        pet_data = DateTimeUtils.for_firestore(asdict(pet))
        self.pets_ref.document(pet.pet_id).set(pet_data)

        pets = user_doc.to_dict().get('pets', [])
        pets.append(pet.pet_id)
        user_ref.update({'pets': pets})

        logging.info(f"pet created: {pet.name} ({pet.pet_id}) for user {user_id}")
        return pet_data

    def update_pet(self, pet_id: str, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        pet_ref = self._owned_pet_ref(pet_id, user_id)
        if data:
            pet_ref.update(data)
        return pet_ref.get().to_dict()

    def delete_pet(self, pet_id: str, user_id: str) -> None:
        """Deletes the pet and drops it from the owner's pet list. Its posts keep their pet_id."""
        pet_ref = self._owned_pet_ref(pet_id, user_id)
        pet_ref.delete()

        user_ref = self.users_ref.document(user_id)
        user_doc = user_ref.get()
        if user_doc.exists:
            pets = [pid for pid in user_doc.to_dict().get('pets', []) if pid != pet_id]
            user_ref.update({'pets': pets})

    def add_post(self, pet_id: str, user_id: str, post_id: str) -> Dict[str, Any]:
        pet_ref = self._owned_pet_ref(pet_id, user_id)
        posts = pet_ref.get().to_dict().get('posts', [])
        if post_id not in posts:
            posts.append(post_id)
            pet_ref.update({'posts': posts})
        return pet_ref.get().to_dict()

    def remove_post(self, pet_id: str, user_id: str, post_id: str) -> Dict[str, Any]:
        pet_ref = self._owned_pet_ref(pet_id, user_id)
        posts = [pid for pid in pet_ref.get().to_dict().get('posts', []) if pid != post_id]
        pet_ref.update({'posts': posts})
        return pet_ref.get().to_dict()

    def _owned_pet_ref(self, pet_id: str, user_id: str):
        pet_ref = self.pets_ref.document(pet_id)
        doc = pet_ref.get()
        if not doc.exists:
            raise ValueError("Pet not found")
        if doc.to_dict().get('user_id') != user_id:
            raise PermissionError("You can only modify your own pets")
        return pet_ref
