# petconnect/services/storage_service.py
import uuid
import logging
from datetime import timedelta
from flask import Flask
from firebase_admin import storage

# Folder each upload type lands in.
UPLOAD_FOLDERS = {
    "post_media": "posts",
    "profile_pic": "profile_pics",
    "pet_image": "pets",
}

class StorageNotConfiguredError(RuntimeError):
    """No bucket is configured (FIREBASE_STORAGE_BUCKET unset)."""


class StorageService:
    """
    Firebase Storage access for user media.
    Clients upload directly with a pre-signed PUT URL, then ask the API to publish the file.
    """

    def __init__(self):
        self.bucket = None

    def init_app(self, app: Flask):
        """
        Binds the bucket named by FIREBASE_STORAGE_BUCKET.
        Without one the service stays unconfigured and upload routes answer 503.
        """
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            logging.warning("StorageService: FIREBASE_STORAGE_BUCKET is not set, uploads are disabled.")
            return

        self.bucket = storage.bucket(bucket_name)
        logging.info("StorageService: Firebase Storage initialized.")

    def generate_upload_url(self, user_id: str, upload_type: str, filename: str, content_type: str) -> dict:
        """
        Creates a 15 minute PUT URL under the folder of upload_type.

        :param user_id: the uploading user, used as a sub folder
        :param upload_type: one of UPLOAD_FOLDERS
        :param filename: original file name, only its extension is kept
        :param content_type: MIME type the client will upload with
        :return: {"upload_url", "file_path"}
        """
        if not self.bucket:
            raise StorageNotConfiguredError("Storage is not configured")

        folder = UPLOAD_FOLDERS.get(upload_type)
        if not folder:
            raise ValueError(f"'{upload_type}' is not a valid upload type")

        extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else 'bin'
        destination_blob_name = f"{folder}/{user_id}/{uuid.uuid4()}.{extension}"

        blob = self.bucket.blob(destination_blob_name)
        upload_url = blob.generate_signed_url(
            version="v4",
            expiration=timedelta(minutes=15),
            method="PUT",
            content_type=content_type
        )

        return {
            "upload_url": upload_url,
            "file_path": destination_blob_name
        }

    def make_public_and_get_url(self, file_path: str) -> str:
        if not self.bucket:
            raise StorageNotConfiguredError("Storage is not configured")

        blob = self.bucket.blob(file_path)
        if not blob.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        try:
            blob.make_public()
            return blob.public_url
        except Exception as e:
            logging.error(f"Failed to publish file {file_path}: {e}", exc_info=True)
            raise
