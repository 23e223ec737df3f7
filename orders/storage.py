"""
Blob storage for order documents.

Uploads go to Cloudinary when it is configured, otherwise to Django's
default storage backend.
"""
import logging
import os
import uuid

import cloudinary.uploader
from django.conf import settings
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)


class DocumentUploadError(Exception):
    """Raised when a document could not be stored."""


class DocumentStorage:
    """Helper class for storing order documents"""

    @staticmethod
    def build_path(order, field_name, filename):
        ext = os.path.splitext(filename)[1].lower()
        return f"{settings.CLOUDINARY_ORDER_FOLDER}/{order.id}/{field_name}_{uuid.uuid4().hex[:8]}{ext}"

    @staticmethod
    def upload(order, field_name, file):
        """
        Store an uploaded file and return its public URL.

        Args:
            order: Order the document belongs to
            field_name: identity_document or proof_of_address
            file: uploaded file object

        Returns:
            URL of the stored document

        Raises:
            DocumentUploadError
        """
        path = DocumentStorage.build_path(order, field_name, file.name)
        file.seek(0)

        try:
            if settings.USE_CLOUDINARY:
                result = cloudinary.uploader.upload(
                    file,
                    folder=os.path.dirname(path),
                    public_id=os.path.splitext(os.path.basename(path))[0],
                    resource_type='auto',
                    tags=['order-document', field_name],
                )
                url = result['secure_url']
            else:
                saved_path = default_storage.save(path, file)
                url = default_storage.url(saved_path)
        except Exception as e:
            logger.error(f"Failed to upload {field_name} for order {order.id}: {str(e)}")
            raise DocumentUploadError(f"Could not store {field_name}: {str(e)}") from e

        logger.info(f"Stored {field_name} for order {order.id}")
        return url
