from django.apps import AppConfig
import logging
import os

logger = logging.getLogger(__name__)


class AuthenticationConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'authentication'

    def ready(self):
        """Initialize Firebase Admin SDK when Django starts (optional)"""
        import firebase_admin
        from firebase_admin import credentials
        from django.conf import settings

        creds_path = settings.FIREBASE_CREDENTIALS_PATH

        if not creds_path:
            logger.info("Firebase credentials not provided - Firebase authentication disabled")
            return

        if firebase_admin._apps:
            return

        if not os.path.isabs(creds_path):
            creds_path = os.path.join(settings.BASE_DIR, creds_path)

        if not os.path.exists(creds_path):
            logger.warning(f"Firebase credentials file not found: {creds_path} - Firebase authentication disabled")
            return

        try:
            firebase_admin.initialize_app(credentials.Certificate(creds_path))
            logger.info("Firebase initialized successfully")
        except (ValueError, IOError) as e:
            logger.error(f"Firebase initialization failed: {e} - Firebase authentication disabled")
