from rest_framework import authentication
from rest_framework import exceptions
from django.conf import settings
import firebase_admin
from firebase_admin import auth
import jwt
import logging
from datetime import datetime, timedelta, timezone
from .models import CustomUser

logger = logging.getLogger(__name__)


def firebase_enabled():
    """Firebase is optional and only active once the Admin SDK is initialized"""
    return bool(firebase_admin._apps)


def generate_jwt_token(user):
    """
    Generate JWT token for session management after password or Firebase login.
    """
    now = datetime.now(timezone.utc)
    payload = {
        'user_id': user.id,
        'email': user.email,
        'role': user.role,
        'exp': now + timedelta(days=settings.JWT_EXPIRY_DAYS),
        'iat': now
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm='HS256')


def verify_firebase_token(id_token):
    """
    Verify a Firebase ID token and return its decoded claims.
    """
    if not firebase_enabled():
        raise exceptions.AuthenticationFailed('Firebase authentication is not configured')
    try:
        return auth.verify_id_token(id_token)
    except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError,
            auth.RevokedIdTokenError, auth.CertificateFetchError) as e:
        raise exceptions.AuthenticationFailed(f'Invalid token: {str(e)}')


def _bearer_token(request):
    auth_header = request.META.get('HTTP_AUTHORIZATION', '')
    if not auth_header.startswith('Bearer '):
        return None
    return auth_header.split('Bearer ')[1]


class JWTAuthentication(authentication.BaseAuthentication):
    """
    Custom authentication class for JWT token verification.
    """

    def authenticate(self, request):
        token = _bearer_token(request)
        if token is None:
            return None

        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=['HS256'])
        except jwt.ExpiredSignatureError:
            raise exceptions.AuthenticationFailed('Token has expired')
        except jwt.InvalidTokenError:
            # Not one of ours; let FirebaseAuthentication try it
            if firebase_enabled():
                return None
            raise exceptions.AuthenticationFailed('Invalid token')

        try:
            user = CustomUser.objects.get(id=payload.get('user_id'), is_active=True)
        except CustomUser.DoesNotExist:
            raise exceptions.AuthenticationFailed('User not found')
        return (user, None)

    def authenticate_header(self, request):
        return 'Bearer'


class FirebaseAuthentication(authentication.BaseAuthentication):
    """
    Custom authentication class for Firebase token verification.
    Only works if Firebase is enabled.
    """

    def authenticate(self, request):
        if not firebase_enabled():
            return None

        token = _bearer_token(request)
        if token is None:
            return None

        decoded_token = verify_firebase_token(token)

        try:
            user = CustomUser.objects.get(firebase_uid=decoded_token['uid'], is_active=True)
        except CustomUser.DoesNotExist:
            raise exceptions.AuthenticationFailed('User not found')
        return (user, None)

    def authenticate_header(self, request):
        return 'Bearer'
