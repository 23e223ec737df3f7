from rest_framework import status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from django.contrib.auth import authenticate
from django.db.models import Count, Q
from django_ratelimit.decorators import ratelimit
import logging
from .models import CustomUser, ROLE_PERSONAL
from .serializers import (
    UserSerializer,
    ProfileUpdateSerializer,
    PersonalRegistrationSerializer,
    CompanyRegistrationSerializer,
    UserRoleUpdateSerializer,
)
from .authentication import generate_jwt_token, verify_firebase_token
from .permissions import IsAdmin

logger = logging.getLogger(__name__)


def _token_response(user, status_code=status.HTTP_200_OK, message=None):
    payload = {
        'token': generate_jwt_token(user),
        'user': UserSerializer(user).data,
        'role': user.role,
    }
    if message:
        payload['message'] = message
    return Response(payload, status=status_code)


@api_view(['POST'])
@permission_classes([AllowAny])
@ratelimit(key='ip', rate='5/m', method='POST', block=True)
def login(request):
    """
    Login with email and password.
    Endpoint: POST /api/auth/login/
    Body: { "email": "...", "password": "..." }

    Rate Limit: 5 requests per minute per IP address
    """
    email = (request.data.get('email') or '').lower()
    password = request.data.get('password')

    if not email or not password:
        return Response(
            {'error': 'Email and password are required'},
            status=status.HTTP_400_BAD_REQUEST
        )

    user = authenticate(request, username=email, password=password)

    if not user:
        return Response(
            {'error': 'Invalid email or password'},
            status=status.HTTP_401_UNAUTHORIZED
        )

    logger.info(f"User {user.id} logged in")
    return _token_response(user)


def _register(request, serializer_class):
    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user = serializer.save()
    logger.info(f"Registered {user.role} account {user.id}")
    return _token_response(user, status.HTTP_201_CREATED, 'Account created successfully')


@api_view(['POST'])
@permission_classes([AllowAny])
@ratelimit(key='ip', rate='3/h', method='POST', block=True)
def register_personal(request):
    """
    Create a personal account.
    Endpoint: POST /api/auth/register/personal/
    Body: { "full_name", "email", "password", "confirm_password" }
    """
    return _register(request, PersonalRegistrationSerializer)


@api_view(['POST'])
@permission_classes([AllowAny])
@ratelimit(key='ip', rate='3/h', method='POST', block=True)
def register_company(request):
    """
    Create a company account.
    Endpoint: POST /api/auth/register/company/
    Body: { "company_name", "rfc", "phone", "email", "password", "confirm_password" }
    """
    return _register(request, CompanyRegistrationSerializer)


@api_view(['POST'])
@permission_classes([AllowAny])
@ratelimit(key='ip', rate='10/m', method='POST', block=True)
def firebase_login(request):
    """
    Exchange a Firebase ID token for an API token.
    Endpoint: POST /api/auth/firebase-login/
    Body: { "id_token": "..." }

    First sign-in links the Firebase uid to the account with the same email,
    or creates a personal account.
    """
    id_token = request.data.get('id_token')
    if not id_token:
        return Response({'error': 'id_token is required'}, status=status.HTTP_400_BAD_REQUEST)

    claims = verify_firebase_token(id_token)
    uid = claims['uid']
    email = (claims.get('email') or '').lower()

    user = CustomUser.objects.filter(firebase_uid=uid).first()
    if user is None and email:
        user = CustomUser.objects.filter(email__iexact=email).first()
        if user is not None:
            user.firebase_uid = uid
            user.save(update_fields=['firebase_uid', 'updated_at'])

    created = False
    if user is None:
        if not email:
            return Response({'error': 'Firebase account has no email'}, status=status.HTTP_400_BAD_REQUEST)
        user = CustomUser.objects.create_user(
            username=email,
            email=email,
            firebase_uid=uid,
            role=ROLE_PERSONAL,
            display_name=claims.get('name', ''),
        )
        created = True
        logger.info(f"Created account {user.id} from Firebase sign-in")

    if not user.is_active:
        return Response({'error': 'Account is disabled'}, status=status.HTTP_403_FORBIDDEN)

    return _token_response(user, status.HTTP_201_CREATED if created else status.HTTP_200_OK)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def user_profile(request):
    """
    Get or update current user profile.
    Endpoint: GET/PATCH /api/auth/me/
    """
    if request.method == 'PATCH':
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()

    return Response(UserSerializer(request.user).data, status=status.HTTP_200_OK)


# ============================================================================
# USER MANAGEMENT ENDPOINTS (Admin only)
# ============================================================================

class UserListView(generics.ListAPIView):
    """
    GET /api/auth/users/
    List all other users with their roles and order counts
    Admin only
    """
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    pagination_class = None

    def get_queryset(self):
        queryset = CustomUser.objects.exclude(
            id=self.request.user.id
        ).annotate(
            order_count=Count('orders')
        ).order_by('-created_at')

        role_filter = self.request.query_params.get('role', None)
        if role_filter:
            queryset = queryset.filter(role=role_filter)

        search = self.request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(email__icontains=search) |
                Q(display_name__icontains=search) |
                Q(company_name__icontains=search)
            )

        return queryset


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def update_user_role(request, user_id):
    """
    PATCH /api/auth/users/{id}/role/
    Update a user's role
    Admin only
    """
    try:
        user = CustomUser.objects.get(id=user_id)
    except CustomUser.DoesNotExist:
        return Response({
            'success': False,
            'message': 'User not found'
        }, status=status.HTTP_404_NOT_FOUND)

    if user.id == request.user.id:
        return Response({
            'success': False,
            'message': 'You cannot change your own role'
        }, status=status.HTTP_400_BAD_REQUEST)

    serializer = UserRoleUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    new_role = serializer.validated_data['role']
    user.role = new_role
    user.save(update_fields=['role', 'updated_at'])
    logger.info(f"User {request.user.id} changed role of user {user.id} to {new_role}")

    return Response({
        'success': True,
        'message': f'User role updated to {new_role}',
        'user': UserSerializer(user).data
    }, status=status.HTTP_200_OK)
