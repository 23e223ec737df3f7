from django.urls import path
from . import views

urlpatterns = [
    path('login/', views.login, name='login'),
    path('register/personal/', views.register_personal, name='register-personal'),
    path('register/company/', views.register_company, name='register-company'),
    path('firebase-login/', views.firebase_login, name='firebase-login'),
    path('me/', views.user_profile, name='user-profile'),

    # User management endpoints (Admin only)
    path('users/', views.UserListView.as_view(), name='user-list'),
    path('users/<int:user_id>/role/', views.update_user_role, name='user-update-role'),
]
