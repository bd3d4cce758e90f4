from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Authentication
    path('auth/signup/', views.signup, name='signup'),
    path('auth/login/', views.login, name='login'),
    path('auth/logout/', views.logout, name='logout'),
    path('auth/refresh/', views.refresh, name='refresh'),
    path('auth/me/', views.me, name='me'),

    # Email verification
    path('auth/verify-email/', views.verify_email, name='verify-email'),
    path('auth/resend-otp/', views.resend_otp, name='resend-otp'),

    # Password reset
    path('auth/forgot-password/', views.forgot_password, name='forgot-password'),
    path('auth/reset-password/', views.reset_password, name='reset-password'),

    # User profile
    path('user/profile/', views.profile, name='profile'),
    path('user/change-password/', views.change_password_view, name='change-password'),

    # Master manager administration
    path('admin/members/<uuid:user_id>/', views.admin_update_member, name='admin-update-member'),
]
