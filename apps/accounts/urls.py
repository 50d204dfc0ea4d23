from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),

    # Organizer profile
    path('user/', views.current_user, name='current-user'),
    path('user/payment-settings/', views.payment_settings, name='payment-settings'),
]
