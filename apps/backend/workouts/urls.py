from django.urls import path
from . import views

urlpatterns = [
    path('health', views.health),
    path('user/signup', views.signup_view),
    path('user/login', views.login_view),
    path('user/logout', views.logout_view),
    path('user/refresh', views.refresh_view),
    path('user/me', views.me_view),
    path('user/forgot-password', views.forgot_password_view),
    path('user/reset-password/<str:token>', views.reset_password_view),
    path('workouts', views.workouts),
    path('workouts/week', views.workout_week),
    path('workouts/<int:pk>', views.workout_detail),
    path('workouts/<int:pk>/occurrences', views.workout_occurrences),
]
