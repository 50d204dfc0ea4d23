from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'schedules'

router = DefaultRouter()
router.register(r'', views.ScheduleEventViewSet, basename='event')

urlpatterns = [
    # Event ViewSet routes
    # GET    /api/schedules/                  - List organizer's events
    # POST   /api/schedules/                  - Create event
    # GET    /api/schedules/{id}/             - Event details
    # PATCH  /api/schedules/{id}/             - Update event
    # DELETE /api/schedules/{id}/             - Delete event
    # GET    /api/schedules/{id}/responses/   - Responses
    # GET    /api/schedules/{id}/statistics/  - Attendance statistics

    path('responses/<uuid:pk>/', views.remove_response, name='response-delete'),

    # Public web form
    path('public/<uuid:pk>/', views.public_event, name='public-event'),
    path('public/<uuid:pk>/respond/', views.public_respond, name='public-respond'),

    path('', include(router.urls)),
]
