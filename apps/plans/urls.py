from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'plans'

router = DefaultRouter()
router.register(r'', views.PlanViewSet, basename='plan')

urlpatterns = [
    # Plan ViewSet routes
    # GET    /api/plans/                       - List organizer's plans
    # POST   /api/plans/                       - Create plan
    # POST   /api/plans/quick_create/          - Create plan from a name
    # GET    /api/plans/message_templates/     - Payment tones and invitation messages
    # GET    /api/plans/{id}/                  - Plan with roster
    # PATCH  /api/plans/{id}/                  - Update plan / schedule link
    # DELETE /api/plans/{id}/                  - Delete plan
    # GET    /api/plans/{id}/split/            - Shares and collection totals
    # GET    /api/plans/{id}/participants/     - Roster
    # POST   /api/plans/{id}/participants/     - Add participant
    # GET    /api/plans/{id}/roles/            - Role table
    # POST   /api/plans/{id}/update_role/      - Override role multiplier/name
    # POST   /api/plans/{id}/custom_roles/     - Add custom role
    # POST   /api/plans/{id}/amount_items/     - Add amount item
    # POST   /api/plans/{id}/reorder_amount_items/ - Reorder amount items
    # POST   /api/plans/{id}/confirm/          - Confirm date, rebuild roster
    # POST   /api/plans/{id}/sync_responses/   - Replace roster from responses
    # POST   /api/plans/{id}/merge_responses/  - Add new respondents
    # POST   /api/plans/{id}/payment_text/     - Payment request text
    # POST   /api/plans/{id}/invitation_text/  - Invitation text

    path('participants/<uuid:pk>/', views.participant_detail, name='participant-detail'),
    path(
        'participants/<uuid:pk>/toggle_collected/',
        views.participant_toggle_collected,
        name='participant-toggle-collected'
    ),
    path('amount-items/<uuid:pk>/', views.amount_item_detail, name='amount-item-detail'),
    path('custom-roles/<uuid:pk>/', views.custom_role_detail, name='custom-role-detail'),

    path('', include(router.urls)),
]
