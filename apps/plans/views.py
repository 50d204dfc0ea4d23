from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .models import Plan
from .serializers import (
    PlanSerializer,
    PlanListSerializer,
    PlanInputSerializer,
    QuickCreatePlanSerializer,
    ParticipantSerializer,
    ParticipantInputSerializer,
    CustomRoleSerializer,
    CustomRoleInputSerializer,
    RoleTableEntrySerializer,
    RoleUpdateSerializer,
    AmountItemSerializer,
    AmountItemInputSerializer,
    AmountItemOrderSerializer,
    CollectedStatusSerializer,
    ConfirmPlanSerializer,
    SyncResponsesSerializer,
    PaymentTextRequestSerializer,
    InvitationTextRequestSerializer,
    ShareTextSerializer,
    MessageTemplatesSerializer,
    SplitSummarySerializer,
)
from .permissions import IsPlanOwner

from apps.plans.services import (
    create_plan,
    quick_create_plan,
    update_plan,
    delete_plan,
    link_schedule_event,
    confirm_plan,
    get_split_summary,
    sync_participants_from_responses,
    merge_participants_from_responses,
    add_participant,
    update_participant,
    delete_participant,
    set_collection_status,
    toggle_collection_status,
    get_role_table,
    set_role_multiplier,
    set_role_name,
    add_custom_role,
    delete_custom_role,
    add_amount_item,
    update_amount_item,
    delete_amount_item,
    reorder_amount_items,
    generate_payment_text,
    generate_invitation_text,
    PAYMENT_TONE_TEMPLATES,
    INVITATION_MESSAGE_TEMPLATES,
    # Exceptions
    PlansServiceError,
    PlanNotFoundError,
    ParticipantNotFoundError,
    CustomRoleNotFoundError,
    AmountItemNotFoundError,
    InsufficientPermissionsError,
)


def error_response(error: PlansServiceError) -> Response:
    """Map a service exception to an error response."""
    if isinstance(error, (PlanNotFoundError, ParticipantNotFoundError,
                          CustomRoleNotFoundError, AmountItemNotFoundError)):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, InsufficientPermissionsError):
        status_code = status.HTTP_403_FORBIDDEN
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(error)}, status=status_code)


class PlanViewSet(viewsets.ModelViewSet):
    """
    ViewSet for plans.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Plans owned by the user
    create: Create a plan
    retrieve: Plan with roster, custom roles and amount items
    update / partial_update: Edit basic fields or the schedule link
    destroy: Delete the plan
    """

    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        """Return only plans owned by the user."""
        return Plan.objects.filter(owner=self.request.user).select_related('schedule_event')

    def get_serializer_class(self):
        if self.action == 'list':
            return PlanListSerializer
        if self.action in ['create', 'update', 'partial_update']:
            return PlanInputSerializer
        return PlanSerializer

    def get_permissions(self):
        if self.action in ['list', 'create', 'quick_create', 'message_templates']:
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsPlanOwner()]

    def _detail(self, plan_id, status_code=status.HTTP_200_OK):
        plan = self.get_queryset().get(id=plan_id)
        return Response(PlanSerializer(plan).data, status=status_code)

    @extend_schema(request=PlanInputSerializer, responses={201: PlanSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            plan = create_plan(owner=request.user, **serializer.validated_data)
        except PlansServiceError as e:
            return error_response(e)

        return self._detail(plan.id, status.HTTP_201_CREATED)

    @extend_schema(request=PlanInputSerializer, responses={200: PlanSerializer})
    def update(self, request, *args, **kwargs):
        plan = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        try:
            if 'schedule_event_id' in data:
                link_schedule_event(plan_id=plan.id, user=request.user, event_id=data.pop('schedule_event_id'))
            update_plan(plan_id=plan.id, user=request.user, **data)
        except PlansServiceError as e:
            return error_response(e)

        return self._detail(plan.id)

    def destroy(self, request, *args, **kwargs):
        plan = self.get_object()
        try:
            delete_plan(plan_id=plan.id, user=request.user)
        except PlansServiceError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=QuickCreatePlanSerializer, responses={201: PlanSerializer})
    @action(detail=False, methods=['post'])
    def quick_create(self, request):
        """Create a plan from just a name."""
        serializer = QuickCreatePlanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            plan = quick_create_plan(owner=request.user, **serializer.validated_data)
        except PlansServiceError as e:
            return error_response(e)

        return self._detail(plan.id, status.HTTP_201_CREATED)

    @extend_schema(responses={200: MessageTemplatesSerializer})
    @action(detail=False, methods=['get'])
    def message_templates(self, request):
        """Ready-made payment and invitation messages."""
        return Response({
            'payment_tones': {tone.value: text for tone, text in PAYMENT_TONE_TEMPLATES.items()},
            'invitation_messages': INVITATION_MESSAGE_TEMPLATES,
        })

    @extend_schema(responses={200: SplitSummarySerializer})
    @action(detail=True, methods=['get'])
    def split(self, request, pk=None):
        """Each participant's share and collection totals."""
        plan = self.get_object()
        return Response(SplitSummarySerializer(get_split_summary(plan)).data)

    @extend_schema(
        methods=['GET'],
        responses={200: ParticipantSerializer(many=True)},
    )
    @extend_schema(
        methods=['POST'],
        request=ParticipantInputSerializer,
        responses={201: ParticipantSerializer},
    )
    @action(detail=True, methods=['get', 'post'])
    def participants(self, request, pk=None):
        """List the roster or add a participant."""
        plan = self.get_object()

        if request.method == 'GET':
            return Response(ParticipantSerializer(plan.participants.all(), many=True).data)

        serializer = ParticipantInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('has_collected', None)

        try:
            participant = add_participant(plan_id=plan.id, user=request.user, **data)
        except PlansServiceError as e:
            return error_response(e)

        return Response(ParticipantSerializer(participant).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: RoleTableEntrySerializer(many=True)})
    @action(detail=True, methods=['get'])
    def roles(self, request, pk=None):
        """Standard roles with this plan's names and multipliers."""
        plan = self.get_object()
        return Response(RoleTableEntrySerializer(get_role_table(plan), many=True).data)

    @extend_schema(request=RoleUpdateSerializer, responses={200: RoleTableEntrySerializer(many=True)})
    @action(detail=True, methods=['post'])
    def update_role(self, request, pk=None):
        """Override a standard role's multiplier or name."""
        plan = self.get_object()
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            if 'multiplier' in data:
                plan = set_role_multiplier(
                    plan_id=plan.id,
                    user=request.user,
                    role=data['role'],
                    multiplier=data['multiplier']
                )
            if 'name' in data:
                plan = set_role_name(
                    plan_id=plan.id,
                    user=request.user,
                    role=data['role'],
                    name=data['name']
                )
        except PlansServiceError as e:
            return error_response(e)

        return Response(RoleTableEntrySerializer(get_role_table(plan), many=True).data)

    @extend_schema(
        methods=['GET'],
        responses={200: CustomRoleSerializer(many=True)},
    )
    @extend_schema(
        methods=['POST'],
        request=CustomRoleInputSerializer,
        responses={201: CustomRoleSerializer},
    )
    @action(detail=True, methods=['get', 'post'])
    def custom_roles(self, request, pk=None):
        """List or add custom roles."""
        plan = self.get_object()

        if request.method == 'GET':
            return Response(CustomRoleSerializer(plan.custom_roles.all(), many=True).data)

        serializer = CustomRoleInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            custom_role = add_custom_role(plan_id=plan.id, user=request.user, **serializer.validated_data)
        except PlansServiceError as e:
            return error_response(e)

        return Response(CustomRoleSerializer(custom_role).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        methods=['GET'],
        responses={200: AmountItemSerializer(many=True)},
    )
    @extend_schema(
        methods=['POST'],
        request=AmountItemInputSerializer,
        responses={201: AmountItemSerializer},
    )
    @action(detail=True, methods=['get', 'post'])
    def amount_items(self, request, pk=None):
        """List or add amount items."""
        plan = self.get_object()

        if request.method == 'GET':
            items = plan.amount_items.prefetch_related('participants')
            return Response(AmountItemSerializer(items, many=True).data)

        serializer = AmountItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('applies_to_all', None)

        try:
            item = add_amount_item(plan_id=plan.id, user=request.user, **data)
        except PlansServiceError as e:
            return error_response(e)

        return Response(AmountItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=AmountItemOrderSerializer, responses={200: AmountItemSerializer(many=True)})
    @action(detail=True, methods=['post'])
    def reorder_amount_items(self, request, pk=None):
        """Set the display order of the amount items."""
        plan = self.get_object()
        serializer = AmountItemOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            items = reorder_amount_items(
                plan_id=plan.id,
                user=request.user,
                item_ids=serializer.validated_data['item_ids']
            )
        except PlansServiceError as e:
            return error_response(e)

        return Response(AmountItemSerializer(items, many=True).data)

    @extend_schema(request=ConfirmPlanSerializer, responses={200: PlanSerializer})
    @action(detail=True, methods=['post'])
    def confirm(self, request, pk=None):
        """Fix the date and rebuild the roster from attending respondents."""
        plan = self.get_object()
        serializer = ConfirmPlanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            confirm_plan(plan_id=plan.id, user=request.user, **serializer.validated_data)
        except PlansServiceError as e:
            return error_response(e)

        return self._detail(plan.id)

    @extend_schema(request=SyncResponsesSerializer, responses={200: ParticipantSerializer(many=True)})
    @action(detail=True, methods=['post'])
    def sync_responses(self, request, pk=None):
        """Replace the roster with the schedule responses."""
        plan = self.get_object()
        serializer = SyncResponsesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            sync_participants_from_responses(
                plan_id=plan.id,
                user=request.user,
                confirmed_date=serializer.validated_data.get('confirmed_date')
            )
        except PlansServiceError as e:
            return error_response(e)

        return Response(ParticipantSerializer(plan.participants.all(), many=True).data)

    @extend_schema(request=None, responses={200: ParticipantSerializer(many=True)})
    @action(detail=True, methods=['post'])
    def merge_responses(self, request, pk=None):
        """Append respondents who are not on the roster yet."""
        plan = self.get_object()

        try:
            added = merge_participants_from_responses(plan_id=plan.id, user=request.user)
        except PlansServiceError as e:
            return error_response(e)

        return Response({
            'added_count': added,
            'participants': ParticipantSerializer(plan.participants.all(), many=True).data,
        })

    @extend_schema(request=PaymentTextRequestSerializer, responses={200: ShareTextSerializer})
    @action(detail=True, methods=['post'])
    def payment_text(self, request, pk=None):
        """Payment request text using the organizer's saved destinations."""
        plan = self.get_object()
        serializer = PaymentTextRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        message = data.get('message')
        if message is None and 'tone' in data:
            message = PAYMENT_TONE_TEMPLATES[data['tone']]

        text = generate_payment_text(
            plan=plan,
            payment_methods=data['payment_methods'],
            message=message,
            due_text=data.get('due_text'),
        )
        return Response({'text': text})

    @extend_schema(request=InvitationTextRequestSerializer, responses={200: ShareTextSerializer})
    @action(detail=True, methods=['post'])
    def invitation_text(self, request, pk=None):
        """Invitation text for the confirmed plan."""
        plan = self.get_object()
        serializer = InvitationTextRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        text = generate_invitation_text(plan=plan, **serializer.validated_data)
        return Response({'text': text})


@extend_schema(
    methods=['PATCH'],
    request=ParticipantInputSerializer,
    responses={200: ParticipantSerializer},
    tags=['plans'],
)
@extend_schema(methods=['DELETE'], responses={204: None}, tags=['plans'])
@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def participant_detail(request, pk):
    """Edit or remove a participant."""
    if request.method == 'DELETE':
        try:
            delete_participant(participant_id=pk, user=request.user)
        except PlansServiceError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = ParticipantInputSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    try:
        participant = update_participant(participant_id=pk, user=request.user, **serializer.validated_data)
    except PlansServiceError as e:
        return error_response(e)

    return Response(ParticipantSerializer(participant).data)


@extend_schema(request=CollectedStatusSerializer, responses={200: ParticipantSerializer}, tags=['plans'])
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def participant_toggle_collected(request, pk):
    """Set a participant's paid flag, or flip it when no value is sent."""
    serializer = CollectedStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        has_collected = serializer.validated_data.get('has_collected')
        if has_collected is not None:
            participant = set_collection_status(
                participant_id=pk,
                user=request.user,
                has_collected=has_collected
            )
        else:
            participant = toggle_collection_status(participant_id=pk, user=request.user)
    except PlansServiceError as e:
        return error_response(e)

    return Response(ParticipantSerializer(participant).data)


@extend_schema(
    methods=['PATCH'],
    request=AmountItemInputSerializer,
    responses={200: AmountItemSerializer},
    tags=['plans'],
)
@extend_schema(methods=['DELETE'], responses={204: None}, tags=['plans'])
@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def amount_item_detail(request, pk):
    """Edit or remove an amount item."""
    if request.method == 'DELETE':
        try:
            delete_amount_item(item_id=pk, user=request.user)
        except PlansServiceError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = AmountItemInputSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    try:
        item = update_amount_item(item_id=pk, user=request.user, **serializer.validated_data)
    except PlansServiceError as e:
        return error_response(e)

    return Response(AmountItemSerializer(item).data)


@extend_schema(responses={204: None}, tags=['plans'])
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def custom_role_detail(request, pk):
    """Remove a custom role from the plan's catalogue."""
    try:
        delete_custom_role(custom_role_id=pk, user=request.user)
    except PlansServiceError as e:
        return error_response(e)

    return Response(status=status.HTTP_204_NO_CONTENT)
