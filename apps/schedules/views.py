from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .models import ScheduleEvent
from .serializers import (
    ScheduleEventSerializer,
    ScheduleEventInputSerializer,
    ScheduleResponseSerializer,
    ScheduleResponseSubmitSerializer,
    PublicScheduleEventSerializer,
    EventStatisticsSerializer,
)
from .permissions import IsEventOrganizer

from apps.schedules.services import (
    create_event,
    update_event,
    delete_event,
    get_event,
    submit_response,
    delete_response,
    get_active_responses,
    event_statistics,
    date_statistics,
    optimal_date,
    # Exceptions
    EventNotFoundError,
    ResponseNotFoundError,
    EventClosedError,
    InvalidResponseDateError,
    InsufficientPermissionsError,
)


class ScheduleEventViewSet(viewsets.ModelViewSet):
    """
    ViewSet for schedule events.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Events created by the user
    create: Create an event with candidate dates
    retrieve: Event with response count and best date
    update / partial_update: Edit the event (organizer only)
    destroy: Delete the event and its responses (organizer only)
    """

    serializer_class = ScheduleEventSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        """Return only events created by the user."""
        return ScheduleEvent.objects.filter(
            created_by=self.request.user
        ).select_related('created_by')

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return ScheduleEventInputSerializer
        return ScheduleEventSerializer

    def get_permissions(self):
        if self.action in ['update', 'partial_update', 'destroy']:
            return [IsAuthenticated(), IsEventOrganizer()]
        return [IsAuthenticated()]

    @extend_schema(request=ScheduleEventInputSerializer, responses={201: ScheduleEventSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        event = create_event(created_by=request.user, **serializer.validated_data)

        return Response(ScheduleEventSerializer(event).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ScheduleEventInputSerializer, responses={200: ScheduleEventSerializer})
    def update(self, request, *args, **kwargs):
        event = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)

        try:
            event = update_event(event_id=event.id, user=request.user, **serializer.validated_data)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(ScheduleEventSerializer(event).data)

    def destroy(self, request, *args, **kwargs):
        event = self.get_object()
        try:
            delete_event(event_id=event.id, user=request.user)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: ScheduleResponseSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def responses(self, request, pk=None):
        """Responses of the event, deleted ones excluded."""
        event = self.get_object()
        serializer = ScheduleResponseSerializer(get_active_responses(event=event), many=True)
        return Response(serializer.data)

    @extend_schema(responses={200: EventStatisticsSerializer})
    @action(detail=True, methods=['get'])
    def statistics(self, request, pk=None):
        """Counts per status and per candidate date."""
        event = self.get_object()
        responses = list(get_active_responses(event=event))

        data = event_statistics(responses)
        data['optimal_date'] = optimal_date(event.candidate_dates, responses)
        data['dates'] = date_statistics(event.candidate_dates, responses)

        return Response(EventStatisticsSerializer(data).data)


@extend_schema(
    responses={204: None},
    description="Remove a response from the event (organizer only).",
    tags=['schedules'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def remove_response(request, pk):
    """Mark a response as deleted."""
    try:
        delete_response(response_id=pk, user=request.user)
    except ResponseNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    responses={200: PublicScheduleEventSerializer},
    description="Event details for the public response form.",
    tags=['schedules'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def public_event(request, pk):
    """Public view of an event."""
    try:
        event = get_event(event_id=pk)
    except EventNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(PublicScheduleEventSerializer(event).data)


@extend_schema(
    request=ScheduleResponseSubmitSerializer,
    responses={201: ScheduleResponseSerializer},
    description="Submit an attendance response from the public form.",
    tags=['schedules'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def public_respond(request, pk):
    """Submit a response without an account."""
    serializer = ScheduleResponseSubmitSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        response = submit_response(event_id=pk, **serializer.validated_data)
    except EventNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (EventClosedError, InvalidResponseDateError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(ScheduleResponseSerializer(response).data, status=status.HTTP_201_CREATED)
