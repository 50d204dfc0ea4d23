from rest_framework import serializers
from .models import AttendanceStatus, ScheduleEvent, ScheduleResponse
from .services import optimal_date, get_active_responses


class ScheduleResponseSerializer(serializers.ModelSerializer):
    """Serializer for responses as the organizer sees them."""

    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = ScheduleResponse
        fields = [
            'id',
            'participant_name',
            'available_dates',
            'maybe_dates',
            'status',
            'status_display',
            'comment',
            'department',
            'response_date',
        ]
        read_only_fields = fields


class ScheduleResponseSubmitSerializer(serializers.Serializer):
    """Input serializer for the public web form."""

    participant_name = serializers.CharField(max_length=100, trim_whitespace=True)
    available_dates = serializers.ListField(
        child=serializers.CharField(),
        required=False,
        default=list
    )
    maybe_dates = serializers.ListField(
        child=serializers.CharField(),
        required=False,
        default=list
    )
    status = serializers.ChoiceField(
        choices=AttendanceStatus.choices,
        default=AttendanceStatus.UNDECIDED
    )
    comment = serializers.CharField(required=False, allow_blank=True, default='')
    department = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class ScheduleEventInputSerializer(serializers.Serializer):
    """Input serializer for creating and updating events."""

    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    candidate_dates = serializers.ListField(
        child=serializers.DateTimeField(),
        allow_empty=False
    )
    location = serializers.CharField(max_length=200, required=False, allow_blank=True)
    budget = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    deadline = serializers.DateTimeField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title cannot be blank")
        return value


class ScheduleEventSerializer(serializers.ModelSerializer):
    """Main serializer for events."""

    web_url = serializers.CharField(read_only=True)
    is_closed = serializers.BooleanField(read_only=True)
    response_count = serializers.SerializerMethodField()
    optimal_date = serializers.SerializerMethodField()

    class Meta:
        model = ScheduleEvent
        fields = [
            'id',
            'title',
            'description',
            'candidate_dates',
            'location',
            'budget',
            'deadline',
            'is_active',
            'is_closed',
            'web_url',
            'response_count',
            'optimal_date',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_response_count(self, obj):
        return get_active_responses(event=obj).count()

    def get_optimal_date(self, obj):
        return optimal_date(obj.candidate_dates, get_active_responses(event=obj))


class PublicScheduleEventSerializer(serializers.ModelSerializer):
    """What the public web form shows: the event and the answers so far."""

    is_closed = serializers.BooleanField(read_only=True)
    responses = serializers.SerializerMethodField()

    class Meta:
        model = ScheduleEvent
        fields = [
            'id',
            'title',
            'description',
            'candidate_dates',
            'location',
            'budget',
            'deadline',
            'is_closed',
            'responses',
        ]
        read_only_fields = fields

    def get_responses(self, obj):
        return ScheduleResponseSerializer(get_active_responses(event=obj), many=True).data


class DateStatisticSerializer(serializers.Serializer):
    date = serializers.CharField()
    available_count = serializers.IntegerField()
    maybe_count = serializers.IntegerField()


class EventStatisticsSerializer(serializers.Serializer):
    """Output serializer for event statistics."""

    total_responses = serializers.IntegerField()
    attending_count = serializers.IntegerField()
    maybe_count = serializers.IntegerField()
    not_attending_count = serializers.IntegerField()
    undecided_count = serializers.IntegerField()
    optimal_date = serializers.CharField(allow_null=True)
    dates = DateStatisticSerializer(many=True)
