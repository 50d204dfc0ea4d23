from rest_framework import serializers
from .models import AmountItem, CustomRole, Participant, Plan, Role
from .services import (
    get_roster_counts,
    parse_amount,
    PaymentMethod,
    PaymentTone,
)

# PositiveIntegerField upper bound on every supported database.
MAX_AMOUNT = 2147483647


class CustomRoleSerializer(serializers.ModelSerializer):
    """Serializer for a plan's custom roles."""

    class Meta:
        model = CustomRole
        fields = ['id', 'name', 'multiplier', 'created_at']
        read_only_fields = ['id', 'created_at']


class ParticipantSerializer(serializers.ModelSerializer):
    """Output serializer for roster entries."""

    role_name = serializers.CharField(source='role_display_name', read_only=True)
    effective_multiplier = serializers.DecimalField(max_digits=6, decimal_places=2, read_only=True)
    source_display = serializers.CharField(source='get_source_display', read_only=True)

    class Meta:
        model = Participant
        fields = [
            'id',
            'name',
            'position',
            'role_type',
            'role',
            'role_name',
            'custom_role_name',
            'custom_multiplier',
            'effective_multiplier',
            'has_collected',
            'has_fixed_amount',
            'fixed_amount',
            'source',
            'source_display',
        ]
        read_only_fields = fields


class ParticipantInputSerializer(serializers.Serializer):
    """Input serializer for adding and editing participants."""

    name = serializers.CharField(max_length=100)
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    custom_role_id = serializers.UUIDField(required=False, allow_null=True)
    has_collected = serializers.BooleanField(required=False)
    has_fixed_amount = serializers.BooleanField(required=False)
    fixed_amount = serializers.IntegerField(min_value=0, max_value=MAX_AMOUNT, required=False)


class AmountItemSerializer(serializers.ModelSerializer):
    """Output serializer for amount items."""

    participant_ids = serializers.PrimaryKeyRelatedField(
        source='participants',
        many=True,
        read_only=True
    )

    class Meta:
        model = AmountItem
        fields = [
            'id',
            'name',
            'amount',
            'applies_to_all',
            'participant_ids',
            'use_multiplier',
            'position',
        ]
        read_only_fields = fields


class AmountItemInputSerializer(serializers.Serializer):
    """Input serializer for amount items. Omit participant_ids to include everyone."""

    name = serializers.CharField(max_length=100)
    amount = serializers.IntegerField(min_value=0, max_value=MAX_AMOUNT)
    participant_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        allow_null=True
    )
    use_multiplier = serializers.BooleanField(required=False, default=True)
    applies_to_all = serializers.BooleanField(required=False)


class AmountItemOrderSerializer(serializers.Serializer):
    item_ids = serializers.ListField(child=serializers.UUIDField())


class CollectedStatusSerializer(serializers.Serializer):
    """Omit has_collected to flip the current value."""

    has_collected = serializers.BooleanField(required=False, allow_null=True)


class PlanListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    participant_count = serializers.SerializerMethodField()

    class Meta:
        model = Plan
        fields = [
            'id',
            'name',
            'emoji',
            'date',
            'location',
            'total_amount',
            'confirmed_date',
            'participant_count',
            'created_at',
        ]
        read_only_fields = fields

    def get_participant_count(self, obj):
        return obj.participants.count()


class PlanSerializer(serializers.ModelSerializer):
    """Main serializer for plans, with roster, roles and items."""

    total_amount_value = serializers.SerializerMethodField()
    schedule_web_url = serializers.SerializerMethodField()
    roster_counts = serializers.SerializerMethodField()
    participants = ParticipantSerializer(many=True, read_only=True)
    custom_roles = CustomRoleSerializer(many=True, read_only=True)
    amount_items = AmountItemSerializer(many=True, read_only=True)

    class Meta:
        model = Plan
        fields = [
            'id',
            'name',
            'emoji',
            'date',
            'description',
            'location',
            'total_amount',
            'total_amount_value',
            'role_multipliers',
            'role_names',
            'schedule_event',
            'schedule_web_url',
            'confirmed_date',
            'confirmed_location',
            'participants',
            'roster_counts',
            'custom_roles',
            'amount_items',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_total_amount_value(self, obj):
        return parse_amount(obj.total_amount)

    def get_schedule_web_url(self, obj):
        if obj.schedule_event is None:
            return None
        return obj.schedule_event.web_url

    def get_roster_counts(self, obj):
        return get_roster_counts(plan=obj)


class PlanInputSerializer(serializers.Serializer):
    """Input serializer for creating and updating plans."""

    name = serializers.CharField(max_length=200)
    date = serializers.DateTimeField(required=False)
    emoji = serializers.CharField(max_length=32, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    location = serializers.CharField(max_length=200, required=False, allow_blank=True)
    total_amount = serializers.CharField(max_length=50, required=False, allow_blank=True)
    schedule_event_id = serializers.UUIDField(required=False, allow_null=True)


class QuickCreatePlanSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    emoji = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')


class RoleTableEntrySerializer(serializers.Serializer):
    role = serializers.CharField()
    name = serializers.CharField()
    multiplier = serializers.DecimalField(max_digits=6, decimal_places=2)


class RoleUpdateSerializer(serializers.Serializer):
    """Override a standard role's multiplier and/or display name."""

    role = serializers.ChoiceField(choices=Role.choices)
    multiplier = serializers.DecimalField(max_digits=4, decimal_places=2, min_value=0, required=False)
    name = serializers.CharField(max_length=50, required=False)

    def validate(self, attrs):
        if 'multiplier' not in attrs and 'name' not in attrs:
            raise serializers.ValidationError("Provide multiplier or name")
        return attrs


class CustomRoleInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50)
    multiplier = serializers.DecimalField(max_digits=4, decimal_places=2, min_value=0)


class ConfirmPlanSerializer(serializers.Serializer):
    confirmed_date = serializers.DateTimeField()
    confirmed_location = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')


class SyncResponsesSerializer(serializers.Serializer):
    """Optional date to filter by; the plan's confirmed date otherwise."""

    confirmed_date = serializers.DateTimeField(required=False, allow_null=True)


class PaymentTextRequestSerializer(serializers.Serializer):
    payment_methods = serializers.MultipleChoiceField(choices=PaymentMethod.choices)
    tone = serializers.ChoiceField(choices=PaymentTone.choices, required=False)
    message = serializers.CharField(required=False, allow_blank=True)
    due_text = serializers.CharField(required=False, allow_blank=True)


class InvitationTextRequestSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True)
    meeting_place = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    meeting_time = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class ShareTextSerializer(serializers.Serializer):
    text = serializers.CharField()


class MessageTemplatesSerializer(serializers.Serializer):
    payment_tones = serializers.DictField(child=serializers.CharField())
    invitation_messages = serializers.ListField(child=serializers.CharField())


class ParticipantShareSerializer(serializers.Serializer):
    participant = ParticipantSerializer()
    amount = serializers.IntegerField()


class ItemSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    amount = serializers.IntegerField()
    use_multiplier = serializers.BooleanField()
    participant_count = serializers.IntegerField()
    base_unit = serializers.IntegerField()


class SplitSummarySerializer(serializers.Serializer):
    """Output serializer for the bill split of a plan."""

    total_amount = serializers.IntegerField()
    base_unit = serializers.IntegerField()
    allocated_amount = serializers.IntegerField()
    remainder = serializers.IntegerField()
    collected_amount = serializers.IntegerField()
    outstanding_amount = serializers.IntegerField()
    collected_count = serializers.IntegerField()
    outstanding_count = serializers.IntegerField()
    participants = ParticipantShareSerializer(many=True)
    items = ItemSummarySerializer(many=True)
