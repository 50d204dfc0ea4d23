from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import models
import uuid


class Role(models.TextChoices):
    DIRECTOR = 'director', '部長'
    MANAGER = 'manager', '課長'
    STAFF = 'staff', '一般'
    NEWBIE = 'newbie', '新人'
    MALE = 'male', '男性'
    FEMALE = 'female', '女性'
    LATE = 'late', '遅刻'
    NON_DRINKER = 'non_drinker', '下戸'


DEFAULT_ROLE_MULTIPLIERS = {
    Role.DIRECTOR: Decimal('2.0'),
    Role.MANAGER: Decimal('1.5'),
    Role.STAFF: Decimal('1.0'),
    Role.NEWBIE: Decimal('0.5'),
    Role.MALE: Decimal('1.2'),
    Role.FEMALE: Decimal('0.8'),
    Role.LATE: Decimal('0.8'),
    Role.NON_DRINKER: Decimal('0.7'),
}


class RoleType(models.TextChoices):
    STANDARD = 'standard', 'Standard'
    CUSTOM = 'custom', 'Custom'


class ParticipantSource(models.TextChoices):
    MANUAL = 'manual', '手動追加'
    WEB_RESPONSE = 'web_response', 'Web回答'


def _to_decimal(value, default=Decimal('0')):
    try:
        result = Decimal(str(value))
    except (ArithmeticError, ValueError, TypeError):
        return default
    if not result.is_finite() or result < 0:
        return default
    return result


class Plan(models.Model):
    """A nomikai: its bill, role table and participant roster."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='plans')
    name = models.CharField(max_length=200)
    date = models.DateTimeField()
    emoji = models.CharField(max_length=32, blank=True)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=200, blank=True)

    # Free text as typed; only its digits count
    total_amount = models.CharField(max_length=50, blank=True)

    # Per-plan overrides keyed by Role value
    role_multipliers = models.JSONField(default=dict, blank=True)
    role_names = models.JSONField(default=dict, blank=True)

    schedule_event = models.ForeignKey(
        'schedules.ScheduleEvent',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='plans'
    )
    confirmed_date = models.DateTimeField(null=True, blank=True)
    confirmed_location = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'plans'
        indexes = [
            models.Index(fields=['owner', 'date'], name='plans_owner_date_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.emoji} {self.name}".strip()

    def get_role_multiplier(self, role) -> Decimal:
        """Multiplier for a standard role, plan override first."""
        default = DEFAULT_ROLE_MULTIPLIERS.get(role, Decimal('1.0'))
        override = (self.role_multipliers or {}).get(str(role))
        if override is None:
            return default
        return _to_decimal(override, default)

    def get_role_name(self, role) -> str:
        """Display name for a standard role, plan override first."""
        override = (self.role_names or {}).get(str(role))
        if override:
            return override
        try:
            return Role(role).label
        except ValueError:
            return str(role)


class CustomRole(models.Model):
    """Organizer-defined role with its own multiplier."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name='custom_roles')
    name = models.CharField(max_length=50)
    multiplier = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'plan_custom_roles'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.name} (x{self.multiplier})"


class Participant(models.Model):
    """Someone on a plan's roster."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name='participants')
    name = models.CharField(max_length=100)
    position = models.PositiveIntegerField(default=0)

    # Role: a standard role or a copied custom role
    role_type = models.CharField(max_length=10, choices=RoleType.choices, default=RoleType.STANDARD)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.STAFF)
    custom_role_name = models.CharField(max_length=50, blank=True)
    custom_multiplier = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )

    has_collected = models.BooleanField(default=False)
    has_fixed_amount = models.BooleanField(default=False)
    fixed_amount = models.PositiveIntegerField(default=0)

    source = models.CharField(
        max_length=20,
        choices=ParticipantSource.choices,
        default=ParticipantSource.MANUAL
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'plan_participants'
        indexes = [
            models.Index(fields=['plan', 'position'], name='plan_part_position_idx'),
        ]
        ordering = ['position', 'created_at']

    def __str__(self):
        return self.name

    @property
    def effective_multiplier(self) -> Decimal:
        if self.role_type == RoleType.CUSTOM:
            return _to_decimal(self.custom_multiplier)
        if self.plan_id:
            return self.plan.get_role_multiplier(self.role)
        return DEFAULT_ROLE_MULTIPLIERS.get(self.role, Decimal('1.0'))

    @property
    def role_display_name(self) -> str:
        if self.role_type == RoleType.CUSTOM:
            return self.custom_role_name
        if self.plan_id:
            return self.plan.get_role_name(self.role)
        return Role(self.role).label

    def assign_standard_role(self, role):
        self.role_type = RoleType.STANDARD
        self.role = role
        self.custom_role_name = ''
        self.custom_multiplier = None

    def assign_custom_role(self, custom_role: CustomRole):
        """Copy the custom role's name and multiplier onto this participant."""
        self.role_type = RoleType.CUSTOM
        self.custom_role_name = custom_role.name
        self.custom_multiplier = custom_role.multiplier


class AmountItem(models.Model):
    """One part of the bill, e.g. the first or second party."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name='amount_items')
    name = models.CharField(max_length=100)
    amount = models.PositiveIntegerField(default=0)

    # When False only the linked participants share the item
    applies_to_all = models.BooleanField(default=True)
    participants = models.ManyToManyField(Participant, blank=True, related_name='amount_items')

    use_multiplier = models.BooleanField(default=True)
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'plan_amount_items'
        ordering = ['position', 'created_at']

    def __str__(self):
        return f"{self.name}: {self.amount}"
