from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count
from .models import User
from .services import format_bank_info, get_payment_settings


@admin.register(User)
class OrganizerAdmin(BaseUserAdmin):
    """Organizers with their plan/event counts and payment setup."""

    list_display = [
        'email',
        'display_name',
        'plan_count',
        'event_count',
        'payment_ready',
        'is_active',
        'created_at',
    ]
    list_filter = ['is_active', 'is_staff', 'created_at']
    search_fields = ['email', 'display_name']
    ordering = ['-created_at']

    fieldsets = (
        ('Organizer', {
            'fields': ('email', 'display_name', 'password')
        }),
        ('Payment destinations', {
            'fields': ('paypay_id', 'bank_info', 'preferences'),
        }),
        ('Access', {
            'fields': ('is_active', 'is_staff', 'is_superuser'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('New organizer', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['paypay_id', 'bank_info', 'created_at', 'last_login']
    filter_horizontal = []
    actions = ['deactivate_organizers']

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            _plan_count=Count('plans', distinct=True),
            _event_count=Count('schedule_events', distinct=True),
        )

    @admin.display(description='Plans', ordering='_plan_count')
    def plan_count(self, obj):
        return obj._plan_count

    @admin.display(description='Events', ordering='_event_count')
    def event_count(self, obj):
        return obj._event_count

    @admin.display(description='PayPay ID')
    def paypay_id(self, obj):
        return get_payment_settings(obj)['paypay_id'] or '-'

    @admin.display(description='Bank transfer')
    def bank_info(self, obj):
        return format_bank_info(get_payment_settings(obj)) or '-'

    @admin.display(description='Payment set up', boolean=True)
    def payment_ready(self, obj):
        settings_ = get_payment_settings(obj)
        return bool(settings_['paypay_id'] or format_bank_info(settings_))

    @admin.action(description='Deactivate selected organizers')
    def deactivate_organizers(self, request, queryset):
        count = User.objects.filter(
            pk__in=queryset.values('pk'),
            is_superuser=False
        ).update(is_active=False)
        self.message_user(request, f'Deactivated {count} organizer(s).')
