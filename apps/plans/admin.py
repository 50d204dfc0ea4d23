from django.contrib import admin
from .models import AmountItem, CustomRole, Participant, Plan


class ParticipantInline(admin.TabularInline):
    model = Participant
    extra = 0
    fields = [
        'name',
        'position',
        'role_type',
        'role',
        'custom_role_name',
        'custom_multiplier',
        'has_fixed_amount',
        'fixed_amount',
        'has_collected',
        'source',
    ]


class CustomRoleInline(admin.TabularInline):
    model = CustomRole
    extra = 0


class AmountItemInline(admin.TabularInline):
    model = AmountItem
    extra = 0
    fields = ['name', 'amount', 'applies_to_all', 'use_multiplier', 'position']


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = ['name', 'emoji', 'owner', 'date', 'total_amount', 'confirmed_date', 'created_at']
    list_filter = ['date', 'created_at']
    search_fields = ['name', 'location', 'owner__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['owner', 'schedule_event']
    inlines = [ParticipantInline, CustomRoleInline, AmountItemInline]

    fieldsets = (
        ('Plan', {
            'fields': ('id', 'name', 'emoji', 'owner', 'date', 'description', 'location')
        }),
        ('Bill', {
            'fields': ('total_amount', 'role_multipliers', 'role_names'),
        }),
        ('Schedule', {
            'fields': ('schedule_event', 'confirmed_date', 'confirmed_location'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ['name', 'plan', 'role_type', 'role', 'has_fixed_amount', 'has_collected', 'source']
    list_filter = ['role_type', 'role', 'has_collected', 'source']
    search_fields = ['name', 'plan__name']
    raw_id_fields = ['plan']
