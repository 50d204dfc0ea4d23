from django.contrib import admin
from .models import ScheduleEvent, ScheduleResponse


class ScheduleResponseInline(admin.TabularInline):
    model = ScheduleResponse
    extra = 0
    fields = ['participant_name', 'status', 'available_dates', 'maybe_dates', 'department', 'response_date']
    readonly_fields = ['response_date']


@admin.register(ScheduleEvent)
class ScheduleEventAdmin(admin.ModelAdmin):
    list_display = ['title', 'created_by', 'is_active', 'deadline', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['title', 'location', 'created_by__email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [ScheduleResponseInline]

    fieldsets = (
        ('Event', {
            'fields': ('id', 'title', 'description', 'created_by')
        }),
        ('Dates', {
            'fields': ('candidate_dates', 'deadline', 'is_active')
        }),
        ('Details', {
            'fields': ('location', 'budget'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )


@admin.register(ScheduleResponse)
class ScheduleResponseAdmin(admin.ModelAdmin):
    list_display = ['participant_name', 'event', 'status', 'response_date']
    list_filter = ['status']
    search_fields = ['participant_name', 'event__title']
    raw_id_fields = ['event']
