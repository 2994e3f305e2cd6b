from django.contrib import admin

from .models import WorkOrderEvent


@admin.register(WorkOrderEvent)
class WorkOrderEventAdmin(admin.ModelAdmin):
    list_display = ('event_type', 'work_order', 'delivery_status', 'created_at')
    list_filter = ('event_type', 'delivery_status', 'created_at')
    search_fields = ('work_order__work_order_uuid',)
    readonly_fields = ('payload', 'created_at')
    ordering = ('-created_at',)
