from django.contrib import admin
from django.utils.html import format_html

from .models import WorkPlan, WorkOrder, WorkOrderModuleChoice


class WorkOrderInline(admin.TabularInline):
    model = WorkOrder
    extra = 0
    fields = ('order_index', 'process', 'status', 'set_uuid', 'finished_set_uuid', 'dispatch_date')
    readonly_fields = fields
    show_change_link = True
    can_delete = False


class WorkOrderModuleChoiceInline(admin.TabularInline):
    model = WorkOrderModuleChoice
    extra = 0
    fields = ('position', 'process_module')
    readonly_fields = fields


@admin.register(WorkPlan)
class WorkPlanAdmin(admin.ModelAdmin):
    list_display = ('id', 'owner_email', 'project_id', 'product', 'status_badge', 'desired_date', 'created_at')
    search_fields = ('owner_email', 'original_set_uuid', 'comment')
    list_filter = ('product',)
    readonly_fields = ('uuid', 'created_at', 'updated_at')
    inlines = [WorkOrderInline]

    def status_badge(self, obj):
        colors = {
            'in_construction': 'gray',
            'active': 'orange',
            'closed': 'green',
            'cancelled': 'red',
        }
        status = obj.status
        return format_html('<span style="color: {};">{}</span>', colors.get(status, 'black'), status)
    status_badge.short_description = 'Status'


@admin.register(WorkOrder)
class WorkOrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'work_plan', 'process', 'order_index', 'status', 'total_cost', 'dispatch_date')
    list_filter = ('status', 'process')
    search_fields = ('work_order_uuid', 'set_uuid', 'finished_set_uuid')
    readonly_fields = ('work_order_uuid', 'created_at', 'updated_at')
    inlines = [WorkOrderModuleChoiceInline]
