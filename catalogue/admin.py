from django.contrib import admin
from django.utils.html import format_html

from .models import Product, Process, ProductProcess, ProcessModule, ProcessModulePairing


class ProductProcessInline(admin.TabularInline):
    model = ProductProcess
    extra = 0
    fields = ('stage', 'process')
    ordering = ('stage',)


class ProcessModuleInline(admin.TabularInline):
    model = ProcessModule
    extra = 0
    fields = ('name',)
    show_change_link = True


class ProcessModulePairingInline(admin.TabularInline):
    model = ProcessModulePairing
    extra = 0
    fields = ('from_step', 'to_step', 'default_path')
    fk_name = 'process'


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'availability', 'process_count', 'created_at')
    list_filter = ('availability',)
    search_fields = ('name', 'description')
    readonly_fields = ('product_uuid', 'created_at', 'updated_at')
    inlines = [ProductProcessInline]

    def process_count(self, obj):
        count = obj.product_processes.count()
        if count > 0:
            return format_html('<span style="color: green;">{}</span>', count)
        return format_html('<span style="color: gray;">0</span>')
    process_count.short_description = 'Processes'


@admin.register(Process)
class ProcessAdmin(admin.ModelAdmin):
    list_display = ('name', 'TAT', 'created_at')
    search_fields = ('name',)
    readonly_fields = ('process_uuid', 'created_at', 'updated_at')
    inlines = [ProcessModuleInline, ProcessModulePairingInline]


@admin.register(ProcessModule)
class ProcessModuleAdmin(admin.ModelAdmin):
    list_display = ('name', 'process', 'created_at')
    list_filter = ('process',)
    search_fields = ('name', 'process__name')
