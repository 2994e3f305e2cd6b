from django.core.exceptions import ValidationError
from rest_framework import serializers

from .models import Product, Process, ProcessModule


class ProcessModuleSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProcessModule
        fields = ['id', 'name']
        read_only_fields = fields


class ProcessSerializer(serializers.ModelSerializer):
    """Process with its modules and the ids on its default path"""
    process_modules = ProcessModuleSerializer(many=True, read_only=True)
    default_path = serializers.SerializerMethodField()

    class Meta:
        model = Process
        fields = ['id', 'name', 'process_uuid', 'TAT', 'process_modules', 'default_path']
        read_only_fields = fields

    def get_default_path(self, obj):
        try:
            return [module.id for module in obj.default_path()]
        except ValidationError:
            return []


class ProductListSerializer(serializers.ModelSerializer):
    availability_display = serializers.CharField(source='get_availability_display', read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'product_uuid', 'availability', 'availability_display']
        read_only_fields = fields


class ProductDetailSerializer(ProductListSerializer):
    processes = ProcessSerializer(many=True, read_only=True)

    class Meta(ProductListSerializer.Meta):
        fields = ProductListSerializer.Meta.fields + ['description', 'processes']
        read_only_fields = fields
