from rest_framework import serializers

from .models import WorkOrder, WorkOrderModuleChoice, WorkPlan
from .plan_service import DispatchOrder, SelectProduct, SelectProject, SelectSet, UpdateOrderModules


# ============================================================================
# READ SERIALIZERS
# ============================================================================

class WorkOrderModuleChoiceSerializer(serializers.ModelSerializer):
    module_id = serializers.IntegerField(source='process_module.id', read_only=True)
    module_name = serializers.CharField(source='process_module.name', read_only=True)

    class Meta:
        model = WorkOrderModuleChoice
        fields = ['position', 'module_id', 'module_name']
        read_only_fields = fields


class WorkOrderSerializer(serializers.ModelSerializer):
    process_name = serializers.CharField(source='process.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    module_choices = WorkOrderModuleChoiceSerializer(many=True, read_only=True)

    class Meta:
        model = WorkOrder
        fields = [
            'id', 'work_order_uuid', 'work_plan', 'process', 'process_name', 'order_index',
            'status', 'status_display', 'original_set_uuid', 'set_uuid', 'finished_set_uuid',
            'dispatch_date', 'completion_date', 'comment', 'total_cost', 'module_choices',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class WorkPlanListSerializer(serializers.ModelSerializer):
    status = serializers.CharField(read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True, default=None)

    class Meta:
        model = WorkPlan
        fields = [
            'id', 'uuid', 'owner_email', 'project_id', 'product', 'product_name',
            'original_set_uuid', 'status', 'desired_date', 'created_at'
        ]
        read_only_fields = fields


class WorkPlanDetailSerializer(WorkPlanListSerializer):
    work_orders = serializers.SerializerMethodField()

    class Meta(WorkPlanListSerializer.Meta):
        fields = WorkPlanListSerializer.Meta.fields + ['comment', 'updated_at', 'work_orders']
        read_only_fields = fields

    def get_work_orders(self, obj):
        return WorkOrderSerializer(obj.ordered_orders().select_related('process'), many=True).data


class WorkPlanCreateSerializer(serializers.ModelSerializer):
    owner_email = serializers.EmailField(required=False)

    class Meta:
        model = WorkPlan
        fields = ['id', 'uuid', 'owner_email', 'comment', 'desired_date']
        read_only_fields = ['id', 'uuid']

    def validate(self, data):
        request = self.context.get('request')
        if not data.get('owner_email'):
            email = getattr(getattr(request, 'user', None), 'email', '')
            if not email:
                raise serializers.ValidationError({'owner_email': 'An owner email is required'})
            data['owner_email'] = email
        return data


# ============================================================================
# INPUT SERIALIZERS - one per plan operation
# ============================================================================

class SelectProjectSerializer(serializers.Serializer):
    project_id = serializers.IntegerField()

    def to_request(self):
        return SelectProject(**self.validated_data)


class SelectSetSerializer(serializers.Serializer):
    set_uuid = serializers.CharField(max_length=64)

    def to_request(self):
        return SelectSet(**self.validated_data)


class SelectProductSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(required=False, allow_null=True)
    product_options = serializers.ListField(
        child=serializers.ListField(child=serializers.IntegerField()),
        required=False,
        default=list
    )
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    desired_date = serializers.DateField(required=False, allow_null=True)

    def to_request(self):
        data = self.validated_data
        return SelectProduct(
            product_id=data.get('product_id'),
            product_options=data.get('product_options') or [],
            comment=data.get('comment'),
            desired_date=data.get('desired_date'),
        )


class UpdateOrderModulesSerializer(serializers.Serializer):
    work_order_id = serializers.IntegerField()
    module_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)

    def to_request(self):
        return UpdateOrderModules(**self.validated_data)


class DispatchOrderSerializer(serializers.Serializer):
    work_order_id = serializers.IntegerField()
    module_ids = serializers.ListField(child=serializers.IntegerField(), required=False, allow_empty=True)

    def to_request(self):
        return DispatchOrder(
            work_order_id=self.validated_data['work_order_id'],
            module_ids=self.validated_data.get('module_ids') or None,
        )
