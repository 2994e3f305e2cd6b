from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalogue', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='WorkPlan',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('owner_email', models.EmailField(max_length=254)),
                ('project_id', models.IntegerField(blank=True, help_text='Project in the project directory', null=True)),
                ('original_set_uuid', models.CharField(blank=True, max_length=64, null=True)),
                ('comment', models.TextField(blank=True, null=True)),
                ('desired_date', models.DateField(blank=True, null=True)),
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='work_plans', to='catalogue.product')),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='WorkOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_index', models.PositiveIntegerField()),
                ('status', models.CharField(choices=[('queued', 'Queued'), ('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='queued', max_length=20)),
                ('original_set_uuid', models.CharField(blank=True, max_length=64, null=True)),
                ('set_uuid', models.CharField(blank=True, help_text='Locked set handed to the process', max_length=64, null=True)),
                ('finished_set_uuid', models.CharField(blank=True, max_length=64, null=True)),
                ('dispatch_date', models.DateTimeField(blank=True, null=True)),
                ('completion_date', models.DateTimeField(blank=True, null=True)),
                ('comment', models.TextField(blank=True, null=True)),
                ('total_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('work_order_uuid', models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('process', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='work_orders', to='catalogue.process')),
                ('work_plan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='work_orders', to='work_orders.workplan')),
            ],
            options={
                'ordering': ['work_plan', 'order_index'],
                'unique_together': {('work_plan', 'order_index')},
                'indexes': [models.Index(fields=['status'], name='work_order_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='WorkOrderModuleChoice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField()),
                ('process_module', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='choices', to='catalogue.processmodule')),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='module_choices', to='work_orders.workorder')),
            ],
            options={
                'ordering': ['work_order', 'position'],
                'unique_together': {('work_order', 'position')},
            },
        ),
    ]
