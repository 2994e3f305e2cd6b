from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('work_orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='WorkOrderEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('event_type', models.CharField(choices=[('submitted', 'Work Order Submitted'), ('completed', 'Work Order Completed'), ('cancelled', 'Work Order Cancelled')], max_length=20)),
                ('payload', models.JSONField(default=dict)),
                ('delivery_status', models.CharField(choices=[('pending', 'Pending'), ('sent', 'Sent'), ('failed', 'Failed')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('work_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='events', to='work_orders.workorder')),
            ],
            options={
                'verbose_name': 'Work Order Event',
                'verbose_name_plural': 'Work Order Events',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['event_type', 'delivery_status'], name='event_type_delivery_idx'),
                    models.Index(fields=['created_at'], name='event_created_idx'),
                ],
            },
        ),
    ]
