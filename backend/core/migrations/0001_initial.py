import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AdminAlert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('alert_type', models.CharField(choices=[('signup', 'Signup'), ('book_demand', 'Book Demand'), ('order', 'Order'), ('new_listing', 'New Listing'), ('book_sold', 'Book Sold')], max_length=30, verbose_name='Type')),
                ('title', models.CharField(max_length=255, verbose_name='Title')),
                ('message', models.TextField(verbose_name='Message')),
                ('reference_id', models.CharField(blank=True, max_length=64, null=True, verbose_name='Reference ID')),
                ('is_read', models.BooleanField(default=False, verbose_name='Read')),
                ('email_sent', models.BooleanField(default=False, verbose_name='Email Sent')),
            ],
            options={
                'verbose_name': 'Admin Alert',
                'verbose_name_plural': 'Admin Alerts',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='BroadcastLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('title', models.CharField(max_length=255, verbose_name='Title')),
                ('message', models.TextField(verbose_name='Message')),
                ('target_kind', models.CharField(choices=[('all', 'All Users'), ('institution', 'Institution'), ('department', 'Department'), ('shop', 'Shop Owner'), ('user', 'Single User')], max_length=20, verbose_name='Target')),
                ('target_institution_id', models.PositiveIntegerField(blank=True, null=True)),
                ('target_department_id', models.PositiveIntegerField(blank=True, null=True)),
                ('target_shop_id', models.PositiveIntegerField(blank=True, null=True)),
                ('target_user_id', models.PositiveIntegerField(blank=True, null=True)),
                ('sent_count', models.PositiveIntegerField(default=0, verbose_name='Sent Count')),
                ('sent_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='broadcasts_sent', to=settings.AUTH_USER_MODEL, verbose_name='Sent By')),
            ],
            options={
                'verbose_name': 'Broadcast Log',
                'verbose_name_plural': 'Broadcast Logs',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255, verbose_name='Title')),
                ('message', models.TextField(verbose_name='Message')),
                ('notification_type', models.CharField(choices=[('info', 'Info'), ('order_update', 'Order Update'), ('demand_update', 'Demand Update'), ('payment_update', 'Payment Update'), ('broadcast', 'Broadcast')], default='info', max_length=30, verbose_name='Type')),
                ('reference_type', models.CharField(blank=True, choices=[('order', 'Order'), ('shop_order', 'Shop Order'), ('demand', 'Book Demand'), ('payment', 'Unlock Payment')], max_length=30, null=True, verbose_name='Reference Type')),
                ('reference_id', models.CharField(blank=True, max_length=64, null=True, verbose_name='Reference ID')),
                ('is_read', models.BooleanField(default=False, verbose_name='Read')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('profile', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='notifications', to='accounts.profile', verbose_name='Recipient Profile')),
                ('recipient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL, verbose_name='Recipient')),
            ],
            options={
                'verbose_name': 'Notification',
                'verbose_name_plural': 'Notifications',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['recipient', 'is_read'], name='core_notif_recip_read_idx'), models.Index(fields=['recipient', '-created_at'], name='core_notif_recip_created_idx')],
            },
        ),
    ]
