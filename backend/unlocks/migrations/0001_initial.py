import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('books', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='UnlockPayment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('transaction_number', models.CharField(help_text='Human-facing receipt id; not a uniqueness key for unlocks.', max_length=40, unique=True, verbose_name='Transaction Number')),
                ('amount', models.PositiveIntegerField(verbose_name='Amount (BDT)')),
                ('bkash_number', models.CharField(max_length=20, verbose_name='bKash Number')),
                ('status', models.CharField(choices=[('pending', 'Pending Verification'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=10, verbose_name='Status')),
                ('resolved_at', models.DateTimeField(blank=True, null=True, verbose_name='Resolved At')),
                ('admin_notes', models.TextField(blank=True, null=True, verbose_name='Admin Notes')),
                ('refund_requested', models.BooleanField(default=False, verbose_name='Refund Requested')),
                ('refund_requested_at', models.DateTimeField(blank=True, null=True, verbose_name='Refund Requested At')),
                ('refund_approved', models.BooleanField(blank=True, help_text='Null until an admin decides the refund request.', null=True, verbose_name='Refund Approved')),
                ('refund_approved_at', models.DateTimeField(blank=True, null=True, verbose_name='Refund Decided At')),
                ('refund_notes', models.TextField(blank=True, null=True, verbose_name='Refund Notes')),
                ('book', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='unlock_payments', to='books.book', verbose_name='Book')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='unlock_payments', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Unlock Payment',
                'verbose_name_plural': 'Unlock Payments',
                'ordering': ['-created_at'],
                'constraints': [models.UniqueConstraint(condition=models.Q(('status__in', ['pending', 'approved'])), fields=('user', 'book'), name='unique_active_unlock_per_user_book')],
            },
        ),
    ]
