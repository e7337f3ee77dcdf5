import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Book',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('title', models.CharField(max_length=255, verbose_name='Title')),
                ('author', models.CharField(max_length=255, verbose_name='Author')),
                ('price', models.PositiveIntegerField(verbose_name='Price (BDT)')),
                ('condition', models.CharField(choices=[('new', 'New'), ('good', 'Good'), ('worn', 'Worn')], default='good', max_length=10, verbose_name='Condition')),
                ('status', models.CharField(choices=[('available', 'Available'), ('sold', 'Sold')], db_index=True, default='available', max_length=10, verbose_name='Status')),
                ('book_type', models.CharField(choices=[('academic', 'Academic'), ('non_academic', 'Non-Academic'), ('nilkhet', 'Nilkhet')], default='academic', max_length=20, verbose_name='Book Type')),
                ('is_admin_listing', models.BooleanField(default=False, help_text='Curated by an admin (orderable with cash on delivery).', verbose_name='Admin Listing')),
                ('seller', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='books', to=settings.AUTH_USER_MODEL, verbose_name='Seller')),
            ],
            options={
                'verbose_name': 'Book',
                'verbose_name_plural': 'Books',
                'ordering': ['-created_at'],
            },
        ),
    ]
