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
            name='Shop',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('name', models.CharField(max_length=255, verbose_name='Shop Name')),
                ('description', models.TextField(blank=True, default='', verbose_name='Description')),
                ('phone_number', models.CharField(max_length=15, verbose_name='Phone Number')),
                ('whatsapp_number', models.CharField(blank=True, default='', max_length=15, verbose_name='WhatsApp Number')),
                ('address', models.TextField(blank=True, default='', verbose_name='Address')),
                ('is_verified', models.BooleanField(default=False, verbose_name='Verified')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shops', to=settings.AUTH_USER_MODEL, verbose_name='Owner')),
            ],
            options={
                'verbose_name': 'Shop',
                'verbose_name_plural': 'Shops',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ShopBook',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('title', models.CharField(max_length=255, verbose_name='Title')),
                ('author', models.CharField(max_length=255, verbose_name='Author')),
                ('price', models.PositiveIntegerField(verbose_name='Price (BDT)')),
                ('stock', models.PositiveIntegerField(default=1, verbose_name='Stock')),
                ('is_available', models.BooleanField(default=True, verbose_name='Available')),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='books', to='shops.shop', verbose_name='Shop')),
            ],
            options={
                'verbose_name': 'Shop Book',
                'verbose_name_plural': 'Shop Books',
                'ordering': ['title'],
            },
        ),
        migrations.CreateModel(
            name='ShopOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('order_number', models.CharField(max_length=40, unique=True, verbose_name='Order Number')),
                ('quantity', models.PositiveIntegerField(default=1, verbose_name='Quantity')),
                ('total_price', models.PositiveIntegerField(verbose_name='Total Price (BDT)')),
                ('detail_address', models.TextField(blank=True, default='', verbose_name='Delivery Address')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('processing', 'Processing'), ('out_for_delivery', 'Out for Delivery'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')], db_index=True, default='pending', max_length=20, verbose_name='Status')),
                ('customer_notes', models.TextField(blank=True, default='', verbose_name='Customer Notes')),
                ('shop_notes', models.TextField(blank=True, default='', verbose_name='Shop Notes')),
                ('admin_notes', models.TextField(blank=True, null=True, verbose_name='Admin Notes')),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='shops.shop', verbose_name='Shop')),
                ('shop_book', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='shops.shopbook', verbose_name='Book')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shop_orders', to=settings.AUTH_USER_MODEL, verbose_name='Customer')),
            ],
            options={
                'verbose_name': 'Shop Order',
                'verbose_name_plural': 'Shop Orders',
                'ordering': ['-created_at'],
            },
        ),
    ]
