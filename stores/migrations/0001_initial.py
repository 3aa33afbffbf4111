from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('payments', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Store',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Store display name', max_length=255)),
                ('code', models.SlugField(help_text='URL-friendly identifier for the store', max_length=255, unique=True)),
                ('url', models.CharField(blank=True, default='', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Store',
                'verbose_name_plural': 'Stores',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='StorePaymentMethod',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('payment_method', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='store_payment_methods', to='payments.paymentmethod')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='store_payment_methods', to='stores.store')),
            ],
            options={
                'verbose_name': 'Store Payment Method',
                'verbose_name_plural': 'Store Payment Methods',
                'unique_together': {('store', 'payment_method')},
            },
        ),
        migrations.AddField(
            model_name='store',
            name='payment_methods',
            field=models.ManyToManyField(blank=True, help_text='Payment methods this store accepts; empty means all', related_name='stores', through='stores.StorePaymentMethod', to='payments.paymentmethod'),
        ),
    ]
