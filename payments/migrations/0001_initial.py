from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PaymentMethod',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Display name shown at checkout and in the admin', max_length=255)),
                ('type', models.CharField(db_index=True, help_text="Payment method variant (e.g. 'bogus_credit_card', 'check')", max_length=100)),
                ('description', models.TextField(blank=True, default='')),
                ('active', models.BooleanField(default=True, help_text='Whether this payment method can be used at all')),
                ('available_to_users', models.BooleanField(default=True, help_text='Offer this payment method on the storefront')),
                ('available_to_admin', models.BooleanField(default=True, help_text='Offer this payment method in the admin')),
                ('position', models.IntegerField(blank=True, db_index=True, help_text='Sort order; new payment methods go to the bottom', null=True)),
                ('auto_capture', models.BooleanField(blank=True, help_text='Capture on authorization. Empty uses the PAYMENT_AUTO_CAPTURE setting', null=True)),
                ('preferences', models.JSONField(blank=True, default=dict, help_text='Gateway configuration for this payment method')),
                ('deleted_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Payment Method',
                'verbose_name_plural': 'Payment Methods',
                'ordering': ['position'],
            },
        ),
        migrations.CreateModel(
            name='CreditCard',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, default='', max_length=255)),
                ('cc_type', models.CharField(blank=True, choices=[('visa', 'Visa'), ('master', 'Mastercard'), ('american_express', 'American Express'), ('discover', 'Discover'), ('diners_club', 'Diners Club'), ('jcb', 'JCB'), ('maestro', 'Maestro'), ('rupay', 'RuPay')], default='', max_length=50)),
                ('last_digits', models.CharField(blank=True, default='', max_length=4)),
                ('month', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('year', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('gateway_customer_profile_id', models.CharField(blank=True, default='', max_length=255)),
                ('gateway_payment_profile_id', models.CharField(blank=True, default='', max_length=255)),
                ('default', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('payment_method', models.ForeignKey(blank=True, help_text='Payment method this card was stored with', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='credit_cards', to='payments.paymentmethod')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='credit_cards', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Credit Card',
                'verbose_name_plural': 'Credit Cards',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_number', models.CharField(blank=True, default='', max_length=64)),
                ('amount_cents', models.IntegerField(help_text='Amount in the smallest currency unit')),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('state', models.CharField(choices=[('checkout', 'Checkout'), ('pending', 'Pending'), ('completed', 'Completed'), ('failed', 'Failed'), ('void', 'Void'), ('refunded', 'Refunded')], default='checkout', max_length=20)),
                ('response_code', models.CharField(blank=True, default='', max_length=255)),
                ('message', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('payment_method', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='payments.paymentmethod')),
                ('source', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='payments', to='payments.creditcard')),
            ],
            options={
                'verbose_name': 'Payment',
                'verbose_name_plural': 'Payments',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='paymentmethod',
            index=models.Index(fields=['type', 'active'], name='payment_method_type_active_idx'),
        ),
        migrations.AddIndex(
            model_name='payment',
            index=models.Index(fields=['payment_method', 'state'], name='payment_method_state_idx'),
        ),
    ]
