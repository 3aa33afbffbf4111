"""
Test cases for payment models.

Tests for:
- PaymentMethod model (validation, preferences, soft delete, positions)
- PaymentMethod gateway dispatch and deprecated accessors
- CreditCard model (number handling, reuse)
- Payment model (amount formatting)
"""

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from payments.deprecation import PaymentMethodDeprecationWarning
from payments.gateways import BogusGateway, OfflineGateway, gateway_cache
from payments.models import PaymentMethod, CreditCard, Payment


class PaymentMethodModelTest(TestCase):
    """Test cases for PaymentMethod model"""

    def setUp(self):
        gateway_cache.clear()

    def test_payment_method_creation(self):
        """Test creating a payment method"""
        payment_method = PaymentMethod.objects.create(name='Check', type='check')

        self.assertEqual(payment_method.name, 'Check')
        self.assertTrue(payment_method.active)
        self.assertTrue(payment_method.available_to_users)
        self.assertTrue(payment_method.available_to_admin)
        self.assertIsNone(payment_method.deleted_at)
        self.assertEqual(str(payment_method), 'Check')

    def test_unknown_type_is_rejected(self):
        """Test saving with a type that has no variant"""
        with self.assertRaises(ValidationError) as cm:
            PaymentMethod.objects.create(name='Mystery', type='mystery')

        self.assertIn('type', cm.exception.message_dict)

    def test_name_is_required(self):
        with self.assertRaises(ValidationError) as cm:
            PaymentMethod.objects.create(name='', type='check')

        self.assertIn('name', cm.exception.message_dict)

    def test_defaults_are_stored_on_create(self):
        """Test declared preference defaults are written on creation"""
        payment_method = PaymentMethod.objects.create(name='Check', type='check')

        self.assertEqual(payment_method.preferences, {'server': 'test', 'test_mode': True})

    def test_preferences_are_coerced(self):
        payment_method = PaymentMethod.objects.create(
            name='Bogus',
            type='bogus_credit_card',
            preferences={'test_mode': 'false', 'login': 'merchant'}
        )
        payment_method.refresh_from_db()

        self.assertIs(payment_method.get_preference('test_mode'), False)
        self.assertEqual(payment_method.get_preference('login'), 'merchant')

    def test_unknown_preference_is_rejected(self):
        with self.assertRaises(ValidationError) as cm:
            PaymentMethod.objects.create(name='Check', type='check', preferences={'login': 'merchant'})

        self.assertIn('preferences', cm.exception.message_dict)

    def test_set_preference(self):
        payment_method = PaymentMethod.objects.create(name='Bogus', type='bogus_credit_card')

        payment_method.set_preference('server', 'live')
        payment_method.save()
        payment_method.refresh_from_db()

        self.assertEqual(payment_method.get_preference('server'), 'live')
        self.assertTrue(payment_method.has_preference('password'))
        self.assertFalse(payment_method.has_preference('key_id'))

    def test_set_undeclared_preference(self):
        payment_method = PaymentMethod.objects.create(name='Check', type='check')

        with self.assertRaises(ValidationError):
            payment_method.set_preference('login', 'merchant')

    def test_options_leave_out_unset_login(self):
        payment_method = PaymentMethod.objects.create(name='Bogus', type='bogus_credit_card')

        self.assertEqual(
            payment_method.options(),
            {'server': 'test', 'test_mode': True, 'password': None}
        )

    def test_options_keep_configured_login(self):
        payment_method = PaymentMethod.objects.create(
            name='Bogus',
            type='bogus_credit_card',
            preferences={'login': 'merchant'}
        )

        self.assertEqual(payment_method.options()['login'], 'merchant')

    @override_settings(PAYMENT_AUTO_CAPTURE=False)
    def test_auto_capture_falls_back_to_setting(self):
        payment_method = PaymentMethod.objects.create(name='Check', type='check')

        self.assertFalse(payment_method.is_auto_capture())

        with self.settings(PAYMENT_AUTO_CAPTURE=True):
            self.assertTrue(payment_method.is_auto_capture())

    @override_settings(PAYMENT_AUTO_CAPTURE=True)
    def test_explicit_auto_capture_wins(self):
        payment_method = PaymentMethod.objects.create(name='Check', type='check', auto_capture=False)

        self.assertFalse(payment_method.is_auto_capture())


class PaymentMethodPositionTest(TestCase):
    """Test cases for the position list and soft delete"""

    def setUp(self):
        self.first = PaymentMethod.objects.create(name='First', type='check')
        self.second = PaymentMethod.objects.create(name='Second', type='check')
        self.third = PaymentMethod.objects.create(name='Third', type='store_credit')

    def positions(self):
        return list(PaymentMethod.objects.ordered_by_position().values_list('name', 'position'))

    def test_new_payment_methods_go_to_the_bottom(self):
        self.assertEqual(self.positions(), [('First', 1), ('Second', 2), ('Third', 3)])

    def test_soft_delete(self):
        """Test delete() keeps the row but hides it"""
        result = self.second.delete()

        self.assertEqual(result, (1, {'payments.PaymentMethod': 1}))
        self.assertTrue(self.second.is_deleted)
        self.assertFalse(PaymentMethod.objects.filter(pk=self.second.pk).exists())
        self.assertTrue(PaymentMethod.all_objects.filter(pk=self.second.pk).exists())

    def test_soft_delete_closes_the_gap(self):
        self.second.delete()

        self.assertEqual(self.positions(), [('First', 1), ('Third', 2)])

    def test_delete_twice_is_a_no_op(self):
        self.second.delete()

        self.assertEqual(self.second.delete(), (0, {}))

    def test_queryset_delete_is_soft(self):
        count, _ = PaymentMethod.objects.filter(type='check').delete()

        self.assertEqual(count, 2)
        self.assertEqual(self.positions(), [('Third', 1)])
        self.assertEqual(PaymentMethod.all_objects.count(), 3)
        self.assertEqual(PaymentMethod.objects.only_deleted().count(), 0)
        self.assertEqual(PaymentMethod.all_objects.only_deleted().count(), 2)

    def test_hard_delete(self):
        self.second.hard_delete()

        self.assertFalse(PaymentMethod.all_objects.filter(pk=self.second.pk).exists())

    def test_hard_delete_closes_the_gap(self):
        self.second.hard_delete()
        self.first.move_to(2)

        self.assertEqual(self.positions(), [('Third', 1), ('First', 2)])

    def test_queryset_hard_delete_closes_the_gap(self):
        PaymentMethod.objects.filter(pk=self.first.pk).hard_delete()

        self.assertEqual(self.positions(), [('Second', 1), ('Third', 2)])
        self.assertEqual(PaymentMethod.all_objects.count(), 2)

    def test_find_with_deleted(self):
        self.second.delete()

        found = PaymentMethod.find_with_deleted(self.second.pk)

        self.assertEqual(found, self.second)
        with self.assertRaises(PaymentMethod.DoesNotExist):
            PaymentMethod.objects.get(pk=self.second.pk)

    def test_restore_rejoins_at_the_bottom(self):
        self.first.delete()
        self.first.restore()

        self.assertFalse(self.first.is_deleted)
        self.assertEqual(self.positions(), [('Second', 1), ('Third', 2), ('First', 3)])

    def test_move_up(self):
        self.third.move_to(1)

        self.assertEqual(self.positions(), [('Third', 1), ('First', 2), ('Second', 3)])

    def test_move_down(self):
        self.first.move_to(2)

        self.assertEqual(self.positions(), [('Second', 1), ('First', 2), ('Third', 3)])

    def test_move_is_clamped(self):
        self.first.move_to(10)

        self.assertEqual(self.positions(), [('Second', 1), ('Third', 2), ('First', 3)])

    def test_deleted_payment_method_cannot_move(self):
        self.first.delete()

        with self.assertRaises(ValidationError):
            self.first.move_to(1)


class PaymentMethodGatewayTest(TestCase):
    """Test cases for gateway construction and dispatch"""

    def setUp(self):
        gateway_cache.clear()
        self.payment_method = PaymentMethod.objects.create(name='Bogus', type='bogus_credit_card')
        self.card = CreditCard(cc_type='visa')
        self.card.number = '4111 1111 1111 1111'

    def test_gateway_class(self):
        self.assertIs(self.payment_method.gateway_class(), BogusGateway)

    def test_gateway_is_built_from_preferences(self):
        gateway = self.payment_method.gateway

        self.assertIsInstance(gateway, BogusGateway)
        self.assertEqual(gateway.mode, 'test')
        self.assertTrue(gateway.test)
        self.assertNotIn('login', gateway.options)

    def test_gateway_mode_follows_server_preference(self):
        live = PaymentMethod.objects.create(
            name='Live Bogus',
            type='bogus_credit_card',
            preferences={'server': 'live'}
        )

        self.assertEqual(live.gateway.mode, 'live')
        self.assertEqual(self.payment_method.gateway.mode, 'test')

    def test_gateway_is_cached_per_payment_method(self):
        reloaded = PaymentMethod.objects.get(pk=self.payment_method.pk)

        self.assertIs(reloaded.gateway, self.payment_method.gateway)

    def test_gateway_is_rebuilt_after_preferences_change(self):
        gateway = self.payment_method.gateway

        self.payment_method.set_preference('login', 'merchant')
        self.payment_method.save()

        self.assertIsNot(self.payment_method.gateway, gateway)
        self.assertEqual(self.payment_method.gateway.options['login'], 'merchant')

    def test_authorize(self):
        response = self.payment_method.authorize(1000, self.card, {'order_id': 'R100'})

        self.assertTrue(response.success)
        self.assertEqual(response.authorization, BogusGateway.AUTHORIZATION_CODE)

    def test_declined_authorization_is_returned(self):
        card = CreditCard(cc_type='visa')
        card.number = '4000000000000002'

        response = self.payment_method.authorize(1000, card)

        self.assertFalse(response)
        self.assertEqual(response.error_code, 'declined')

    def test_capture_void_and_credit(self):
        self.assertTrue(self.payment_method.capture(1000, '12345').success)
        self.assertFalse(self.payment_method.capture(1000, '99999').success)
        self.assertTrue(self.payment_method.void('12345').success)
        self.assertTrue(self.payment_method.credit(500, '12345').success)

    def test_cancel_voids(self):
        response = self.payment_method.cancel('12345')

        self.assertTrue(response.success)
        self.assertEqual(response.message, BogusGateway.SUCCESS_MESSAGE)

    def test_offline_payment_method(self):
        check = PaymentMethod.objects.create(name='Check', type='check')

        self.assertIsInstance(check.gateway, OfflineGateway)
        self.assertTrue(check.purchase(1000).success)

    def test_unsaved_payment_method_has_a_gateway(self):
        payment_method = PaymentMethod(name='Draft', type='check')

        self.assertIs(payment_method.gateway, payment_method.gateway)
        self.assertNotIn(None, gateway_cache)

    def test_supports_card_brand(self):
        self.assertTrue(self.payment_method.supports(self.card))
        self.assertFalse(self.payment_method.supports(CreditCard(cc_type='rupay')))
        self.assertTrue(self.payment_method.supports(CreditCard()))


class PaymentMethodDeprecationTest(TestCase):
    """Test cases for deprecated accessors"""

    def setUp(self):
        gateway_cache.clear()
        self.payment_method = PaymentMethod.objects.create(name='Bogus', type='bogus_credit_card')

    def test_provider(self):
        with self.assertWarns(PaymentMethodDeprecationWarning):
            provider = self.payment_method.provider

        self.assertIs(provider, self.payment_method.gateway)

    def test_provider_class(self):
        with self.assertWarns(PaymentMethodDeprecationWarning):
            self.assertIs(self.payment_method.provider_class, BogusGateway)

    def test_display_on_reads_availability(self):
        cases = [
            ((True, True), ''),
            ((True, False), 'front_end'),
            ((False, True), 'back_end'),
            ((False, False), 'none'),
        ]
        for (users, admin), expected in cases:
            self.payment_method.available_to_users = users
            self.payment_method.available_to_admin = admin
            with self.assertWarns(PaymentMethodDeprecationWarning):
                self.assertEqual(self.payment_method.display_on, expected)

    def test_display_on_setter(self):
        cases = [
            ('front_end', (True, False)),
            ('back_end', (False, True)),
            ('', (True, True)),
            (None, (True, True)),
            ('none', (False, False)),
        ]
        for value, expected in cases:
            with self.assertWarns(PaymentMethodDeprecationWarning):
                self.payment_method.display_on = value
            self.assertEqual(
                (self.payment_method.available_to_users, self.payment_method.available_to_admin),
                expected
            )


class CreditCardModelTest(TestCase):
    """Test cases for CreditCard model"""

    def test_number_sets_last_digits(self):
        card = CreditCard(cc_type='visa')
        card.number = '4111 1111 1111 1111'

        self.assertEqual(card.number, '4111111111111111')
        self.assertEqual(card.last_digits, '1111')
        self.assertEqual(str(card), 'Visa ending in 1111')

    def test_number_is_not_persisted(self):
        card = CreditCard(cc_type='visa')
        card.number = '4111111111111111'
        card.save()

        reloaded = CreditCard.objects.get(pk=card.pk)

        self.assertIsNone(reloaded.number)
        self.assertEqual(reloaded.last_digits, '1111')

    def test_is_reusable(self):
        self.assertFalse(CreditCard().is_reusable())
        self.assertTrue(CreditCard(gateway_customer_profile_id='BGS-1').is_reusable())


class PaymentModelTest(TestCase):
    """Test cases for Payment model"""

    def test_amount_display(self):
        payment_method = PaymentMethod.objects.create(name='Check', type='check')
        payment = Payment.objects.create(payment_method=payment_method, amount_cents=1999, order_number='R1')

        self.assertEqual(payment.amount_display, '19.99 USD')
        self.assertEqual(payment.state, 'checkout')
        self.assertEqual(payment.gateway_options(), {'order_id': 'R1', 'currency': 'USD'})
