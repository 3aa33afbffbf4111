from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from .models import PaymentMethod
from .variants import variant_choices


PASSWORD_MASK = '********'
DISPLAY_TARGETS = ('front_end', 'back_end', 'both')


class PaymentMethodSerializer(serializers.ModelSerializer):
    """
    Serializer for payment method configuration.
    Preferences are validated against the variant's declarations.
    """
    type = serializers.ChoiceField(choices=[])
    method_type = serializers.SerializerMethodField()
    source_required = serializers.SerializerMethodField()
    payment_profiles_supported = serializers.SerializerMethodField()
    is_auto_capture = serializers.SerializerMethodField()

    class Meta:
        model = PaymentMethod
        fields = [
            'id',
            'name',
            'type',
            'description',
            'method_type',
            'active',
            'available_to_users',
            'available_to_admin',
            'position',
            'auto_capture',
            'is_auto_capture',
            'source_required',
            'payment_profiles_supported',
            'preferences',
            'created_at',
            'updated_at'
        ]
        read_only_fields = [
            'id',
            'position',
            'created_at',
            'updated_at'
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['type'].choices = variant_choices()

    def get_method_type(self, obj):
        return obj.method_type()

    def get_source_required(self, obj):
        return obj.source_required()

    def get_payment_profiles_supported(self, obj):
        return obj.payment_profiles_supported()

    def get_is_auto_capture(self, obj):
        return obj.is_auto_capture()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        options = instance.preference_store.to_dict()
        for name, preference in instance.preference_store.declarations.items():
            if preference.type == 'password' and options.get(name):
                options[name] = PASSWORD_MASK
        data['preferences'] = options
        return data

    def validate(self, attrs):
        """Run model validation so bad preferences come back as 400s"""
        instance = self.instance or PaymentMethod()
        preferences = attrs.get('preferences')
        if self.instance is not None and isinstance(preferences, dict):
            # masked secrets come back unchanged from the client
            declarations = self.instance.preference_store.declarations
            attrs['preferences'] = {
                key: self.instance.preferences.get(key) if _is_masked_password(declarations, key, value) else value
                for key, value in preferences.items()
            }
        candidate = PaymentMethod(
            **{
                field.attname: getattr(instance, field.attname)
                for field in PaymentMethod._meta.concrete_fields
            }
        )
        for key, value in attrs.items():
            setattr(candidate, key, value)
        if self.instance is not None:
            candidate._state.adding = False
        try:
            candidate.full_clean(exclude=['position'])
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.message_dict)
        return attrs


class AvailablePaymentMethodSerializer(serializers.ModelSerializer):
    """
    Public view of a payment method offered at checkout. No preferences.
    """
    method_type = serializers.SerializerMethodField()

    class Meta:
        model = PaymentMethod
        fields = ['id', 'name', 'description', 'method_type', 'position']
        read_only_fields = fields

    def get_method_type(self, obj):
        return obj.method_type()


class AvailableQuerySerializer(serializers.Serializer):
    """Query params for the available endpoint"""
    display_on = serializers.ChoiceField(choices=DISPLAY_TARGETS, default='both')
    store = serializers.IntegerField(required=False, min_value=1)


class MovePaymentMethodSerializer(serializers.Serializer):
    position = serializers.IntegerField(min_value=1)


def _is_masked_password(declarations, key, value):
    preference = declarations.get(key)
    return preference is not None and preference.type == 'password' and value == PASSWORD_MASK
