from django.core.validators import RegexValidator

address_validator = RegexValidator(
    regex=r'^[a-z0-9][a-z0-9._-]{2,89}$',
    message='Addresses are 3-90 lowercase letters, digits, ".", "_" or "-".',
    code='invalid_address',
)
