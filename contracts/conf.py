from django.conf import settings

CONTRACT_NAME = 'whitelist-registry'
CONTRACT_VERSION = '0.1.0'

DEFAULTS = {
    'DENOM': 'UST',
    'ENTRY_PRICE': 100,
    'REFUND_AMOUNT': 95,
    # ~1 month in seconds
    'SUBSCRIPTION_DURATION': 2629746,
    'BOOTSTRAP_EXPIRY': 100,
    'RELATIVE_EXPIRY': False,
    'HOST_BACKEND': 'contracts.backends.LoggingBackend',
}


def get_setting(name):
    """Read a contract constant from settings.WHITELIST, falling back to DEFAULTS."""
    overrides = getattr(settings, 'WHITELIST', None) or {}
    return overrides.get(name, DEFAULTS[name])
