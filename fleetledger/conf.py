"""
Domain configuration.
Values live in settings.FLEET_LEDGER; anything not set there falls back to DEFAULTS.
"""

from django.conf import settings

DEFAULTS = {
    "MSA_DESTINATION_PATTERNS": ["MSA", "MOMBASA"],
    "OPERATIONAL_ROLE": "fuel_order_maker",
    "ADMIN_ROLES": ["admin", "super_admin"],
    "SLACK_WEBHOOK_URL": "",
}


def fleet_setting(name):
    overrides = getattr(settings, "FLEET_LEDGER", {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
