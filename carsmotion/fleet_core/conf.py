from decimal import Decimal

from django.conf import settings

# Defaults used when the project settings don't override them
DEFAULTS = {
    "FLEET_TAX_RATE": Decimal("0.20"),
    "FLEET_INVOICE_PREFIX": "FACT",
    "FLEET_INVOICE_DUE_DAYS": 14,
    "FLEET_MAINTENANCE_THRESHOLDS": {
        "service": {"days": 180, "km": 10000},
        "inspection": {"days": 365, "km": 15000},
    },
}


def get(name):
    """Read a FLEET_* setting, falling back to the app default."""
    return getattr(settings, name, DEFAULTS[name])


def tax_rate() -> Decimal:
    return Decimal(str(get("FLEET_TAX_RATE")))


def invoice_prefix() -> str:
    return get("FLEET_INVOICE_PREFIX")


def invoice_due_days() -> int:
    return int(get("FLEET_INVOICE_DUE_DAYS"))


def maintenance_thresholds() -> dict:
    return get("FLEET_MAINTENANCE_THRESHOLDS")
