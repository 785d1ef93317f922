from decimal import Decimal

from scancart.config import settings


def money(v: Decimal | float) -> str:
    return f"{Decimal(v):.2f} {settings.currency_suffix}"
