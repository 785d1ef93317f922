from decimal import Decimal


def require_positive_number(v: Decimal | float, name: str = "value") -> None:
    if v <= 0:
        raise ValueError(f"{name} must be > 0")


def require_non_negative_number(v: Decimal | float, name: str = "value") -> None:
    if v < 0:
        raise ValueError(f"{name} must be >= 0")
