from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from adapters.meta.transformers import BudgetUnit, convert_budget_to_cents
from adapters.meta.validators import validate_budget_type
from exceptions.custom_exceptions import BaseAppException


class DailyBudget(BaseModel):
    type: Literal["daily"] = "daily"
    amount: int = Field(..., gt=0, description="Minor currency units (e.g. cents)")

    def form_fields(self) -> dict[str, int]:
        return {"daily_budget": self.amount}


class LifetimeBudget(BaseModel):
    type: Literal["lifetime"] = "lifetime"
    amount: int = Field(..., gt=0, description="Minor currency units (e.g. cents)")

    def form_fields(self) -> dict[str, int]:
        return {"lifetime_budget": self.amount}


Budget = Annotated[Union[DailyBudget, LifetimeBudget], Field(discriminator="type")]


def to_minor_units(value: Any, unit: Any) -> Any:
    """Convert a flat request amount, surfacing failures as pydantic errors."""
    if value is None:
        return None
    try:
        return convert_budget_to_cents(value, unit=unit)
    except (BaseAppException, ValueError) as exc:
        raise ValueError(getattr(exc, "message", str(exc)))


def fold_budget_fields(data: Any, *, required: bool) -> Any:
    """Turn flat ``daily_budget`` / ``lifetime_budget`` into a tagged ``budget``.

    ``budget_unit`` (default MINOR) says what the flat amounts are measured in.
    It is consumed here and does not apply to an explicit ``budget`` object,
    whose amount is always in minor units.
    """
    if not isinstance(data, dict):
        return data
    data = dict(data)
    unit = data.pop("budget_unit", None) or BudgetUnit.MINOR
    daily = data.pop("daily_budget", None)
    lifetime = data.pop("lifetime_budget", None)
    if data.get("bid_amount") is not None:
        data["bid_amount"] = to_minor_units(data["bid_amount"], unit)

    if data.get("budget") is not None:
        if daily is not None or lifetime is not None:
            raise ValueError("Provide either budget or daily_budget/lifetime_budget, not both")
        return data
    if daily is None and lifetime is None and not required:
        return data

    daily = to_minor_units(daily, unit)
    lifetime = to_minor_units(lifetime, unit)
    result = validate_budget_type(daily, lifetime)
    if not result.valid:
        raise ValueError(result.error)

    budget_type = result.details["budget_type"]
    data["budget"] = {
        "type": budget_type,
        "amount": int(daily if budget_type == "daily" else lifetime),
    }
    return data
