from dataclasses import dataclass
from typing import Optional

from ..exceptions import ValidationError
from ..utils.constants import Role
from ..utils.validators import to_float
from .car import Car


@dataclass
class UserBase:
    """
    Base user model. The Store keeps raw dicts; we wrap them into rich objects
    to express booking pricing via polymorphism.
    """
    user_id: str
    email: str
    name: str
    role: str  # "admin" | "user"

    @property
    def is_admin(self) -> bool:
        return False

    def price_booking(self, car: Car, days: int, discount=None, total=None) -> tuple[float, float]:
        """Return (discount, total_bill_amount) for a booking this user creates."""
        raise NotImplementedError


class AdminUser(UserBase):
    """
    Admins set the discount and the final bill themselves.
    """

    @property
    def is_admin(self) -> bool:
        return True

    def price_booking(self, car: Car, days: int, discount=None, total=None) -> tuple[float, float]:
        if total is None or total == "":
            raise ValidationError("Admin must provide a valid total bill amount (> 0).")
        total = to_float(total, "total_bill_amount")
        if not total > 0:
            raise ValidationError("Admin must provide a valid total bill amount (> 0).")
        discount = to_float(discount, "discount") if discount not in (None, "") else 0.0
        if discount < 0:
            raise ValidationError("discount cannot be negative")
        return discount, round(total, 2)


class CustomerUser(UserBase):
    """
    Customers never get a discount; the bill is the car's daily rate times
    the inclusive day count.
    """

    def price_booking(self, car: Car, days: int, discount=None, total=None) -> tuple[float, float]:
        total = car.price_for_days(days)
        if not total > 0:
            raise ValidationError("Calculated total bill is zero or less. Check car daily rate and duration.")
        return 0.0, total


def user_from_claims(d: Optional[dict]) -> Optional[UserBase]:
    """Map token claims or a stored user dict to a rich user object."""
    if not d:
        return None
    base = dict(
        user_id=d.get("user_id"),
        email=d.get("email") or "",
        name=d.get("name") or "",
        role=(d.get("role") or "").lower(),
    )
    if base["role"] == Role.ADMIN:
        return AdminUser(**base)
    return CustomerUser(**base)


def as_customer(user: UserBase) -> CustomerUser:
    """Same identity, self-service pricing."""
    if isinstance(user, CustomerUser):
        return user
    return CustomerUser(user.user_id, user.email, user.name, user.role)
