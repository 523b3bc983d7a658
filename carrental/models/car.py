from dataclasses import dataclass


@dataclass
class Car:
    """
    Fleet vehicle. `daily_rate` is the listed price for one calendar day.
    """
    car_id: str
    brand: str
    model: str
    year: int
    color: str
    daily_rate: float
    reg_no: str
    car_image: str = ""

    def price_for_days(self, days: int) -> float:
        """List price for `days` inclusive booking days, before any admin override."""
        return round(self.daily_rate * days, 2)

    @classmethod
    def from_dict(cls, d: dict) -> "Car":
        return cls(
            car_id=d.get("car_id"),
            brand=d.get("brand") or "",
            model=d.get("model") or "",
            year=int(d.get("year") or 0),
            color=d.get("color") or "",
            daily_rate=float(d.get("daily_rate") or 0.0),
            reg_no=d.get("reg_no") or "",
            car_image=d.get("car_image") or "",
        )
