"""Car class for the vehicle snapshot the engine works from."""

from typing import Optional


class Car:
    """Vehicle identification plus current odometer and fuel type."""

    def __init__(
        self,
        make: str,
        model: str,
        year: Optional[int] = None,
        mileage: int = 0,
        fuel_type: Optional[str] = None,
    ):
        self.make = make
        self.model = model
        self.year = year
        self.mileage = mileage
        self.fuel_type = fuel_type

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        base = f"{self.make} {self.model}"
        return f"{self.year} {base}" if self.year else base
