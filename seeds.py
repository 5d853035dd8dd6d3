"""
seeds.py
--------
Populate data.pkl with the demo fleet and a default admin account.
Safe to run more than once: vehicles are only written on the first run,
accounts that already exist are left alone.

Usage:
    $ python seeds.py
"""
import logging

from carrental import create_app
from carrental.exceptions import AuthError
from carrental.models.store import DocumentStore, server_now
from carrental.services.auth_service import identity
from carrental.services.user_service import UserService
from carrental.utils.constants import META, VEHICLES, PLACEHOLDER, Role, VehicleStatus

logger = logging.getLogger("seeds")

STANDARD_INSURANCE = [
    {"name": "Basic", "daily_rate": 12},
    {"name": "Full cover", "daily_rate": 25},
]

SAMPLE_VEHICLES = {
    "car1": {
        "make": "Toyota", "model": "Camry", "year": 2022, "type": "Sedan", "rate_per_day": 65,
        "location": "New York", "seats": 5, "transmission": "automatic", "fuel_type": "Gasoline",
        "description": "A comfortable and reliable sedan, perfect for city driving and family trips.",
        "features": ["Bluetooth", "Backup Camera", "Cruise Control", "USB Ports", "Apple CarPlay"],
    },
    "car2": {
        "make": "Honda", "model": "CR-V", "year": 2021, "type": "SUV", "rate_per_day": 80,
        "location": "Los Angeles", "seats": 5, "transmission": "automatic", "fuel_type": "Gasoline",
        "description": "Spacious interior and a smooth ride with plenty of cargo space.",
        "features": ["Navigation", "Sunroof", "Leather Seats", "Heated Seats", "Hands-free Liftgate"],
    },
    "car3": {
        "make": "Tesla", "model": "Model 3", "year": 2022, "type": "Sedan", "rate_per_day": 120,
        "location": "San Francisco", "seats": 5, "transmission": "automatic", "fuel_type": "Electric",
        "description": "Autopilot, zero emissions and quick acceleration in a sleek package.",
        "features": ["Autopilot", "Electric", "Touch Screen", "Premium Sound", "Long Range Battery"],
    },
    "car4": {
        "make": "BMW", "model": "X5", "year": 2021, "type": "SUV", "rate_per_day": 150,
        "location": "Chicago", "seats": 5, "transmission": "automatic", "fuel_type": "Gasoline",
        "description": "Luxury and performance in a robust SUV.",
        "features": ["Leather Interior", "Panoramic Sunroof", "Premium Sound System", "Heated/Cooled Seats"],
    },
    "car5": {
        "make": "Chevrolet", "model": "Corvette", "year": 2022, "type": "Coupe", "rate_per_day": 200,
        "location": "Miami", "seats": 2, "transmission": "automatic", "fuel_type": "Gasoline",
        "description": "The iconic American sports car.",
        "features": ["Bose Premium Audio", "Performance Exhaust", "Head-Up Display", "Track Mode"],
    },
    "car6": {
        "make": "Ford", "model": "Mustang Convertible", "year": 2021, "type": "Convertible", "rate_per_day": 110,
        "location": "Miami", "seats": 4, "transmission": "automatic", "fuel_type": "Gasoline",
        "description": "Open-top cruising with a classic V8 soundtrack.",
        "features": ["Convertible Top", "Apple CarPlay", "Premium Audio"],
    },
}


def ensure_account(email: str, password: str, name: str, role: str):
    """Create the account if missing, then make sure it has `role`."""
    try:
        auth = identity.sign_up(email, password, name)
    except AuthError:
        auth = identity.sign_in(email, password)
    if auth.role != role:
        UserService.admin_set_role(auth.user_id, role)
    return auth.user_id


def main():
    app = create_app()
    with app.app_context():
        store = DocumentStore.instance()

        ensure_account("admin@carrental.test", "Admin123", "Admin", Role.ADMIN)
        ensure_account("customer@carrental.test", "Customer123", "Demo Customer", Role.CUSTOMER)

        if store.get(META, "initialized") is None:
            for vid, data in SAMPLE_VEHICLES.items():
                store.put(VEHICLES, vid, dict(
                    data,
                    images=[PLACEHOLDER],
                    availability_status=VehicleStatus.AVAILABLE,
                    rating=0.0,
                    review_count=0,
                    insurance_options=STANDARD_INSURANCE,
                    specifications={},
                ))
            store.put(META, "initialized", {"at": server_now()})
        else:
            logger.info("Vehicles already seeded, skipping")

        store.save()

        logger.info("Seed complete.")
        logger.info("Admin login:    admin@carrental.test / Admin123")
        logger.info("Customer login: customer@carrental.test / Customer123")


if __name__ == "__main__":
    main()
