from carrental import create_app
from carrental.exceptions import DuplicateRecordError
from carrental.models.store import Store
from carrental.utils.constants import Role
from carrental.utils.security import generate_hash

# Outside the 9xxxxxxxxx range real registrations use
DEMO_MOBILE_NO = "0000000000"

DEMO_CARS = [
    {"brand": "Toyota", "model": "Corolla", "year": 2021, "color": "White",
     "daily_rate": 45, "reg_no": "MH12AB1234", "car_image": "/static/images/corolla.jpg"},
    {"brand": "Honda", "model": "Civic", "year": 2022, "color": "Black",
     "daily_rate": 50, "reg_no": "MH12CD5678", "car_image": "/static/images/civic.jpg"},
    {"brand": "Hyundai", "model": "Creta", "year": 2023, "color": "Red",
     "daily_rate": 65, "reg_no": "MH14EF9012", "car_image": "/static/images/creta.jpg"},
    {"brand": "Mahindra", "model": "XUV700", "year": 2023, "color": "Grey",
     "daily_rate": 90, "reg_no": "MH01GH3456", "car_image": "/static/images/xuv700.jpg"},
]


def ensure_user(store: Store, email: str, password: str, name: str, role: str):
    """
    Ensure a user with `email` exists in the store.
    - If exists: update password hash and role (idempotent).
    - If not:   create a new user.
    """
    u = store.find_user(email)
    if u:
        store.update_user(u["user_id"], password_hash=generate_hash(password), role=role)
        return u["user_id"]
    return store.create_user(email, generate_hash(password), name, role)


def seed(store: Store):
    """Add the demo accounts and cars; safe to run more than once."""
    # ---- Admin / Customer demo accounts ----
    ensure_user(store, "admin@carrental.local", "Admin@1234", "Administrator", Role.ADMIN)
    uid = ensure_user(store, "customer@carrental.local", "Customer@1234", "Demo Customer", Role.USER)
    if not store.get_customer(uid):
        try:
            store.create_customer({
                "customer_name": "Demo Customer",
                "customer_city": "Pune",
                "mobile_no": DEMO_MOBILE_NO,
                "email": "customer@carrental.local",
            }, customer_id=uid)
        except DuplicateRecordError as e:
            print(f"Skipped demo customer profile: {e}")

    # ---- Demo cars (create only if none exist) ----
    if not store.cars:
        for car in DEMO_CARS:
            store.create_car(car)

    store.save()


def main():
    app = create_app()
    with app.app_context():
        seed(Store.instance())
        print("Seed complete.")
        print("Admin login:     admin@carrental.local / Admin@1234")
        print("Customer login:  customer@carrental.local / Customer@1234")


if __name__ == "__main__":
    main()
