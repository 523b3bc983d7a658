import sys, pathlib

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest

from carrental import create_app
from carrental.config import TestConfig
from carrental.models.store import Store
from carrental.models.user import AdminUser, CustomerUser
from carrental.utils.constants import Role
from carrental.utils.security import generate_hash

ADMIN_EMAIL = "admin@test.io"
ADMIN_PASSWORD = "Admin@1234"
USER_PASSWORD = "Secret@123"


@pytest.fixture
def app(tmp_path):
    """App backed by a throwaway store file; no bootstrap admin."""
    app = create_app(TestConfig, DATA_PATH=str(tmp_path / "data.pkl"))
    yield app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def store(app):
    """The same Store singleton the app is using."""
    return Store.instance()


@pytest.fixture
def login(client):
    """Log in and return the Authorization header for the token."""

    def _login(email, password):
        r = client.post("/api/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.get_json()
        return {"Authorization": f"Bearer {r.get_json()['data']['token']}"}

    return _login


@pytest.fixture
def register(client):
    def _register(email="alice@example.com", password=USER_PASSWORD, name="Alice",
                  mobile_no="9000000001", customer_city="Pune", **extra):
        body = dict(email=email, password=password, name=name,
                    mobile_no=mobile_no, customer_city=customer_city, **extra)
        return client.post("/api/auth/register", json=body)

    return _register


@pytest.fixture
def admin_user(store):
    uid = store.create_user(ADMIN_EMAIL, generate_hash(ADMIN_PASSWORD), "Admin", Role.ADMIN)
    return AdminUser(uid, ADMIN_EMAIL, "Admin", Role.ADMIN)


@pytest.fixture
def admin_headers(admin_user, login):
    return login(ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def user_headers(register, login):
    r = register()
    assert r.status_code == 201, r.get_json()
    return login("alice@example.com", USER_PASSWORD)


@pytest.fixture
def customer(store):
    """A customer with a user account sharing its id, as registration creates."""
    uid = store.create_user("bob@example.com", generate_hash(USER_PASSWORD), "Bob", Role.USER)
    store.create_customer({
        "customer_name": "Bob",
        "customer_city": "Mumbai",
        "mobile_no": "9111111111",
        "email": "bob@example.com",
    }, customer_id=uid)
    return store.get_customer(uid)


@pytest.fixture
def customer_user(customer):
    return CustomerUser(customer["customer_id"], customer["email"], "Bob", Role.USER)


@pytest.fixture
def car(store):
    cid = store.create_car({
        "brand": "Honda",
        "model": "City",
        "year": 2022,
        "color": "Silver",
        "daily_rate": 40.0,
        "reg_no": "MH12AB1234",
    })
    return store.get_car(cid)
