import itertools
import os
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

#cheap bcrypt cost for tests, read when storefront.utils.settings is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from storefront.data.database import Database
from storefront.data.models.address import AddressModel
from storefront.data.models.product import ProductModel
from storefront.data.models.user import UserModel
from storefront.main import create_app
from storefront.utils.security import create_access_token, hash_password

JWT_SECRET = "test-secret"
PASSWORD = "correct-horse-battery"


class FakeSearchClient:
    """Records calls instead of talking to the vector index."""

    enabled = True

    def __init__(self):
        self.results = []
        self.queries = []
        self.upserts = []
        self.deleted = []

    def search(self, text, top_k):
        self.queries.append((text, top_k))
        return list(self.results)

    def upsert_product(self, product_id, text):
        self.upserts.append((product_id, text))

    def delete_product(self, product_id):
        self.deleted.append(product_id)


@pytest.fixture()
def database():
    database = Database("sqlite://", poolclass=StaticPool)
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture()
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture()
def search_client():
    return FakeSearchClient()


@pytest.fixture()
def app(database, search_client):
    return create_app(database=database, jwt_secret=JWT_SECRET, search_client=search_client)


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def password():
    return PASSWORD


@pytest.fixture()
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture()
def make_user(db, password_hash):
    counter = itertools.count(1)

    def _make(name=None, email=None):
        n = next(counter)
        user = UserModel(
            name=name or f"User {n}",
            email=email or f"user{n}@storefront.dev",
            password_hash=password_hash,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def other_user(make_user):
    return make_user()


@pytest.fixture()
def make_product(db):
    def _make(owner, title="Mechanical keyboard", price="49.99", stock=10, description=None):
        product = ProductModel(
            owner_id=owner.id,
            title=title,
            description=description,
            price=Decimal(price),
            stock=stock,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture()
def make_address(db):
    def _make(owner, city="Springfield"):
        address = AddressModel(
            user_id=owner.id,
            full_name="Jamie Doe",
            street="1 Main Street",
            city=city,
            state="IL",
            postal_code="62701",
            country="US",
            phone="5550001111",
        )
        db.add(address)
        db.commit()
        return address

    return _make


@pytest.fixture()
def auth_headers():
    def _headers(user, expires_seconds=3600):
        token = create_access_token(user.id, JWT_SECRET, expires_seconds)
        return {"Authorization": f"Bearer {token}"}

    return _headers
