"""Pytest fixtures for storefront tests."""

import itertools
import os

os.environ.setdefault("OTEL_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.db.database import Base, get_db
from storefront.main import app
from storefront.models import (
    Address,
    CartItem,
    Category,
    Product,
    ProductVariant,
    User,
    UserRole,
)
from storefront.models.schemas import OrderPlace, ShippingAddress
from storefront.services.auth import create_access_token
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService

PASSWORD = "secret123"

SHIPPING_ADDRESS = {
    "fullName": "Sam Shopper",
    "phone": "+1 555 0100",
    "line1": "12 Market Street",
    "city": "Springfield",
    "state": "IL",
    "postalCode": "62701",
    "country": "US",
}

_password_hash = None


def password_hash():
    """bcrypt is slow; hash the shared test password once."""
    global _password_hash
    if _password_hash is None:
        _password_hash = UserService.hash_password(PASSWORD)
    return _password_hash


def auth_headers(user):
    token = create_access_token({"sub": str(user.id), "uid": user.uid})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """Test client whose requests use the test session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = itertools.count(1)

    def _make(email=None, role=UserRole.USER, fullname="Sam Shopper", phone="+1 555 0100"):
        user = User(
            fullname=fullname,
            email=email or f"user{next(counter)}@storefront.io",
            phone=phone,
            hashed_password=password_hash(),
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def user(make_user):
    return make_user(email="shopper@storefront.io")


@pytest.fixture
def other_user(make_user):
    return make_user(email="other@storefront.io", fullname="Olive Other")


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@storefront.io", role=UserRole.ADMIN, fullname="Ada Admin")


@pytest.fixture
def category(db_session):
    category = Category(name="Shirts")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def make_product(db_session, category):
    counter = itertools.count(1)

    def _make(
        name=None,
        price=100.0,
        discount=0,
        variants=(("M", "black", 10),),
        is_active=True,
        is_featured=False,
        category_id=None,
    ):
        name = name or f"Product {next(counter)}"
        slug = name.lower().replace(" ", "-")
        product = Product(
            name=name,
            description=f"{name} description",
            price=price,
            discount=discount,
            category_id=category_id or category.id,
            images=[{"url": f"https://img.storefront.io/{slug}.jpg", "alt": name}],
            is_active=is_active,
            is_featured=is_featured,
        )
        product.variants = [
            ProductVariant(size=size, color=color, stock=stock)
            for size, color, stock in variants
        ]
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make


@pytest.fixture
def add_to_cart(db_session):
    def _add(user, product, quantity=1, size="M", color="black"):
        item = CartItem(
            user_id=user.id,
            product_id=product.id,
            size=size,
            color=color,
            quantity=quantity,
        )
        db_session.add(item)
        db_session.commit()
        db_session.refresh(item)
        return item

    return _add


@pytest.fixture
def saved_address(db_session, user):
    address = Address(
        user_id=user.id,
        line1="7 Elm Road",
        city="Shelbyville",
        state="IL",
        postal_code="62565",
        country="US",
    )
    db_session.add(address)
    db_session.commit()
    db_session.refresh(address)
    return address


@pytest.fixture
def place_order(db_session, make_product, add_to_cart):
    """Place an order for a user with one line of a fresh product."""

    def _place(user, delivery_fee=0, quantity=1, price=100.0):
        product = make_product(price=price)
        add_to_cart(user, product, quantity=quantity)
        order, _ = OrderService.place_order(
            db_session,
            user,
            OrderPlace(address=ShippingAddress(**SHIPPING_ADDRESS), delivery_fee=delivery_fee),
        )
        return order

    return _place
