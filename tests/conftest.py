# tests/conftest.py
import pytest
import os

os.environ["PREFECT_TEST_MODE"] = "1"
os.environ["PREFECT_LOGGING_LEVEL"] = "ERROR"
# The app's own engine is only used for its startup hook; tests use test_engine
os.environ["DATABASE_URL"] = "sqlite://"

from fastapi.testclient import TestClient

# Import app and global variables
from dashboard_api.main import app, get_engine
from dashboard_api.database import Base, make_engine
from dashboard_api.repository import InMemoryTransactionStore, SqlTransactionStore
from dashboard_api.seeding import build_seed_records

# Month 5 (two different years): 3 sold at 10/20/30, 2 unsold at 150/950.
# Month 6: boundary prices 100 and 101.
SAMPLE_PAYLOAD = [
    {"id": 1, "title": "Mens Cotton Jacket", "description": "Great outerwear for spring",
     "category": "men's clothing", "price": 10, "sold": True,
     "dateOfSale": "2021-05-10T10:00:00.000Z", "image": "https://example.com/1.jpg"},
    {"id": 2, "title": "Gold Ring", "description": "Classic jewellery piece",
     "category": "jewelery", "price": 20, "sold": True,
     "dateOfSale": "2022-05-11T10:00:00.000Z", "image": "https://example.com/2.jpg"},
    {"id": 3, "title": "Backpack", "description": "Fits 15 inch laptops",
     "category": "men's clothing", "price": 30, "sold": True,
     "dateOfSale": "2021-05-20T10:00:00.000Z", "image": "https://example.com/3.jpg"},
    {"id": 4, "title": "SSD Drive", "description": "Fast storage",
     "category": "electronics", "price": 150, "sold": False,
     "dateOfSale": "2021-05-03T10:00:00.000Z", "image": "https://example.com/4.jpg"},
    {"id": 5, "title": "Monitor", "description": "Wide screen",
     "category": "electronics", "price": 950, "sold": False,
     "dateOfSale": "2022-05-25T10:00:00.000Z", "image": "https://example.com/5.jpg"},
    {"id": 6, "title": "Rain Jacket", "description": "Waterproof shell",
     "category": "women's clothing", "price": 100, "sold": True,
     "dateOfSale": "2021-06-01T10:00:00.000Z", "image": "https://example.com/6.jpg"},
    {"id": 7, "title": "Bracelet", "description": "Silver chain",
     "category": "jewelery", "price": 101, "sold": False,
     "dateOfSale": "2021-06-15T10:00:00.000Z", "image": "https://example.com/7.jpg"},
]

@pytest.fixture(scope="function")
def test_engine(tmp_path):
    """
    Creates a fresh SQLite database file for a single test.
    A file (not :memory:) so threadpool workers each get their own connection.
    """
    engine = make_engine(f"sqlite:///{tmp_path / 'test_transactions.db'}")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()

@pytest.fixture(scope="function")
def client(test_engine):
    """
    Overrides the dependency injection to use our test database.
    """
    def get_test_engine_override():
        yield test_engine

    app.dependency_overrides[get_engine] = get_test_engine_override

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()

@pytest.fixture(scope="function")
def seed_db_data(test_engine):
    """
    Directly seeds the test database with the sample transactions.
    """
    store = SqlTransactionStore(test_engine)
    store.insert_many(build_seed_records(SAMPLE_PAYLOAD))
    return store

@pytest.fixture(scope="function")
def memory_store():
    return InMemoryTransactionStore(build_seed_records(SAMPLE_PAYLOAD))

@pytest.fixture(scope="function")
def sample_payload():
    return [dict(item) for item in SAMPLE_PAYLOAD]

@pytest.fixture(scope="session")
def prefect_harness():
    """Runs flows against a temporary Prefect API instead of a real server."""
    from prefect.testing.utilities import prefect_test_harness

    with prefect_test_harness():
        yield
