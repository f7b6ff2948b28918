import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from beanie import init_beanie
from fastapi import FastAPI
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from chat import router as chat_router
from db.models import ALL_DOCUMENT_MODELS
from trips import router as trips_router


@pytest.fixture
async def beanie_db():
    client = AsyncMongoMockClient()
    database = client["test_db"]
    await init_beanie(database=database, document_models=ALL_DOCUMENT_MODELS)
    return database


@pytest.fixture
def api_client() -> TestClient:
    app = FastAPI()
    app.include_router(trips_router)
    app.include_router(chat_router)
    return TestClient(app)
