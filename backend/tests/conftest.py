# 공통 테스트 설정
# - 앱 import 전에 JWT 비밀키 환경변수를 넣어 둡니다 (Settings 필수값)
# - Beanie Document 는 init_beanie 이후에만 생성할 수 있으므로
#   매 테스트마다 mongomock 인메모리 DB 로 초기화합니다.

import asyncio
import base64
import os

os.environ.setdefault("JWT_SECRET_KEY", base64.b64encode(b"giftipie-test-secret-key-32bytes!!").decode())
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/giftipie_test")

import pytest
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient

from app.core.database import DOCUMENT_MODELS

TEST_SECRET = os.environ["JWT_SECRET_KEY"]


@pytest.fixture(autouse=True)
def mongo_db():
    client = AsyncMongoMockClient()
    db = client["giftipie_test"]
    asyncio.run(init_beanie(database=db, document_models=DOCUMENT_MODELS, skip_indexes=True))
    yield db
