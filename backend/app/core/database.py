# MongoDB / Beanie 초기화
# - FastAPI 앱과 Celery 워커가 같은 Document 목록으로 초기화합니다.

from typing import Optional

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from ..models.donation import Donation
from ..models.funding import Funding
from ..models.notification import Notification
from ..models.user import User
from .config import settings

DOCUMENT_MODELS = [User, Funding, Donation, Notification]


async def init_db(mongodb_uri: Optional[str] = None, ping: bool = False) -> AsyncIOMotorClient:
    # serverSelectionTimeoutMS: 5초 안에 서버를 찾지 못하면 타임아웃
    client = AsyncIOMotorClient(mongodb_uri or settings.MONGODB_URI, serverSelectionTimeoutMS=5000)
    if ping:
        await client.admin.command("ping")
    await init_beanie(database=client.get_default_database(), document_models=DOCUMENT_MODELS)
    return client
