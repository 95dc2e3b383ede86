# Celery 작업 & 스케줄
# - 알림 이메일 발송 (실패 시 재시도)
# - 매일 자정(Asia/Seoul) 기간이 지난 펀딩 종료 처리

import asyncio
import logging
import smtplib

from celery import Celery
from celery.schedules import crontab

from ..core.config import settings
from ..core.database import init_db
from ..core.response_status import BaseResponseStatus
from ..services.funding_service import build_funding_service
from ..services.notification_service import send_email

logger = logging.getLogger(__name__)

# Celery 앱 초기화
celery_app = Celery("giftipie_tasks", broker=settings.REDIS_URL, backend=settings.REDIS_URL)
celery_app.conf.timezone = settings.TIMEZONE


@celery_app.on_after_configure.connect
def setup_periodic_tasks(sender, **kwargs):
    # 매일 00:00 (KST) 실행
    sender.add_periodic_task(
        crontab(hour=0, minute=0),
        finish_expired_fundings_task.s(),
        name="finish_expired_fundings_daily",
    )


@celery_app.task(bind=True, max_retries=3, default_retry_delay=60)
def send_email_task(self, to_email: str, subject: str, body: str):
    try:
        send_email(to_email, subject, body)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"{BaseResponseStatus.EMAIL_SEND_FAILED.message} ({to_email}): {e}")
        raise self.retry(exc=e)
    logger.info(f"알림 메일 발송 완료: {to_email}")


@celery_app.task
def finish_expired_fundings_task():
    # Celery는 동기 함수이므로, 내부에서 asyncio 루프 실행
    async def _run():
        await init_db()
        return await build_funding_service().finish_expired_fundings()

    return asyncio.run(_run())
