# 사용자 저장소 레이어
# - 데이터 접근(조회/생성/수정/삭제)만 담당 (서비스 로직 분리)
# - 조회 결과가 없으면 None (에러 아님)

from typing import List, Optional

from beanie import PydanticObjectId
from beanie.operators import In

from ..models.donation import Donation, DonationStatus
from ..models.funding import Funding
from ..models.notification import Notification
from ..models.user import User


class UserRepository:
    async def get(self, user_id: PydanticObjectId) -> Optional[User]:
        return await User.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        return await User.find_one(User.email == email)

    async def get_by_kakao_id(self, kakao_id: int) -> Optional[User]:
        return await User.find_one(User.kakao_id == kakao_id)

    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        return await User.find_one(User.google_id == google_id)

    async def get_by_refresh_token(self, refresh_token: Optional[str]) -> Optional[User]:
        # 빈 값으로 조회하면 토큰이 없는 사용자가 매칭되므로 막습니다
        if not refresh_token:
            return None
        return await User.find_one(User.refresh_token == refresh_token)

    async def get_by_funding_id(self, funding_id: PydanticObjectId) -> Optional[User]:
        """펀딩을 소유한 사용자 조회 (Funding.user 링크를 따라감)"""
        funding = await Funding.get(funding_id)
        if funding is None:
            return None
        await funding.fetch_link(Funding.user)
        owner = funding.user
        # 링크 대상이 이미 삭제된 경우 fetch 되지 않고 Link 로 남습니다
        return owner if isinstance(owner, User) else None

    async def create(self, user: User) -> User:
        return await user.insert()

    async def save(self, user: User) -> User:
        await user.save()
        return user

    async def has_received_donations(self, user: User) -> bool:
        """사용자 펀딩 중 승인된 후원이 하나라도 있는지"""
        funding_ids = await self._funding_ids(user)
        if not funding_ids:
            return False
        found = await Donation.find_one(
            In(Donation.funding.id, funding_ids),
            Donation.status == DonationStatus.APPROVED,
        )
        return found is not None

    async def delete(self, user: User) -> None:
        # 회원탈퇴: 사용자가 소유한 알림/펀딩과 그 펀딩의 (미승인) 후원 기록도 함께 삭제
        funding_ids = await self._funding_ids(user)
        if funding_ids:
            await Donation.find(In(Donation.funding.id, funding_ids)).delete()
        await Notification.find(Notification.receiver.id == user.id).delete()
        await Funding.find(Funding.user.id == user.id).delete()
        await user.delete()

    async def _funding_ids(self, user: User) -> List[PydanticObjectId]:
        fundings = await Funding.find(Funding.user.id == user.id).to_list()
        return [funding.id for funding in fundings]
