# 펀딩 저장소 레이어

from datetime import datetime
from typing import List, Optional

from beanie import PydanticObjectId

from ..models.donation import Donation, DonationStatus
from ..models.funding import Funding, FundingStatus
from ..models.user import User


class FundingRepository:
    async def get(self, funding_id: PydanticObjectId) -> Optional[Funding]:
        return await Funding.get(funding_id)

    async def create(self, funding: Funding) -> Funding:
        return await funding.insert()

    async def save(self, funding: Funding) -> Funding:
        await funding.save()
        return funding

    async def delete(self, funding: Funding) -> None:
        await funding.delete()

    async def find_by_user(self, user: User) -> List[Funding]:
        return await Funding.find(Funding.user.id == user.id).sort(-Funding.created_at).to_list()

    async def exists_active_item_link(self, user: User, item_link: str) -> bool:
        found = await Funding.find_one(
            Funding.user.id == user.id,
            Funding.item_link == item_link,
            Funding.status == FundingStatus.ACTIVE,
        )
        return found is not None

    async def find_expired_active(self, now: datetime) -> List[Funding]:
        fundings = await Funding.find(
            Funding.status == FundingStatus.ACTIVE,
            Funding.end_date < now,
        ).to_list()
        # 알림을 보내야 하므로 주인까지 함께 로드
        for funding in fundings:
            await funding.fetch_link(Funding.user)
        return fundings

    async def has_approved_donations(self, funding: Funding) -> bool:
        found = await Donation.find_one(
            Donation.funding.id == funding.id,
            Donation.status == DonationStatus.APPROVED,
        )
        return found is not None

    async def add_amount(self, funding: Funding, amount: int) -> Funding:
        # 동시 후원 승인 시 유실되지 않도록 $inc 로 누적
        await funding.inc({Funding.current_amount: amount})
        return funding
