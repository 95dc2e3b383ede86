# 후원 저장소 레이어
# - 상태 변경은 change_status 한 곳에서 조건부 업데이트로만 처리

from typing import List, Optional

from beanie.operators import Set

from ..models.donation import Donation, DonationStatus
from ..models.funding import Funding


class DonationRepository:
    async def get_by_order_id(self, order_id: str) -> Optional[Donation]:
        return await Donation.find_one(Donation.order_id == order_id)

    async def create(self, donation: Donation) -> Donation:
        return await donation.insert()

    async def change_status(self, order_id: str, from_status: DonationStatus,
                            to_status: DonationStatus, **fields) -> bool:
        """from_status 인 후원만 to_status 로 바꿉니다. 실제로 바뀌었으면 True.

        같은 주문에 승인 리다이렉트가 두 번 들어와도 한 요청만 성공합니다.
        """
        changes = {"status": to_status.value, **fields}
        result = await Donation.find_one(
            Donation.order_id == order_id,
            Donation.status == from_status,
        ).update(Set(changes))
        return result is not None and result.modified_count == 1

    async def find_approved_by_funding(self, funding: Funding) -> List[Donation]:
        return await Donation.find(
            Donation.funding.id == funding.id,
            Donation.status == DonationStatus.APPROVED,
        ).sort(-Donation.created_at).to_list()
