# 공통 응답 스키마
# - 모든 API 응답 본문: {"isSuccess", "code", "message", "result"}

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..core.response_status import BaseResponseStatus

T = TypeVar("T")


class BaseResponse(BaseModel, Generic[T]):
    model_config = ConfigDict(populate_by_name=True)

    is_success: bool = Field(alias="isSuccess")
    code: int
    message: str
    result: Optional[T] = None

    @classmethod
    def of(cls, status: BaseResponseStatus, result: Optional[T] = None) -> "BaseResponse[T]":
        return cls(is_success=status.is_success, code=status.code, message=status.message, result=result)
