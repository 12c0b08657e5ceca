"""공통 Pydantic 요청/응답 스키마 정의.

Common Pydantic request/response schema definitions.
The wire format is camelCase JSON; Python code keeps snake_case attribute names.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """camelCase 직렬화 베이스 — Base model serialized with camelCase aliases.

    populate_by_name=True lets services build instances with snake_case names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DataResponse(CamelModel, Generic[T]):
    """데이터 응답 봉투 — ``{message, data}`` envelope for every success body.

    Attributes:
        message: 응답 메시지 (Human-readable outcome)
        data: 응답 데이터 (Payload)
    """

    message: str = "OK"
    data: T


class MessageResponse(CamelModel):
    """범용 메시지 응답 스키마.

    Generic message response schema for deletes and other actions that
    return only a human-readable confirmation.

    Attributes:
        message: 응답 메시지 (Response message string)
    """

    message: str
