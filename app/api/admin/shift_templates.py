"""관리자 근무 템플릿 라우터 — 근무 템플릿 CRUD 및 직원 배정 엔드포인트.

Admin Shift Template Router — CRUD and assignment endpoints for shift
templates. Every route is scoped to the acting user's company; a template
of another company answers exactly like a missing one.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin, require_supervisor
from app.database import get_db
from app.models.user import User
from app.schemas.common import DataResponse, MessageResponse
from app.schemas.shift_template import (
    AssignAllRequest,
    AssignedUserResponse,
    AssignShiftRequest,
    BulkAssignResult,
    ShiftAssignmentResponse,
    ShiftTemplateCreate,
    ShiftTemplateResponse,
    ShiftTemplateUpdate,
)
from app.services.scheduling_service import scheduling_service

router: APIRouter = APIRouter()


@router.get("", response_model=DataResponse[list[ShiftTemplateResponse]])
async def list_shift_templates(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_supervisor)],
) -> DataResponse[list[ShiftTemplateResponse]]:
    """회사의 근무 템플릿 목록을 조회합니다.

    List the company's shift templates with total hours and assigned users.
    """
    templates = await scheduling_service.list_templates(db, current_user.company_id)
    return DataResponse(data=templates)


@router.post(
    "",
    response_model=DataResponse[ShiftTemplateResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_shift_template(
    data: ShiftTemplateCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> DataResponse[ShiftTemplateResponse]:
    """새 근무 템플릿을 생성합니다.

    Create a new shift template.
    """
    result: ShiftTemplateResponse = await scheduling_service.create_template(
        db, current_user.company_id, data
    )
    await db.commit()
    return DataResponse(message="Shift template created", data=result)


@router.get("/{template_id}", response_model=DataResponse[ShiftTemplateResponse])
async def get_shift_template(
    template_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_supervisor)],
) -> DataResponse[ShiftTemplateResponse]:
    result = await scheduling_service.get_template(db, current_user.company_id, template_id)
    return DataResponse(data=result)


@router.put("/{template_id}", response_model=DataResponse[ShiftTemplateResponse])
async def update_shift_template(
    template_id: UUID,
    data: ShiftTemplateUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> DataResponse[ShiftTemplateResponse]:
    """근무 템플릿을 수정합니다.

    Partially update a shift template.
    """
    result: ShiftTemplateResponse = await scheduling_service.update_template(
        db, current_user.company_id, template_id, data
    )
    await db.commit()
    return DataResponse(message="Shift template updated", data=result)


@router.delete("/{template_id}", response_model=MessageResponse)
async def delete_shift_template(
    template_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> MessageResponse:
    """근무 템플릿을 삭제합니다.

    Delete a shift template according to the configured delete policy.
    """
    await scheduling_service.delete_template(db, current_user.company_id, template_id)
    await db.commit()
    return MessageResponse(message="Shift template deleted")


@router.post(
    "/{template_id}/assign",
    response_model=DataResponse[ShiftAssignmentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def assign_shift_template(
    template_id: UUID,
    data: AssignShiftRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_supervisor)],
) -> DataResponse[ShiftAssignmentResponse]:
    """직원에게 근무 템플릿을 배정합니다.

    Assign the template to a user. 201 when the assignment is new, 200 when
    an existing assignment's recurrence was updated.
    """
    result, created = await scheduling_service.assign(
        db,
        current_user.company_id,
        template_id,
        data.user_id,
        data.recurrence,
        current_user.id,
    )
    await db.commit()
    if not created:
        response.status_code = status.HTTP_200_OK
        return DataResponse(message="Assignment updated", data=result)
    return DataResponse(message="Assignment created", data=result)


@router.post("/{template_id}/assign-all", response_model=DataResponse[BulkAssignResult])
async def assign_shift_template_to_all(
    template_id: UUID,
    data: AssignAllRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> DataResponse[BulkAssignResult]:
    """회사의 모든 활성 직원에게 근무 템플릿을 배정합니다.

    Assign the template to every active user of the company. Per-user
    failures are reported in the body; the request itself still succeeds.
    """
    company_id: UUID = current_user.company_id
    acting_user_id: UUID = current_user.id
    result: BulkAssignResult = await scheduling_service.assign_all(
        db, company_id, template_id, data.recurrence, acting_user_id, data.exclude_roles
    )
    return DataResponse(data=result)


@router.get(
    "/{template_id}/assignments",
    response_model=DataResponse[list[AssignedUserResponse]],
)
async def list_shift_template_assignments(
    template_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_supervisor)],
) -> DataResponse[list[AssignedUserResponse]]:
    users = await scheduling_service.list_assigned_users(db, current_user.company_id, template_id)
    return DataResponse(data=users)


@router.delete("/{template_id}/assignments/{user_id}", response_model=MessageResponse)
async def remove_shift_template_assignment(
    template_id: UUID,
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> MessageResponse:
    """직원의 근무 배정을 해제합니다.

    Remove a user's assignment to the template.
    """
    await scheduling_service.remove_assignment(db, current_user.company_id, template_id, user_id)
    await db.commit()
    return MessageResponse(message="Assignment removed")
