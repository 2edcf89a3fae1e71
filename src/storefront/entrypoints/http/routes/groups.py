from fastapi import APIRouter, Depends, Response, status

from storefront.entrypoints.http.dependencies import (
    get_create_group_use_case,
    get_delete_group_use_case,
    get_list_groups_use_case,
    get_update_group_use_case,
    require_admin,
)
from storefront.entrypoints.http.dtos.financing import FinancingGroupDTO, FinancingGroupPayloadDTO
from storefront.entrypoints.http.error_responses import ErrorResponse
from storefront.entrypoints.http.mappers.financing_mapper import FinancingMapper
from storefront.use_cases.financing_groups import (
    CreateGroup,
    DeleteGroup,
    ListGroups,
    UpdateGroup,
)


router = APIRouter(tags=["Financing groups"])


@router.get(
    "/financing/groups",
    response_model=list[FinancingGroupDTO],
    summary="List groups",
    description="Active groups first, then by sort order and name.",
)
def list_groups(
    use_case: ListGroups = Depends(get_list_groups_use_case),
) -> list[FinancingGroupDTO]:
    return [FinancingMapper.to_group_dto(group) for group in use_case.execute()]


@router.post(
    "/financing/groups",
    response_model=FinancingGroupDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
    dependencies=[Depends(require_admin)],
    responses={
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Key already in use"},
        422: {"model": ErrorResponse},
    },
)
def create_group(
    payload: FinancingGroupPayloadDTO,
    use_case: CreateGroup = Depends(get_create_group_use_case),
) -> FinancingGroupDTO:
    group = use_case.execute(FinancingMapper.to_domain_group(payload))
    return FinancingMapper.to_group_dto(group)


@router.put(
    "/financing/groups/{group_id}",
    response_model=FinancingGroupDTO,
    summary="Replace a group",
    dependencies=[Depends(require_admin)],
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
def update_group(
    group_id: str,
    payload: FinancingGroupPayloadDTO,
    use_case: UpdateGroup = Depends(get_update_group_use_case),
) -> FinancingGroupDTO:
    group = use_case.execute(FinancingMapper.to_domain_group(payload, group_id=group_id))
    return FinancingMapper.to_group_dto(group)


@router.delete(
    "/financing/groups/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a group",
    description="Plans keeping the deleted key are not touched.",
    dependencies=[Depends(require_admin)],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_group(
    group_id: str,
    use_case: DeleteGroup = Depends(get_delete_group_use_case),
) -> Response:
    use_case.execute(group_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
