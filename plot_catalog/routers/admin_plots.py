"""
Admin catalog endpoints: list, create, partial update, delete and spreadsheet import.
Every route requires a caller on the admin allow-list.
"""

from fastapi import APIRouter, Depends, File, Path, UploadFile, status
from uuid import UUID

from plot_catalog.models.user import User
from plot_catalog.services.plot import PlotService
from plot_catalog.schemas.plot import (
    PlotCountResponse,
    PlotCreateRequest,
    PlotImportResponse,
    PlotListResponse,
    PlotResponse,
    PlotUpdate,
    SuccessResponse,
)
from plot_catalog.schemas.error import get_admin_error_responses
from plot_catalog.utils.dependencies import get_current_admin_user, get_plot_service
from plot_catalog.utils.exceptions import BadRequestError
import logging

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/admin/plots", tags=["Admin"])


@router.get(
    "",
    response_model=PlotListResponse,
    status_code=status.HTTP_200_OK,
    summary="List catalog plots",
    responses=get_admin_error_responses()
)
async def list_plots(
    admin_user: User = Depends(get_current_admin_user),
    plot_service: PlotService = Depends(get_plot_service)
) -> PlotListResponse:
    plots = await plot_service.list_plots()
    return PlotListResponse(plots=[PlotResponse.model_validate(plot.to_dict()) for plot in plots])


@router.post(
    "",
    response_model=PlotCountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create plots",
    description="Create a single plot (`plot`) or a batch (`plots`); invalid items are dropped",
    responses=get_admin_error_responses(400)
)
async def create_plots(
    request: PlotCreateRequest,
    admin_user: User = Depends(get_current_admin_user),
    plot_service: PlotService = Depends(get_plot_service)
) -> PlotCountResponse:
    """
    Create catalog plots.

    Raises:
        BadRequestError: If nothing was sent
        NoValidRowsError: If every item was invalid
    """
    count = await plot_service.create_plots(request.items())
    return PlotCountResponse(count=count)


@router.post(
    "/import",
    response_model=PlotImportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Import plots from a spreadsheet",
    description="Upload a CSV or Excel file; Spanish or English column headers are accepted",
    responses=get_admin_error_responses(400)
)
async def import_plots(
    file: UploadFile = File(...),
    admin_user: User = Depends(get_current_admin_user),
    plot_service: PlotService = Depends(get_plot_service)
) -> PlotImportResponse:
    if not file.filename:
        raise BadRequestError("Filename is required")

    content = await file.read()
    count, total_rows = await plot_service.import_spreadsheet(file.filename, content)

    logger.info(f"Admin {admin_user.email} imported {count}/{total_rows} rows from {file.filename}")
    return PlotImportResponse(count=count, total_rows=total_rows)


@router.patch(
    "/{plot_id}",
    response_model=PlotResponse,
    status_code=status.HTTP_200_OK,
    summary="Update a plot",
    description="Only the fields sent are changed",
    responses=get_admin_error_responses(400, 404, 422)
)
async def update_plot(
    plot_data: PlotUpdate,
    plot_id: UUID = Path(..., description="Plot ID"),
    admin_user: User = Depends(get_current_admin_user),
    plot_service: PlotService = Depends(get_plot_service)
) -> PlotResponse:
    plot = await plot_service.update_plot(plot_id, plot_data)
    return PlotResponse.model_validate(plot.to_dict())


@router.delete(
    "/{plot_id}",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete a plot",
    responses=get_admin_error_responses(404)
)
async def delete_plot(
    plot_id: UUID = Path(..., description="Plot ID"),
    admin_user: User = Depends(get_current_admin_user),
    plot_service: PlotService = Depends(get_plot_service)
) -> SuccessResponse:
    await plot_service.delete_plot(plot_id)
    return SuccessResponse()
