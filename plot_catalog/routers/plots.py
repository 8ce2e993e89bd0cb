"""
Public catalog endpoint.
"""

from fastapi import APIRouter, Depends, status
from plot_catalog.services.plot import PlotService
from plot_catalog.schemas.plot import PlotListResponse, PlotResponse
from plot_catalog.utils.dependencies import get_plot_service


router = APIRouter(prefix="/plots", tags=["Catalog"])


@router.get(
    "",
    response_model=PlotListResponse,
    status_code=status.HTTP_200_OK,
    summary="List catalog plots",
    description="Every plot in the catalog, most recent first. No authentication required."
)
async def list_plots(
    plot_service: PlotService = Depends(get_plot_service)
) -> PlotListResponse:
    plots = await plot_service.list_plots()
    return PlotListResponse(plots=[PlotResponse.model_validate(plot.to_dict()) for plot in plots])
