# student_hub/api/v1/portfolio.py
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from student_hub.api.deps import get_portfolio_service
from student_hub.services.portfolio_service import PortfolioService, PublicPortfolio

router = APIRouter()


@router.get("/portfolio/{student_id}", response_model=PublicPortfolio)
async def get_portfolio(
    student_id: str,
    portfolio_service: PortfolioService = Depends(get_portfolio_service)
):
    """
    Public, unauthenticated view of a student's verified achievements
    """
    return await portfolio_service.get_portfolio(student_id)


@router.get("/portfolio/{student_id}/export")
async def export_portfolio(
    student_id: str,
    format: str = Query("csv", pattern="^(csv|pdf)$"),
    portfolio_service: PortfolioService = Depends(get_portfolio_service)
):
    """Export the public portfolio as CSV or PDF"""
    portfolio = await portfolio_service.get_portfolio(student_id)

    if format == "csv":
        data = await portfolio_service.export_to_csv(portfolio)
        media_type = "text/csv"
    else:
        data = await portfolio_service.export_to_pdf(portfolio)
        media_type = "application/pdf"

    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="portfolio_{student_id}.{format}"'}
    )
