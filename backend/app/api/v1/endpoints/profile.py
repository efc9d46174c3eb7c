"""
Profile & Portfolio API Endpoints

- Own profile (name and email edits)
- Resume section and custom links
- Portfolio view and export (HTML, text, PDF)
"""

import re
from typing import Any, Dict
from urllib.parse import quote
from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from app.core.app_state import AppState
from app.modules.auth.dependencies import get_app_state
from app.schemas.records import CustomLink, ProfileResponse
from app.services.portfolio_service import (
    PortfolioService,
    render_portfolio_html,
    render_portfolio_pdf,
    render_portfolio_text,
)

router = APIRouter()


def attachment_disposition(slug: str, ext: str) -> str:
    """
    Content-Disposition for a download. Header values must be latin-1, so
    `filename` carries an ASCII fallback and `filename*` the UTF-8 name.
    """
    ascii_slug = re.sub(r"[^a-z0-9-]+", "", slug.encode("ascii", "ignore").decode()).strip("-")
    fallback = f"{ascii_slug}-portfolio" if ascii_slug else "portfolio"
    return (
        f'attachment; filename="{fallback}.{ext}"; '
        f"filename*=UTF-8''{quote(f'{slug}-portfolio.{ext}')}"
    )


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(state: AppState = Depends(get_app_state)):
    """Get the signed-in profile"""
    return state.profile


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    fields: Dict[str, Any],
    state: AppState = Depends(get_app_state)
):
    """Update full name and/or email. Any other field is rejected."""
    profile = await PortfolioService(state.store).update_profile(state.profile, fields)
    state.refresh(profile)
    return profile


@router.put("/me/resume", response_model=ProfileResponse)
async def update_my_resume(
    fields: Dict[str, Any],
    state: AppState = Depends(get_app_state)
):
    """Update resume details; skills, languages and interests accept comma-separated text"""
    profile = await PortfolioService(state.store).update_resume(state.profile, fields)
    state.refresh(profile)
    return profile


@router.post("/me/links", response_model=ProfileResponse, status_code=201)
async def add_custom_link(
    link: CustomLink,
    state: AppState = Depends(get_app_state)
):
    profile = await PortfolioService(state.store).add_custom_link(state.profile, link.name, link.url, link.icon)
    state.refresh(profile)
    return profile


@router.delete("/me/links/{index}", response_model=ProfileResponse)
async def remove_custom_link(
    index: int,
    state: AppState = Depends(get_app_state)
):
    profile = await PortfolioService(state.store).remove_custom_link(state.profile, index)
    state.refresh(profile)
    return profile


@router.get("/me/portfolio")
async def get_my_portfolio(state: AppState = Depends(get_app_state)):
    """Portfolio view-model: identity, resume, links and achievement stats"""
    return await PortfolioService(state.store).portfolio(state.profile)


@router.get("/me/portfolio/export")
async def export_my_portfolio(
    format: str = Query("html", pattern="^(html|text|pdf)$"),
    state: AppState = Depends(get_app_state)
):
    """
    Export the portfolio.

    html opens the browser's print dialog on load; text and pdf download
    as files.
    """
    portfolio = await PortfolioService(state.store).portfolio(state.profile)
    slug = "-".join((state.profile.get("full_name") or "portfolio").lower().split())

    if format == "text":
        return PlainTextResponse(
            render_portfolio_text(portfolio),
            headers={"Content-Disposition": attachment_disposition(slug, "txt")}
        )
    if format == "pdf":
        return Response(
            content=render_portfolio_pdf(portfolio),
            media_type="application/pdf",
            headers={"Content-Disposition": attachment_disposition(slug, "pdf")}
        )
    return HTMLResponse(render_portfolio_html(portfolio))
