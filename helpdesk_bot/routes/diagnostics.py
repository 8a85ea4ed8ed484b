"""
Diagnostics API routes
"""
from datetime import datetime
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from helpdesk_bot.models.schemas import LogSystem, utcnow
from helpdesk_bot.services.diagnostics import analyze_system_logs

router = APIRouter(prefix="/api/diagnostics", tags=["diagnostics"])


class DiagnosticsResponse(BaseModel):
    """Log analysis with the request it answers"""
    system: LogSystem
    time_range: str
    analyzed_at: datetime = Field(default_factory=utcnow)
    status: str
    findings: List[str]


@router.get("/{system}", response_model=DiagnosticsResponse)
async def get_diagnostics(system: LogSystem, time_range: str = "24h"):
    """
    Canned log analysis for a supported system

    time_range: 1h | 24h | 7d
    """
    try:
        analysis = analyze_system_logs(system, time_range)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return DiagnosticsResponse(
        system=system,
        time_range=time_range,
        status=analysis.status,
        findings=analysis.findings,
    )
