"""
System log diagnostics

Canned analysis per system. The status and findings below are part of the
observable contract of the workflow agent and the diagnostics endpoint.
"""
from typing import Dict, Union

from helpdesk_bot.models.schemas import LogAnalysis, LogSystem

TIME_RANGES = ("1h", "24h", "7d")

_MOCK_RESULTS: Dict[LogSystem, LogAnalysis] = {
    LogSystem.VPN: LogAnalysis(
        status="healthy",
        findings=[
            "No connection failures detected in the last 24 hours",
            "Average connection time: 2.3 seconds",
            "98.5% uptime maintained",
        ],
    ),
    LogSystem.EMAIL: LogAnalysis(
        status="warning",
        findings=[
            "3 delivery delays detected (avg 45 seconds)",
            "Spam filter blocked 127 messages",
            "All mailbox sync operations successful",
        ],
    ),
    LogSystem.NETWORK: LogAnalysis(
        status="healthy",
        findings=[
            "Bandwidth utilization at 45%",
            "No packet loss detected",
            "DNS resolution time: 12ms average",
        ],
    ),
    LogSystem.AUTHENTICATION: LogAnalysis(
        status="healthy",
        findings=[
            "2 failed login attempts detected (normal range)",
            "SSO token refresh working correctly",
            "MFA adoption rate: 94%",
        ],
    ),
}


def analyze_system_logs(system: Union[LogSystem, str], time_range: str = "24h") -> LogAnalysis:
    """
    Analyze logs for a system

    Args:
        system: vpn | email | network | authentication
        time_range: 1h | 24h | 7d (accepted for the tool contract; the
            canned findings do not vary with it)

    Returns:
        LogAnalysis copy with status and findings

    Raises:
        ValueError: Unknown system or time range
    """
    if time_range not in TIME_RANGES:
        raise ValueError(f"Invalid time range: {time_range}")
    return _MOCK_RESULTS[LogSystem(system)].model_copy(deep=True)
