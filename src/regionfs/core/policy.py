"""Policy and permissions for tool execution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RiskLevel(str, Enum):
    SAFE = "safe"
    CONFIRM = "confirm"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class PolicyDecision:
    decision: Decision
    reason: str


class ToolPolicy:
    def __init__(
        self,
        deny_tools: set[str] | None = None,
        read_only: bool = False,
    ) -> None:
        self._deny_tools = deny_tools or set()
        self._read_only = read_only

    def evaluate(self, tool_name: str, risk_level: RiskLevel) -> PolicyDecision:
        if tool_name in self._deny_tools:
            return PolicyDecision(Decision.DENY, "Tool is blocked by policy")
        if self._read_only and risk_level is not RiskLevel.SAFE:
            return PolicyDecision(Decision.DENY, "Server is read-only")
        if risk_level is RiskLevel.SAFE:
            return PolicyDecision(Decision.ALLOW, "Safe tool")
        return PolicyDecision(Decision.ALLOW, "Mutating tool allowed")
