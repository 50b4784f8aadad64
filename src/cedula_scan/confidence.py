"""
Confidence aggregation.

A score starts at a base value and every soft finding deducts its penalty.
The result is clamped to 0..100. Findings are kept so callers can see why a
record scored low.
"""

from __future__ import annotations

import logging

from cedula_scan.models.findings import Finding, FindingCode

logger = logging.getLogger(__name__)

MRZ_BASE_CONFIDENCE = 100
FINDING_PENALTY = 10


class ConfidenceScore:
    """Accumulates findings and the resulting confidence value."""

    def __init__(self, base: int = MRZ_BASE_CONFIDENCE) -> None:
        self.base = base
        self._findings: list[Finding] = []

    def penalize(
        self,
        code: FindingCode,
        message: str,
        *,
        expected: str | None = None,
        actual: str | None = None,
        penalty: int = FINDING_PENALTY,
    ) -> Finding:
        finding = Finding(
            code=code,
            message=message,
            penalty=penalty,
            expected_value=expected,
            actual_value=actual,
        )
        self._findings.append(finding)
        logger.debug("Confidence finding %s", finding)
        return finding

    def require(
        self,
        condition: bool,
        code: FindingCode,
        message: str,
        *,
        expected: str | None = None,
        actual: str | None = None,
    ) -> bool:
        """Record a finding unless ``condition`` holds. Returns ``condition``."""
        if not condition:
            self.penalize(code, message, expected=expected, actual=actual)
        return condition

    @property
    def findings(self) -> tuple[Finding, ...]:
        return tuple(self._findings)

    @property
    def value(self) -> int:
        total = self.base - sum(finding.penalty for finding in self._findings)
        return max(0, min(100, total))

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        codes = ", ".join(f.code.value for f in self._findings)
        return f"ConfidenceScore(value={self.value}, findings=[{codes}])"
