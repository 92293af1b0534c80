"""Log probability of a continuation given a context.

Endpoint: ``POST {base}/engines/{engine}/logprob``.
"""
from __future__ import annotations

from typing import Optional

from pydantic import Field

from ..base.dto import RequestModel, ResponseModel


class LogprobRequest(RequestModel):
    """``context`` may be empty; ``continuation`` must hold at least one character."""

    context: str
    continuation: str = Field(min_length=1)


class LogprobResponse(ResponseModel):
    """Attributes:
    logprob: Logarithm of the probability that ``continuation`` follows ``context``.
    is_greedy: True if ``continuation`` would be produced by greedy sampling.
    input_tokens: Number of tokens of ``context`` plus ``continuation``.
    """

    logprob: float
    is_greedy: bool
    input_tokens: Optional[int] = None


__all__ = ["LogprobRequest", "LogprobResponse"]
