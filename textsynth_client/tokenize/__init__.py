"""Tokenize endpoint models.

Endpoint: ``POST {base}/engines/{engine}/tokenize``. Returns the token
indexes the engine's tokenizer produces for ``text``.
"""
from __future__ import annotations

from typing import List

from ..base.dto import RequestModel, ResponseModel


class TokenizeRequest(RequestModel):
    text: str


class TokenizeResponse(ResponseModel):
    tokens: List[int]


__all__ = ["TokenizeRequest", "TokenizeResponse"]
