"""
Translate endpoint models.

Endpoint: ``POST {base}/engines/{engine}/translate``; served only by
translation engines. Up to 64 texts are translated in one call.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator

from ..base.dto import RequestModel, ResponseModel

AUTO_DETECT = "auto"


def _check_lang_code(value: str) -> str:
    if len(value) not in (2, 3):
        raise ValueError("language code must be 2 or 3 characters (ISO 639)")
    return value


class TranslateRequest(RequestModel):
    """Body of a translate request.

    Attributes:
        text: Sentences to translate, 1 to 64 items.
        source_lang: ISO 639 code of the source language, or ``"auto"`` to
            detect it per text.
        target_lang: ISO 639 code of the target language.
        num_beams: Beam search width (1..5); higher is slower and usually better.
        split_sentences: Let the server split each text into sentences.
    """

    text: List[str] = Field(min_length=1, max_length=64)
    source_lang: str
    target_lang: str
    num_beams: Optional[int] = Field(default=None, ge=1, le=5)
    split_sentences: Optional[bool] = None

    @field_validator("source_lang")
    @classmethod
    def _source_lang(cls, value: str) -> str:
        if value == AUTO_DETECT:
            return value
        return _check_lang_code(value)

    @field_validator("target_lang")
    @classmethod
    def _target_lang(cls, value: str) -> str:
        return _check_lang_code(value)


class Translation(ResponseModel):
    text: str
    detected_source_lang: Optional[str] = None


class TranslateResponse(ResponseModel):
    """One translation per input text, in input order."""

    translations: List[Translation]
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


__all__ = ["AUTO_DETECT", "TranslateRequest", "Translation", "TranslateResponse"]
