"""
Completion request and streamed response chunk models.

Endpoint: ``POST {base}/engines/{engine}/completions``.

With ``stream=True`` the API writes several JSON answers back to back, each
followed by two line feeds; without it a single answer is returned. Both
shapes are decoded by the same stream driver.
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, field_validator

from ..base.dto import RequestModel, ResponseModel

LogitBias = Annotated[float, Field(ge=-100.0, le=100.0)]


class CompletionRequest(RequestModel):
    """Body of a completion request.

    Attributes:
        prompt: Input text to complete; it is not repeated in the output.
        max_tokens: Maximum number of generated tokens. Prompt plus generated
            text cannot exceed the engine's context length (2048 for GPT-J,
            1024 for the others).
        stream: Stream partial answers as they are generated.
        stop: Up to 5 strings that end generation; not included in the output.
        n: Number of completions generated from the prompt (1..16).
        temperature: Sampling temperature; usually better to tune ``top_p``
            or ``top_k``.
        top_k: Sample among the ``top_k`` most likely tokens (1..1000).
        top_p: Nucleus sampling cumulative probability (0..1); 1 disables it.
        logit_bias: Token index (as a string) to bias in -100..100.
        presence_penalty: Penalize tokens already generated (-2..2).
        frequency_penalty: Penalize tokens proportionally to their frequency
            in the generated text (-2..2).
        repetition_penalty: Divide the logits of already generated tokens by
            this value; 1 disables it.
        typical_p: Typical sampling threshold in (0, 1]; 1 disables it.
    """

    prompt: str
    max_tokens: Optional[int] = Field(default=None, ge=1)
    stream: Optional[bool] = None
    stop: Optional[List[str]] = Field(default=None, max_length=5)
    n: Optional[int] = Field(default=None, ge=1, le=16)
    temperature: Optional[float] = None
    top_k: Optional[int] = Field(default=None, ge=1, le=1000)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    logit_bias: Optional[Dict[str, LogitBias]] = None
    presence_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    frequency_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    repetition_penalty: Optional[float] = None
    typical_p: Optional[float] = Field(default=None, gt=0.0, le=1.0)


def string_or_list(value: Any) -> List[str]:
    """Normalize the ``text`` field: a bare string becomes a one-item list."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ValueError("expected a string or a list of strings")


class ResponseChunk(ResponseModel):
    """One decoded answer of a completion stream.

    Attributes:
        text: Completed text, one entry per requested completion (``n``).
        reached_end: True on the last answer.
        truncated_prompt: True when the prompt was cut to fit the context.
        input_tokens: Number of input tokens.
        output_tokens: Total number of generated tokens.
    """

    text: List[str]
    reached_end: bool
    truncated_prompt: Optional[bool] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None

    @field_validator("text", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> List[str]:
        return string_or_list(value)


__all__ = ["CompletionRequest", "ResponseChunk", "string_or_list"]
