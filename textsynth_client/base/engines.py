"""
Engine identifiers per capability.

Each capability (text completion, translation) has a closed enumeration of
the engines that serve it. Members are ``str``-valued so they interpolate
directly into request paths (``/engines/{engine}/...``).
"""
from __future__ import annotations

from enum import Enum
from typing import Union


class CompletionEngine(str, Enum):
    """Language models serving completions, logprob and tokenize."""

    # 6B parameters, trained on the Pile; mostly English, also code.
    GPTJ_6B = "gptj_6B"
    # GPT-J fine tuned for French.
    BORIS_6B = "boris_6B"
    # 13B parameter English model.
    FAIRSEQ_GPT_13B = "fairseq_gpt_13B"
    # 20B parameters, same corpus as GPT-J.
    GPTNEOX_20B = "gptneox_20B"

    @property
    def is_completion(self) -> bool:
        return True

    @property
    def is_translation(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.value


class TranslationEngine(str, Enum):
    """Models serving the translate endpoint."""

    # 1.2B parameters, translates between 100 languages.
    M2M100_1_2B = "m2m100_1_2B"

    @property
    def is_completion(self) -> bool:
        return False

    @property
    def is_translation(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.value


Engine = Union[CompletionEngine, TranslationEngine]


__all__ = ["CompletionEngine", "TranslationEngine", "Engine"]
