"""
Variable replacers.

Replacers supply substitution values while a request is prepared; the
engine runs them in registry order over the request text. The two
replacers here ask the user:

    {{$input Api key $value: default}}   -> text input prompt
    {{$pick Environment $value: dev,prod}} -> single choice prompt

A dismissed prompt makes replace() return None, which tells the engine to
stop preparing the request.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence

logger = logging.getLogger(__name__)

InputPrompt = Callable[[str, str | None], Awaitable[str | None]]
PickPrompt = Callable[[str, Sequence[str]], Awaitable[str | None]]


class VariableReplacer(ABC):
    """Base class for variable replacers."""

    @property
    @abstractmethod
    def type(self) -> str:
        """Replacer identifier."""
        ...

    @abstractmethod
    async def replace(self, text: str) -> str | None:
        """
        Substitute placeholders in ``text``.

        Returns:
            Text with placeholders replaced, or None if the user cancelled
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type='{self.type}')"


class _PromptVariableReplacer(VariableReplacer):
    pattern: re.Pattern[str]

    async def replace(self, text: str) -> str | None:
        result: list[str] = []
        position = 0
        for match in self.pattern.finditer(text):
            placeholder = match.group("placeholder").strip()
            value = match.group("value")
            answer = await self._ask(placeholder, value.strip() if value is not None else None)
            if answer is None:
                logger.info(f"Prompt dismissed: {placeholder}")
                return None
            result.append(text[position : match.start()])
            result.append(answer)
            position = match.end()
        result.append(text[position:])
        return "".join(result)

    @abstractmethod
    async def _ask(self, placeholder: str, value: str | None) -> str | None: ...


class ShowInputBoxVariableReplacer(_PromptVariableReplacer):
    """Replaces ``{{$input <prompt> [$value: <default>]}}`` with typed input."""

    pattern = re.compile(
        r"\{\{\s*\$input\s*(?P<placeholder>[^$}]*)(?:\$value:\s*(?P<value>[^}]*))?\}\}"
    )

    def __init__(self, prompt: InputPrompt):
        self._prompt = prompt

    @property
    def type(self) -> str:
        return "showInputBox"

    async def _ask(self, placeholder: str, value: str | None) -> str | None:
        return await self._prompt(placeholder, value)


class ShowQuickpickVariableReplacer(_PromptVariableReplacer):
    """Replaces ``{{$pick <prompt> $value: a,b,c}}`` with the chosen item."""

    pattern = re.compile(
        r"\{\{\s*\$pick\s*(?P<placeholder>[^$}]*)(?:\$value:\s*(?P<value>[^}]*))?\}\}"
    )

    def __init__(self, pick: PickPrompt):
        self._pick = pick

    @property
    def type(self) -> str:
        return "showQuickpick"

    async def _ask(self, placeholder: str, value: str | None) -> str | None:
        items = [item.strip() for item in (value or "").split(",") if item.strip()]
        return await self._pick(placeholder, items)
