"""Prompt templates used by the model gateway.

Templates are addressed by a stable key and rendered with ``{{name}}``
placeholders. :class:`BuiltinPromptProvider` ships the default wording;
deployments can pass any object following :class:`PromptProvider` to the
gateway instead.
"""

from __future__ import annotations

import re
from typing import Dict, Mapping, Optional, Protocol, runtime_checkable

_PLACEHOLDER = re.compile(r"\{\{\s*([a-zA-Z_][a-zA-Z0-9_]*)\s*\}\}")


@runtime_checkable
class PromptProvider(Protocol):
    """Keyed access to prompt text.

    ``version()`` returns a short identifier that can be logged next to model
    calls without exposing prompt content.
    """

    def get(self, name: str, locale: str = "en") -> str:
        """Return the template for ``name``; raise ``KeyError`` when unknown."""
        ...

    def version(self) -> str: ...

    def refresh(self) -> None: ...


_BUILTIN_PROMPTS: Dict[str, Dict[str, str]] = {
    "en": {
        "executor/system": (
            "You are PlanCraft, a marketing assistant executing an approved plan one step at a time. "
            "Resolve the current step either by answering directly or by calling exactly one of the "
            "available tools. Never invent asset ids or URLs; only use assets listed in the context."
        ),
        "executor/step": (
            "Objective: {{objective_title}}\n"
            "Brief: {{objective_brief}}\n"
            "{{recurrence_context}}"
            "\n"
            "Current step: {{step_description}}\n"
            "\n"
            "Project assets (JSON):\n{{assets}}\n"
            "\n"
            "Recent conversation:\n{{history}}\n"
            "\n"
            "Available tools (JSON schemas):\n{{tools}}\n"
            "\n"
            'Decide how to complete the current step. Answer with kind="text" and the result in `text`, '
            'or with kind="tool_call", the tool name in `tool_name` and its arguments in `arguments`.'
        ),
        "executor/summarize_system": (
            "You explain tool results to a marketer in a few friendly sentences. "
            "Mention created asset names and links when present. If the tool failed, say what went wrong "
            "and what the user can do about it."
        ),
        "executor/summarize": (
            "Tool result:\n{{tool_output}}\n"
            "\n"
            "Project assets (JSON):\n{{assets}}\n"
            "\n"
            "Recent conversation:\n{{history}}\n"
            "\n"
            "Summarize the outcome for the user."
        ),
    }
}


def render(template: str, variables: Mapping[str, object]) -> str:
    """Substitute ``{{name}}`` placeholders; unknown placeholders render empty."""
    return _PLACEHOLDER.sub(lambda m: str(variables.get(m.group(1), "")), template)


class BuiltinPromptProvider(PromptProvider):
    """
    In-repo prompts for the plan executor.

    Args:
        prompts: Optional overrides, structured as ``{locale: {key: text}}``.
        version_id: Identifier logged with model calls.
    """

    def __init__(self, *, prompts: Optional[Dict[str, Dict[str, str]]] = None, version_id: str = "builtin-v1") -> None:
        self._prompts = prompts or _BUILTIN_PROMPTS
        self._version = version_id

    def get(self, name: str, locale: str = "en") -> str:
        bucket = self._prompts.get(locale) or {}
        try:
            return bucket[name]
        except KeyError as exc:
            raise KeyError(f"prompt not found: locale={locale!r} name={name!r}") from exc

    def version(self) -> str:
        return self._version

    def refresh(self) -> None:
        """Builtin provider has no external state to refresh (no-op)."""
        return None
