"""Shared fixtures for framework-eval tests."""

from typing import Any, Dict, List, Optional, Union

import pytest

from framework_eval.config import set_config
from framework_eval.core.content import ContentSummary
from framework_eval.core.frameworks import FrameworkDefinition
from framework_eval.core.providers.base import (
    EvaluationMeta,
    EvaluationPrompt,
    EvaluationProvider,
)


class StubProvider(EvaluationProvider):
    """Answers from a ``category_key -> response | exception`` table."""

    def __init__(
        self,
        responses: Optional[Dict[str, Union[Dict[str, Any], Exception]]] = None,
        name: str = "stub",
    ):
        self.responses = responses or {}
        self.name = name
        self.calls: List[EvaluationMeta] = []
        self.prompts: List[EvaluationPrompt] = []

    def get_provider_name(self) -> str:
        return self.name

    async def evaluate(self, prompt: EvaluationPrompt, meta: EvaluationMeta) -> Dict[str, Any]:
        self.calls.append(meta)
        self.prompts.append(prompt)
        outcome = self.responses.get(meta.category_key, {})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep the process-global config from leaking between tests."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def stub_provider_cls():
    return StubProvider


@pytest.fixture
def value_framework() -> FrameworkDefinition:
    """Two small categories: Functional (2 elements) and Emotional (1)."""
    return FrameworkDefinition.from_mapping(
        {
            "name": "Mini Elements",
            "categories": [
                {
                    "name": "Functional",
                    "key": "functional",
                    "elements": ["saves_time", "simplifies"],
                },
                {
                    "name": "Emotional",
                    "key": "emotional",
                    "elements": ["reduces_anxiety"],
                },
            ],
        }
    )


@pytest.fixture
def page_content() -> ContentSummary:
    return ContentSummary(
        url="https://example.com",
        title="Example Co - Automate your invoices",
        meta_description="Invoice automation for small teams.",
        keywords=["invoices", "automation"],
        body_text="Example Co saves finance teams ten hours a week. " * 20,
        headings=["Automate invoices", "Pricing"],
    )
