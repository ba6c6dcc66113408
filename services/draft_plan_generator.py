"""
Draft repair plan generation through the OpenAI chat completions API.

The model runs in JSON mode with the DraftWorkOrder schema in its system
instructions. Its output is untrusted: parse_draft() either yields a
ValidDraft or a MalformedDraft with the reason, and a malformed draft fails
the planning run with DraftGenerationError. Nothing here repairs or
defaults fields; that is the reconciler's job once the draft has parsed.
"""

from dataclasses import dataclass
from typing import Optional, Union

from openai import AsyncOpenAI
from pydantic import ValidationError

from config import PlannerSettings
from models.work_order_models import DraftWorkOrder
from services.error_handlers import DraftGenerationError
from services.logger_singleton import LoggerSingleton
from services.prompt_builder import build_system_instructions

logger = LoggerSingleton.get_logger(__name__)


@dataclass(frozen=True)
class ValidDraft:
    draft: DraftWorkOrder


@dataclass(frozen=True)
class MalformedDraft:
    reason: str
    raw: str = ""


DraftParseResult = Union[ValidDraft, MalformedDraft]


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        problems.append(f"{location}: {error.get('msg')}")
    return "; ".join(problems)


def parse_draft(text: Optional[str]) -> DraftParseResult:
    """Parse generator output into a draft work order without trusting any field"""
    if text is None or not text.strip():
        return MalformedDraft(reason="empty response", raw=text or "")

    try:
        draft = DraftWorkOrder.model_validate_json(text.strip())
    except ValidationError as e:
        return MalformedDraft(reason=_describe_validation_error(e), raw=text)

    return ValidDraft(draft=draft)


class DraftPlanGenerator:
    """Asks the language model for a draft work order"""

    def __init__(self, client: AsyncOpenAI, model: str):
        self.client = client
        self.model = model
        self.instructions = build_system_instructions()

    @classmethod
    def from_settings(cls, settings: PlannerSettings) -> "DraftPlanGenerator":
        # the SDK retries twice by default
        client = AsyncOpenAI(api_key=settings.openai_api_key, base_url=settings.openai_base_url, max_retries=0)
        return cls(client, settings.model)

    async def generate(self, prompt: str) -> DraftWorkOrder:
        logger.info(f"Requesting repair plan from {self.model}")
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self.instructions},
                {"role": "user", "content": prompt}
            ],
            response_format={"type": "json_object"},
        )

        if not completion.choices:
            raise DraftGenerationError("model returned no choices")

        text = completion.choices[0].message.content
        result = parse_draft(text)
        if isinstance(result, MalformedDraft):
            logger.error(f"Malformed draft work order ({result.reason}). Response: {result.raw}")
            raise DraftGenerationError(result.reason)

        draft = result.draft
        logger.info(
            f"Parsed draft work order: {len(draft.tasks or [])} tasks, {len(draft.parts_used or [])} parts"
        )
        logger.debug(f"Draft response: {text}")
        return draft
