"""Text generation for scenarios, coaching feedback and continuation steps (OpenAI, JSON mode)."""
import asyncio
import json
import logging
from functools import lru_cache
from typing import Any

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from agile_trainer.core.config import Settings, get_settings
from agile_trainer.core.errors import GenerationError
from agile_trainer.schemas.insight import GeneratedInsightSchema
from agile_trainer.schemas.scenario import GeneratedScenarioSchema, StepSchema

logger = logging.getLogger(__name__)

SCENARIO_SYSTEM_PROMPT = (
    "You are an expert Agile coach and project management trainer. Generate realistic, "
    "educational scenarios that help project managers develop practical skills."
)

FEEDBACK_SYSTEM_PROMPT = (
    "You are an experienced Agile coach providing personalized feedback to help project "
    "managers improve their skills. Be specific, constructive, and encouraging."
)

NEXT_STEP_SYSTEM_PROMPT = (
    "You are creating an educational Agile simulation. Make the scenario progression feel "
    "realistic and challenging while maintaining educational value."
)

STEP_FORMAT = """{
  "id": 1,
  "title": "short step title",
  "situation": "what is happening",
  "characters": [{"name": "...", "role": "...", "personality": "...", "avatar": "initials"}],
  "decisions": [
    {"id": 1, "text": "...", "description": "...", "points": 25, "feedback": "..."}
  ]
}"""


def _scenario_prompt(framework: str, difficulty: str, topic: str | None) -> str:
    focus = f" focused on {topic}" if topic else ""
    return f"""Generate a realistic Agile project management scenario for {framework} framework at {difficulty} level{focus}.

The scenario should address real-world challenges that project managers face, including:
- Stakeholder conflicts and competing priorities
- Time pressure and decision-making under uncertainty
- Team dynamics and communication challenges
- Technical constraints and resource limitations

Include:
1. A compelling title and description
2. Estimated duration (10-30 minutes)
3. 2-3 learning objectives
4. At least one detailed step with:
   - Realistic situation description
   - 2-3 key characters with names, roles, and personality traits
   - 4 decision options with different point values (10-25 points)
   - Specific feedback for each decision explaining why it's effective or not

Respond with valid JSON in this exact format:
{{
  "title": "...",
  "description": "...",
  "duration": 15,
  "learningObjectives": ["...", "..."],
  "content": {{"steps": [{STEP_FORMAT}]}}
}}"""


def _feedback_prompt(decisions: list[dict], profile: dict) -> str:
    strengths = ", ".join(profile.get("strengths") or []) or "None identified"
    weaknesses = ", ".join(profile.get("weaknesses") or []) or "None identified"
    trace = "\n".join(
        f"Step {d.get('stepId')}: Decision {d.get('decisionId')} ({d.get('points')} points)" for d in decisions
    )
    return f"""Analyze the user's performance in an Agile scenario and provide personalized coaching feedback.

User Profile:
- Completed scenarios: {profile.get("completedScenarios", 0)}
- Success rate: {profile.get("successRate", 0)}%
- Known strengths: {strengths}
- Areas for improvement: {weaknesses}

User Decisions:
{trace}

Provide 2-3 specific, actionable insights focusing on:
1. What they did well (strengths to reinforce)
2. Areas for improvement with specific suggestions
3. Personalized recommendations based on their profile

Each insight should be 1-2 sentences and directly applicable to real project management situations.

Respond with valid JSON in this exact format:
{{"feedback": [{{"type": "strength|improvement|recommendation|insight", "title": "...", "description": "...", "priority": "low|medium|high"}}]}}"""


def _next_step_prompt(step: StepSchema, decision_id: int, points: int, context: dict) -> str:
    return f"""Continue an Agile scenario based on the user's decision.

Current Scenario: {context.get("title")} ({context.get("framework")}, {context.get("difficulty")})

Previous Step:
- Situation: {step.situation}
- User chose decision {decision_id} ({points} points)

Generate the next logical step that:
1. Builds on the consequences of their decision
2. Introduces new challenges or complications
3. Maintains realistic project management dynamics
4. Provides 4 new decision options with varying effectiveness

Use id {step.id + 1} for the new step.

Respond with valid JSON in this exact format:
{STEP_FORMAT}"""


class TextGenerator:
    """Thin async wrapper around the chat completions API that always returns parsed JSON."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None):
        self.model = settings.openai_model
        self.timeout = settings.generation_timeout_seconds
        self._client = client
        if self._client is None and settings.openai_api_key:
            self._client = AsyncOpenAI(api_key=settings.openai_api_key, timeout=self.timeout)

    async def generate_json(self, system: str, prompt: str, temperature: float = 0.7) -> dict[str, Any]:
        if self._client is None:
            raise GenerationError("OpenAI API key is not configured")

        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": system},
                        {"role": "user", "content": prompt},
                    ],
                    response_format={"type": "json_object"},
                    temperature=temperature,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise GenerationError(f"Text generation timed out after {self.timeout:g}s") from exc
        except OpenAIError as exc:
            raise GenerationError(f"Text generation failed: {exc}") from exc

        content = (response.choices[0].message.content or "").strip() if response.choices else ""
        if not content:
            raise GenerationError("Text generation returned an empty response")
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            raise GenerationError("Text generation did not return valid JSON") from exc
        if not isinstance(payload, dict):
            raise GenerationError("Text generation returned JSON that is not an object")
        return payload

    async def generate_scenario(self, framework: str, difficulty: str, topic: str | None = None) -> GeneratedScenarioSchema:
        payload = await self.generate_json(
            SCENARIO_SYSTEM_PROMPT, _scenario_prompt(framework, difficulty, topic), temperature=0.8
        )
        try:
            return GeneratedScenarioSchema.model_validate(payload)
        except ValidationError as exc:
            raise GenerationError(f"Generated scenario is malformed: {exc.error_count()} error(s)") from exc

    async def generate_feedback(self, scenario_id: int, decisions: list[dict], profile: dict) -> list[GeneratedInsightSchema]:
        """Coaching insights for a decision trace. Unusable entries are dropped, not fatal."""
        payload = await self.generate_json(FEEDBACK_SYSTEM_PROMPT, _feedback_prompt(decisions, profile))
        entries = payload.get("feedback")
        if not isinstance(entries, list):
            logger.warning("Feedback payload for scenario %s has no feedback list", scenario_id)
            return []

        insights = []
        for entry in entries:
            try:
                insights.append(GeneratedInsightSchema.model_validate(entry))
            except ValidationError:
                logger.warning("Dropping malformed feedback entry for scenario %s: %r", scenario_id, entry)
        return insights

    async def generate_next_step(self, step: StepSchema, decision_id: int, points: int, context: dict) -> StepSchema:
        payload = await self.generate_json(
            NEXT_STEP_SYSTEM_PROMPT, _next_step_prompt(step, decision_id, points, context), temperature=0.8
        )
        try:
            return StepSchema.model_validate(payload)
        except ValidationError as exc:
            raise GenerationError(f"Generated step is malformed: {exc.error_count()} error(s)") from exc


@lru_cache
def _default_generator() -> TextGenerator:
    return TextGenerator(get_settings())


def get_generator() -> TextGenerator:
    """FastAPI dependency; tests override it with a fake."""
    return _default_generator()
