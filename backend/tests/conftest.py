"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests.
"""

import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Generator, Optional, Union
from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env file from project root BEFORE any fixtures run
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

from edugen.config.settings import Settings  # noqa: E402
from edugen.enums.exercise import (  # noqa: E402
    ContentRating,
    DifficultyLevel,
    ExerciseType,
    Subject,
    SubjectCategory,
)
from edugen.models.exercise import Exercise, GenerationRequest  # noqa: E402
from edugen.services.llm.client import InferenceRequest, InferenceResult  # noqa: E402


# ============================================================================
# Environment Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """
    Set up test environment variables before any tests run.

    Overrides values from .env files so tests never reach real providers.
    """
    original_env = os.environ.copy()

    test_env = {
        "REDIS_URL": os.environ.get("REDIS_URL", "redis://localhost:6379/1"),
        "CLOUDFLARE_API_KEY": "test-api-key",
        "DEBUG": "true",
    }
    os.environ.update(test_env)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with short, distinct model ids."""
    return Settings(
        DEFAULT_MODEL="fast-model",
        QUALITY_MODEL="quality-model",
        REASONING_MODEL="reasoning-model",
        LIGHT_MODEL="light-model",
        MAX_EXERCISES_PER_REQUEST=10,
        CACHE_TTL_SECONDS=86400,
    )


# ============================================================================
# Redis Mocks
# ============================================================================


@pytest.fixture
def mock_redis() -> MagicMock:
    """
    Create a mock Redis client for unit testing.

    This allows testing Redis-dependent code without a real Redis server.
    """
    mock = MagicMock()
    mock.get = AsyncMock(return_value=None)
    mock.set = AsyncMock(return_value=True)
    mock.setex = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    mock.ping = AsyncMock(return_value=True)
    return mock


class InMemoryStore:
    """KeyValueStore kept in a dict; can be told to fail."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = False):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.get_calls = 0
        self.put_calls = 0

    async def get(self, key: str) -> Optional[str]:
        self.get_calls += 1
        if self.fail_reads:
            raise ConnectionError("redis unavailable")
        return self.data.get(key)

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self.put_calls += 1
        if self.fail_writes:
            raise ConnectionError("redis unavailable")
        self.data[key] = value
        self.ttls[key] = ttl_seconds


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


# ============================================================================
# Inference Fakes
# ============================================================================


Outcome = Union[str, BaseException]


class FakeBackend:
    """
    Scripted InferenceBackend.

    ``script`` maps a model id to the outcomes of successive calls: a string
    is returned as generated text, an exception is raised. Models without a
    script raise a "model not found" error.
    """

    def __init__(self, script: Optional[dict[str, list[Outcome]]] = None, tokens: int = 100):
        self.script = {model: list(outcomes) for model, outcomes in (script or {}).items()}
        self.tokens = tokens
        self.calls: list[tuple[str, InferenceRequest]] = []

    @property
    def models_called(self) -> list[str]:
        return [model for model, _ in self.calls]

    async def invoke(self, model_id: str, request: InferenceRequest) -> InferenceResult:
        self.calls.append((model_id, request))
        outcomes = self.script.get(model_id)
        if not outcomes:
            raise RuntimeError(f"Model {model_id} not found")
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return InferenceResult(text=outcome, tokens_used=self.tokens)


@pytest.fixture
def fake_backend_factory() -> Callable[..., FakeBackend]:
    return FakeBackend


# ============================================================================
# Sample Data
# ============================================================================


def generated_payload(**overrides: Any) -> dict[str, Any]:
    """A well-formed generated exercise payload (multiple-choice)."""
    payload = {
        "instruction": "Choose the correct answer.",
        "content": {
            "type": "multiple-choice",
            "question": "What is 2 + 2?",
            "options": [
                {"id": "a", "text": "3"},
                {"id": "b", "text": "4"},
                {"id": "c", "text": "5"},
            ],
            "multiSelect": False,
        },
        "solution": {
            "correctAnswer": "b",
            "explanation": "2 + 2 = 4",
            "steps": [{"stepNumber": 1, "description": "Add the numbers"}],
        },
        "hints": ["Count on your fingers", "It is even", "It is less than 5", "It is 4"],
        "estimatedTime": 45,
        "tags": ["addition"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def valid_generated_text() -> str:
    return json.dumps(generated_payload())


@pytest.fixture
def generation_request() -> GenerationRequest:
    return GenerationRequest(
        subject=Subject.MATHEMATICS,
        category=SubjectCategory.ARITHMETIC,
        topic="Addition",
        difficulty=DifficultyLevel.BEGINNER,
    )


def build_exercise(
    exercise_type: ExerciseType = ExerciseType.MULTIPLE_CHOICE,
    correct_answer: Any = "b",
    content: Optional[dict[str, Any]] = None,
    validation: Optional[dict[str, Any]] = None,
    hints: Optional[list[str]] = None,
    difficulty: DifficultyLevel = DifficultyLevel.INTERMEDIATE,
    time_limit: Optional[int] = None,
    subject: Subject = Subject.MATHEMATICS,
) -> Exercise:
    """Build a stored-shape Exercise of any type for grading tests."""
    default_content: dict[str, dict[str, Any]] = {
        ExerciseType.MULTIPLE_CHOICE: {
            "question": "Pick one",
            "options": [{"id": "a", "text": "A"}, {"id": "b", "text": "B"}],
        },
        ExerciseType.FILL_BLANK: {"template": "3 of 4 equal parts is [BLANK]", "blankCount": 1},
        ExerciseType.MATCHING: {
            "leftColumn": [{"id": "1", "text": "H2O"}, {"id": "2", "text": "NaCl"}],
            "rightColumn": [{"id": "a", "text": "water"}, {"id": "b", "text": "salt"}],
        },
        ExerciseType.TRUE_FALSE: {
            "statements": [{"id": "1", "text": "s1"}, {"id": "2", "text": "s2"}],
        },
        ExerciseType.CALCULATION: {"problem": "Compute the speed"},
    }
    points = {
        DifficultyLevel.BEGINNER: 10,
        DifficultyLevel.ELEMENTARY: 15,
        DifficultyLevel.INTERMEDIATE: 20,
        DifficultyLevel.ADVANCED: 30,
        DifficultyLevel.EXPERT: 50,
    }[difficulty]

    return Exercise.model_validate(
        {
            "id": "mat-gen-test-abc123",
            "subject": subject,
            "category": SubjectCategory.ALGEBRA,
            "difficulty": difficulty,
            "type": exercise_type,
            "topic": "test topic",
            "problem": {
                "instruction": "Answer the question.",
                "content": {
                    "type": exercise_type.value,
                    **(content if content is not None else default_content.get(exercise_type, {})),
                },
                "timeLimit": time_limit,
                "maxPoints": points,
            },
            "solution": {"correctAnswer": correct_answer, "explanation": "because"},
            "hints": hints if hints is not None else ["first", "second", "third"],
            "validation": {
                "passingScore": 70,
                "allowPartialCredit": True,
                "caseSensitive": False,
                "hintPenalty": 5,
                **(validation or {}),
            },
            "metadata": {
                "createdAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
                "generatedBy": "fast-model",
                "contentRating": ContentRating.ALL_AGES,
                "tags": ["test"],
                "estimatedTime": 120,
            },
        }
    )


@pytest.fixture
def exercise_factory() -> Callable[..., Exercise]:
    return build_exercise
