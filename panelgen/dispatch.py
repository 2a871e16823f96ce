"""Boundary to the external generation backend.

Builds the request payload from a resolved configuration and hands it to a
``GenerationBackend``. The HTTP client itself lives outside this package;
``MockGenerationBackend`` stands in for it in tests and dry runs.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field

from .conditioning import ConditionBundle
from .engine import ResolvedConfig
from .models import ResolvedAdapterStack, extract_trigger_words

logger = logging.getLogger(__name__)


class AdapterParam(BaseModel):
    name: str
    strength: float


class ConditionParam(BaseModel):
    type: str
    image: str
    strength: float


class GenerationRequest(BaseModel):
    """Parameters forwarded verbatim to the generation backend."""

    prompt: str
    negative_prompt: str = ""
    width: int
    height: int
    steps: int
    cfg: float
    sampler: str
    scheduler: str
    model: str
    adapters: list[AdapterParam] = Field(default_factory=list, description="In application order")
    conditions: list[ConditionParam] = Field(default_factory=list, description="Primary condition first")


class GenerationResult(BaseModel):
    image_path: str
    request: GenerationRequest


class GenerationBackend(Protocol):
    async def generate(self, request: GenerationRequest) -> GenerationResult: ...


def build_generation_request(
    config: ResolvedConfig,
    prompt: str,
    bundle: ConditionBundle | None = None,
    adapters: ResolvedAdapterStack | None = None,
) -> GenerationRequest:
    """Assemble the backend payload.

    Adapters default to the stack resolved with the configuration. Their
    trigger phrases are prepended to the prompt. When a condition bundle is
    given, its hinted prompt replaces ``prompt``.
    """
    stack = adapters if adapters is not None else config.adapters
    text = bundle.prompt if bundle is not None else prompt
    triggers = extract_trigger_words(stack.filenames)
    if triggers:
        text = ", ".join([*triggers, text])

    negative = config.negative_prompt
    if bundle is not None and bundle.negative_prompt:
        negative = bundle.negative_prompt

    return GenerationRequest(
        prompt=text,
        negative_prompt=negative,
        width=config.width,
        height=config.height,
        steps=config.steps,
        cfg=config.cfg,
        sampler=config.sampler,
        scheduler=config.scheduler,
        model=config.model,
        adapters=[
            AdapterParam(name=applied.adapter.filename, strength=applied.strength)
            for applied in stack.adapters
        ],
        conditions=[
            ConditionParam(type=entry.backend_type.value, image=entry.image, strength=entry.strength)
            for entry in (bundle.conditions if bundle is not None else [])
        ],
    )


class MockGenerationBackend:
    """A backend that records requests without generating anything."""

    def __init__(self, output_dir: str | Path | None = None):
        self.output_dir = Path(output_dir) if output_dir is not None else None
        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        self.requests: list[GenerationRequest] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Record the request and return a placeholder path."""
        self.requests.append(request)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"mock_{self.call_count}_{timestamp}.txt"

        if self.output_dir is None:
            return GenerationResult(image_path=filename, request=request)

        filepath = self.output_dir / filename
        with open(filepath, "w") as f:
            f.write("MOCK IMAGE GENERATION\n")
            f.write("=====================\n\n")
            f.write(f"Prompt:\n{request.prompt}\n\n")
            f.write(f"Size: {request.width}x{request.height}\n")
            f.write(f"Model: {request.model}\n")
            f.write(f"Steps: {request.steps}  CFG: {request.cfg}  Sampler: {request.sampler}\n")
        logger.debug(f"Mock generation written to {filepath}")
        return GenerationResult(image_path=str(filepath), request=request)
