"""
LLM Service - language model capability boundary

Provides a single interface over Google Gemini (default) and OpenAI for:
- Structured extraction validated against a pydantic schema
- Free-text generation (blocking and streamed)
- Query embeddings for knowledge retrieval

Structured calls never raise: provider errors, malformed JSON and schema
validation failures are returned as `LLMFailure`, so callers select their
deterministic fallback by checking the result type.
"""
import asyncio
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Generic, List, Optional, TypeVar, Union

import google.generativeai as genai
from openai import AsyncOpenAI
from pydantic import TypeAdapter

from helpdesk_bot.config import get_settings
from helpdesk_bot.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

T = TypeVar("T")


class LLMProvider(str, Enum):
    """Supported LLM providers"""
    GEMINI = "gemini"
    OPENAI = "openai"


class LLMServiceError(Exception):
    """Raised when free-text generation or embedding fails"""


@dataclass
class LLMSuccess(Generic[T]):
    """Validated structured output"""
    value: T


@dataclass
class LLMFailure:
    """Structured call failed (provider error or invalid output)"""
    error: str


LLMResult = Union[LLMSuccess[T], LLMFailure]


def _gemini_text(response: Any) -> str:
    """
    Join the text parts of a Gemini response or stream chunk

    Unlike `response.text`, this does not raise for chunks without text
    parts (finish-reason only, safety or thought chunks).
    """
    texts = []
    for candidate in response.candidates or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            if getattr(part, "thought", False):
                continue
            text = getattr(part, "text", "")
            if text:
                texts.append(text)
    return "".join(texts)


class LLMService:
    """
    Language model capability used by the classifier, the action extractor,
    the knowledge handler and response synthesis.
    """

    def __init__(
        self,
        provider: Optional[Union[LLMProvider, str]] = None,
        openai_client: Optional[AsyncOpenAI] = None,
        gemini_model: Optional[Any] = None,
        max_retries: Optional[int] = None
    ):
        """
        Initialize LLM service with the configured provider

        Args:
            provider: LLM provider (default from settings)
            openai_client: Pre-built AsyncOpenAI client (tests)
            gemini_model: Pre-built GenerativeModel (tests)
            max_retries: Attempts per structured call (default from settings)
        """
        self.provider = LLMProvider(provider or settings.llm_provider)
        self.max_retries = max(1, max_retries if max_retries is not None else settings.llm_max_retries)

        if self.provider == LLMProvider.OPENAI:
            self.openai_client = openai_client or AsyncOpenAI(api_key=settings.openai_api_key)
            self.model = settings.openai_model
        else:
            if gemini_model is None:
                genai.configure(api_key=settings.google_api_key)
                gemini_model = genai.GenerativeModel(settings.gemini_model)
            self.gemini_model = gemini_model
            self.model = settings.gemini_model

        logger.info(f"Initialized LLMService with {self.provider.value} ({self.model})")

    # ------------------------------------------------------------------
    # Structured output
    # ------------------------------------------------------------------
    async def _complete_json(self, prompt: str) -> str:
        """Run one JSON-mode completion and return the raw text"""
        if self.provider == LLMProvider.OPENAI:
            response = await self.openai_client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "system",
                        "content": "You are an IT support assistant. Respond with a single JSON object."
                    },
                    {
                        "role": "user",
                        "content": prompt
                    }
                ],
                response_format={"type": "json_object"},
                temperature=0.2,
                max_tokens=500
            )
            return response.choices[0].message.content

        response = await self.gemini_model.generate_content_async(
            prompt,
            generation_config=genai.GenerationConfig(
                temperature=0.2,
                max_output_tokens=500,
                response_mime_type="application/json"
            )
        )
        return response.text

    async def generate_structured(self, prompt: str, schema: Any) -> LLMResult:
        """
        Generate output validated against a pydantic model or union type

        Args:
            prompt: Task prompt
            schema: Pydantic model class or annotated union

        Returns:
            LLMSuccess with the validated value, or LLMFailure
        """
        adapter = TypeAdapter(schema)
        full_prompt = (
            f"{prompt}\n\n"
            f"Respond with a JSON object matching this JSON schema:\n"
            f"{json.dumps(adapter.json_schema())}"
        )

        for attempt in range(self.max_retries):
            try:
                raw = await self._complete_json(full_prompt)
                return LLMSuccess(adapter.validate_json(raw))
            except Exception as e:
                logger.warning(
                    f"Structured generation attempt {attempt + 1}/{self.max_retries} failed: {e}"
                )
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(2 ** attempt)
                    continue
                return LLMFailure(error=str(e))

    # ------------------------------------------------------------------
    # Free text
    # ------------------------------------------------------------------
    async def generate_text(self, prompt: str) -> str:
        """
        Generate a complete free-text response

        Raises:
            LLMServiceError: On provider failure
        """
        try:
            if self.provider == LLMProvider.OPENAI:
                response = await self.openai_client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=0.3
                )
                return response.choices[0].message.content or ""

            response = await self.gemini_model.generate_content_async(
                prompt,
                generation_config=genai.GenerationConfig(temperature=0.3)
            )
            return _gemini_text(response)
        except Exception as e:
            logger.error(f"Text generation failed: {e}")
            raise LLMServiceError(f"Text generation failed: {e}") from e

    async def stream_text(self, prompt: str) -> AsyncIterator[str]:
        """
        Stream a free-text response chunk by chunk

        Yields:
            Non-empty text increments in arrival order

        Raises:
            LLMServiceError: On provider failure
        """
        try:
            if self.provider == LLMProvider.OPENAI:
                stream = await self.openai_client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=0.3,
                    stream=True
                )
                async for chunk in stream:
                    if chunk.choices and chunk.choices[0].delta.content:
                        yield chunk.choices[0].delta.content
            else:
                response = await self.gemini_model.generate_content_async(
                    prompt,
                    generation_config=genai.GenerationConfig(temperature=0.3),
                    stream=True
                )
                async for chunk in response:
                    text = _gemini_text(chunk)
                    if text:
                        yield text
        except Exception as e:
            logger.error(f"Streaming generation failed: {e}")
            raise LLMServiceError(f"Streaming generation failed: {e}") from e

    # ------------------------------------------------------------------
    # Embeddings
    # ------------------------------------------------------------------
    async def embed(self, text: str) -> List[float]:
        """
        Generate a query embedding

        Raises:
            LLMServiceError: On provider failure
        """
        try:
            if self.provider == LLMProvider.OPENAI:
                response = await self.openai_client.embeddings.create(
                    model=settings.openai_embedding_model,
                    input=text
                )
                return list(response.data[0].embedding)

            result = await asyncio.to_thread(
                genai.embed_content,
                model=settings.gemini_embedding_model,
                content=text,
                task_type="retrieval_query"
            )
            return list(result["embedding"])
        except Exception as e:
            logger.error(f"Embedding generation failed: {e}")
            raise LLMServiceError(f"Embedding generation failed: {e}") from e
