# sentimentbr/sentiment/llm_router.py
import asyncio
import json
import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Protocol

import aiohttp

from sentimentbr.core.config import Settings
from sentimentbr.core.errors import ClassificationError, ProviderError
from sentimentbr.storage.models import SentimentLabel

logger = logging.getLogger(__name__)


class LLMProvider(Enum):
    GEMINI = "gemini"
    OPENAI = "openai"

    @property
    def other(self) -> "LLMProvider":
        return LLMProvider.OPENAI if self is LLMProvider.GEMINI else LLMProvider.GEMINI


SYSTEM_PROMPT = """Você é um especialista em análise de sentimentos em textos em português do Brasil.

Analise com atenção o sentimento predominante no texto e classifique-o como:
- 'positive': quando expressa satisfação, alegria, entusiasmo ou aprovação
- 'negative': quando expressa insatisfação, tristeza, raiva, frustração ou crítica
- 'neutral': quando não expressa claramente uma emoção positiva ou negativa

Forneça também um nível de confiança entre 0 (totalmente incerto) e 100 (totalmente confiante).

Considere o contexto cultural brasileiro e gírias ou expressões tipicamente brasileiras.

Responda APENAS com um objeto JSON no formato: { "sentiment": "positive/negative/neutral", "confidence": número }"""

_LABEL_ALIASES = {
    "positive": SentimentLabel.POSITIVE,
    "positivo": SentimentLabel.POSITIVE,
    "negative": SentimentLabel.NEGATIVE,
    "negativo": SentimentLabel.NEGATIVE,
    "neutral": SentimentLabel.NEUTRAL,
    "neutro": SentimentLabel.NEUTRAL,
}

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class SentimentResult:
    sentiment: SentimentLabel
    confidence: int  # 0..100


class SentimentClassifier(Protocol):
    name: str

    async def classify(self, text: str) -> SentimentResult: ...


def normalize_result(provider: str, data: Any) -> SentimentResult:
    """Validate a provider's JSON answer; confidence is rounded and clamped to 0..100."""
    if not isinstance(data, dict):
        raise ProviderError(provider, "Formato de resposta inválido")

    label = _LABEL_ALIASES.get(str(data.get("sentiment", "")).strip().lower())
    if label is None:
        raise ProviderError(provider, f"Sentimento desconhecido: {data.get('sentiment')!r}")

    raw = data.get("confidence")
    if isinstance(raw, bool):
        raw = None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ProviderError(provider, f"Confiança inválida: {raw!r}") from None
    if not math.isfinite(value):
        raise ProviderError(provider, f"Confiança inválida: {raw!r}")

    return SentimentResult(sentiment=label, confidence=max(0, min(100, round(value))))


def _parse_json(provider: str, content: Optional[str]) -> Any:
    if not content:
        raise ProviderError(provider, "Resposta da API vazia")
    match = _JSON_BLOCK.search(content)
    if not match:
        raise ProviderError(provider, "Formato de resposta inválido")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ProviderError(provider, f"JSON inválido na resposta: {e}") from e


class _HTTPProvider:
    name = ""

    def __init__(self, api_key: Optional[str], api_url: str, model: str, timeout: float = 30):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout

    def _require_key(self, env_name: str) -> str:
        if not self.api_key:
            raise ProviderError(self.name, f"{env_name} não está definida. Serviço {self.name} não disponível.")
        return self.api_key

    async def _post_json(self, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> Dict[str, Any]:
        timeout = aiohttp.ClientTimeout(total=self.timeout or None)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, json=payload, headers=headers) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"{self.name} API error {response.status}: {error_text[:300]}")
                        raise ProviderError(self.name, f"HTTP {response.status}")
                    return await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise ProviderError(self.name, f"Falha de comunicação: {e}") from e
        except asyncio.TimeoutError as e:
            raise ProviderError(self.name, "Tempo limite excedido") from e


class OpenAIProvider(_HTTPProvider):
    name = LLMProvider.OPENAI.value

    async def classify(self, text: str) -> SentimentResult:
        key = self._require_key("OPENAI_API_KEY")
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
            "response_format": {"type": "json_object"},
            "temperature": 0.3,
        }
        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {key}"}
        data = await self._post_json(self.api_url, payload, headers)
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise ProviderError(self.name, "Formato de resposta inválido") from None
        return normalize_result(self.name, _parse_json(self.name, content))


class GeminiProvider(_HTTPProvider):
    name = LLMProvider.GEMINI.value

    async def classify(self, text: str) -> SentimentResult:
        key = self._require_key("GEMINI_API_KEY")
        prompt = f'{SYSTEM_PROMPT}\n\nTexto para análise: "{text}"'
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        url = f"{self.api_url.rstrip('/')}/models/{self.model}:generateContent"
        headers = {"Content-Type": "application/json", "x-goog-api-key": key}
        data = await self._post_json(url, payload, headers)
        try:
            parts = data["candidates"][0]["content"]["parts"]
            content = "".join(p.get("text", "") for p in parts)
        except (KeyError, IndexError, TypeError):
            raise ProviderError(self.name, "Formato de resposta inválido") from None
        return normalize_result(self.name, _parse_json(self.name, content))


class FallbackClassifier:
    """Try ``primary``; on any failure try ``secondary`` once. No retries, no health memory."""

    def __init__(self, primary: SentimentClassifier, secondary: SentimentClassifier):
        self.primary = primary
        self.secondary = secondary
        self.name = primary.name

    async def classify(self, text: str) -> SentimentResult:
        logger.info(f"🧠 classifying with provider: {self.primary.name}")
        try:
            return await self.primary.classify(text)
        except Exception as error:
            logger.warning(f"⚠️ provider {self.primary.name} failed: {error}")
            logger.info(f"🔁 trying fallback provider: {self.secondary.name}")
            try:
                return await self.secondary.classify(text)
            except Exception as fallback_error:
                logger.error(f"❌ both providers failed, fallback error: {fallback_error}")
                raise ClassificationError(
                    f"Falha ao analisar o sentimento: {error} "
                    f"(fallback {self.secondary.name}: {fallback_error})"
                ) from fallback_error


def build_provider(provider: LLMProvider, settings: Settings) -> SentimentClassifier:
    if provider is LLMProvider.OPENAI:
        return OpenAIProvider(settings.OPENAI_API_KEY, settings.OPENAI_API_URL,
                              settings.OPENAI_MODEL, settings.LLM_TIMEOUT_SECONDS)
    return GeminiProvider(settings.GEMINI_API_KEY, settings.GEMINI_API_URL,
                          settings.GEMINI_MODEL, settings.LLM_TIMEOUT_SECONDS)


def build_classifier(settings: Settings) -> FallbackClassifier:
    primary = LLMProvider(settings.provider)
    return FallbackClassifier(build_provider(primary, settings), build_provider(primary.other, settings))


class LLMRouter:
    """Entry point used by the API: provider choice and keys are re-read from the environment on each call."""

    name = "router"

    async def classify(self, text: str) -> SentimentResult:
        return await build_classifier(Settings()).classify(text)


# process-wide default, injected through api.deps
llm_router = LLMRouter()
