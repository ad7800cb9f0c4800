import logging

from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from askdata.config import Settings

logger = logging.getLogger(__name__)


class ModelCallError(RuntimeError):
    """Transport, auth, rate-limit or response-shape failure talking to the model."""


class LLMService:
    """Sends one prompt to an OpenAI-compatible chat endpoint and returns the raw reply text."""

    def __init__(self, settings: Settings):
        self.settings = settings
        # max_retries=0: the agent's attempt limit is the only retry layer
        self.client = ChatOpenAI(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            model=settings.llm_model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.llm_timeout,
            max_retries=0,
        )

    def generate(self, prompt: str) -> str:
        try:
            resp = self.client.invoke([HumanMessage(content=prompt)])
        except Exception as exc:
            logger.warning("Model call failed", extra={"stage": "model", "model": self.settings.llm_model})
            raise ModelCallError(f"Failed to get response from model API: {exc}") from exc

        return _content_text(getattr(resp, "content", resp)).strip()


def _content_text(content: object) -> str:
    # some providers return a list of content parts instead of a plain string
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return str(content)
