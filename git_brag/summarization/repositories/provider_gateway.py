"""Uniform text-completion contract over the supported LLM providers."""

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from git_brag.logging import get_logger
from git_brag.summarization.domain.value_objects import ResponseFormat
from git_brag.summarization.repositories.key_ring import KeyRing

if TYPE_CHECKING:
    from langchain_core.language_models.chat_models import BaseChatModel

logger = get_logger(__name__)

_RATE_LIMIT_PHRASES = (
    "429",
    "rate limit",
    "too many requests",
    "resource_exhausted",
    "resource exhausted",
    "quota",
)

_MAX_OUTPUT_TOKENS = 2000


class Provider(str, Enum):
    """Supported LLM providers."""

    GEMINI = "gemini"
    GPT = "gpt"
    CLAUDE = "claude"

    @classmethod
    def normalize(cls, value: str | None) -> "Provider | None":
        """
        Map user-facing provider names to a Provider.

        Args:
            value: Provider name or alias, any case

        Returns:
            The matching Provider, or None when the name is unknown
        """
        if not value:
            return None
        aliases = {
            "gemini": cls.GEMINI,
            "google": cls.GEMINI,
            "gpt": cls.GPT,
            "openai": cls.GPT,
            "chatgpt": cls.GPT,
            "claude": cls.CLAUDE,
            "anthropic": cls.CLAUDE,
        }
        return aliases.get(value.strip().lower())

    @property
    def label(self) -> str:
        return {
            Provider.GEMINI: "Gemini",
            Provider.GPT: "OpenAI",
            Provider.CLAUDE: "Anthropic",
        }[self]

    @property
    def default_model(self) -> str:
        return DEFAULT_MODELS[self]


DEFAULT_MODELS: dict[Provider, str] = {
    Provider.GEMINI: "gemini-2.5-flash-lite",
    Provider.GPT: "gpt-4o-mini",
    Provider.CLAUDE: "claude-3-5-sonnet-20240620",
}


class ProviderError(RuntimeError):
    """A provider call failed; carries the provider and HTTP status when known."""

    def __init__(self, provider: Provider, message: str, status_code: int | None = None) -> None:
        self.provider = provider
        self.status_code = status_code
        status = status_code if status_code is not None else "n/a"
        super().__init__(f"{provider.label} error {status}: {message}")

    @property
    def is_rate_limit(self) -> bool:
        return is_rate_limit_error(self)


def is_rate_limit_error(error: BaseException) -> bool:
    """
    Decide whether a failure means the current key is rate limited.

    Args:
        error: Exception raised by a provider call

    Returns:
        True for HTTP 429 or a vendor message about rate limits or quota
    """
    if _status_code_of(error) == 429:
        return True
    message = str(error).lower()
    return any(phrase in message for phrase in _RATE_LIMIT_PHRASES)


def _status_code_of(error: BaseException) -> int | None:
    for attribute in ("status_code", "code"):
        value = getattr(error, attribute, None)
        if isinstance(value, int):
            return int(value)
    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    return int(value) if isinstance(value, int) else None


def build_chat_model(
    provider: Provider, credential: str, model: str, response_format: ResponseFormat
) -> "BaseChatModel":
    """
    Create the LangChain chat model for one provider call.

    SDK-level retries are disabled: key rotation is the only retry mechanism.

    Args:
        provider: Provider to talk to
        credential: API key used for this call
        model: Model name
        response_format: JSON or plain text; only Gemini accepts the hint

    Returns:
        A configured chat model
    """
    match provider:
        case Provider.GEMINI:
            mime_type = (
                "application/json" if response_format is ResponseFormat.JSON else "text/plain"
            )
            return ChatGoogleGenerativeAI(  # type: ignore[call-arg]
                model=model,
                google_api_key=credential,
                response_mime_type=mime_type,
                max_retries=0,
            )
        case Provider.GPT:
            return ChatOpenAI(  # type: ignore[call-arg]
                model=model,
                api_key=credential,
                temperature=0.2,
                max_tokens=_MAX_OUTPUT_TOKENS,
                max_retries=0,
            )
        case Provider.CLAUDE:
            return ChatAnthropic(  # type: ignore[call-arg]
                model=model,
                api_key=credential,
                max_tokens=_MAX_OUTPUT_TOKENS,
                max_retries=0,
            )
        case _:
            raise ValueError(f"Unsupported provider: {provider}")


ChatModelFactory = Callable[[Provider, str, str, ResponseFormat], "BaseChatModel"]


class ProviderGateway:
    """Sends single-turn prompts to a provider and returns plain text."""

    def __init__(self, chat_model_factory: ChatModelFactory | None = None) -> None:
        """
        Initialize the gateway.

        Args:
            chat_model_factory: Builds the chat model for a call. Defaults to
                build_chat_model; tests pass fakes here.
        """
        self._chat_model_factory = chat_model_factory or build_chat_model

    def invoke(
        self,
        provider: Provider,
        credential: str,
        model: str,
        prompt: str,
        response_format: ResponseFormat = ResponseFormat.JSON,
    ) -> str:
        """
        Send one prompt with one credential.

        Args:
            provider: Provider to call
            credential: API key for this attempt
            model: Model name
            prompt: User prompt
            response_format: Requested output shape

        Returns:
            The response text (possibly empty)

        Raises:
            ProviderError: If the provider call fails for any reason
        """
        try:
            llm = self._chat_model_factory(provider, credential, model, response_format)
            response = llm.invoke([HumanMessage(content=prompt)])
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(provider, str(e), _status_code_of(e)) from e
        return self._content_to_text(response.content)

    def invoke_with_rotation(
        self,
        provider: Provider,
        key_ring: KeyRing,
        model: str,
        prompt: str,
        response_format: ResponseFormat = ResponseFormat.JSON,
    ) -> str:
        """
        Send one prompt, moving to the next key whenever the current one is rate limited.

        At most ``len(key_ring)`` attempts are made. Any other failure, or a
        rate limit with a single key, propagates immediately.

        Raises:
            ProviderError: The first non-rate-limit failure, or the last
                rate-limit failure once every key has been tried
        """
        last_error: ProviderError | None = None
        for _ in range(len(key_ring)):
            try:
                return self.invoke(provider, key_ring.current(), model, prompt, response_format)
            except ProviderError as e:
                last_error = e
                if not (e.is_rate_limit and len(key_ring) > 1):
                    raise
                key_ring.rotate()
                logger.warning(
                    "%s rate limited, rotating to API key #%d", provider.label, key_ring.index + 1
                )
        assert last_error is not None
        raise last_error

    @staticmethod
    def _content_to_text(content: object) -> str:
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            # Content blocks, e.g. [{"type": "text", "text": "..."}]
            return "".join(
                item if isinstance(item, str) else str(item.get("text", ""))
                for item in content
                if isinstance(item, (str, dict))
            )
        return str(content)
