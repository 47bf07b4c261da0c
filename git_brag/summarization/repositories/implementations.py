"""Concrete LLM client backed by the provider gateway and a key ring."""

from git_brag.summarization.domain.value_objects import ResponseFormat
from git_brag.summarization.repositories.interfaces import LLMClientRepository
from git_brag.summarization.repositories.key_ring import KeyRing
from git_brag.summarization.repositories.provider_gateway import Provider, ProviderGateway


class RotatingProviderClient(LLMClientRepository):
    """LLM client that rotates API keys when the provider rate limits."""

    def __init__(
        self,
        provider: Provider,
        model: str,
        key_ring: KeyRing,
        gateway: ProviderGateway | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            provider: Provider every call goes to
            model: Model name
            key_ring: API keys for the provider; shared by every call of the run
            gateway: Gateway performing the calls. Defaults to ProviderGateway()
        """
        self._provider = provider
        self._model = model
        self._key_ring = key_ring
        self._gateway = gateway or ProviderGateway()

    @property
    def provider(self) -> Provider:
        return self._provider

    @property
    def model(self) -> str:
        return self._model

    @property
    def key_count(self) -> int:
        return len(self._key_ring)

    @property
    def description(self) -> str:
        return f"{self._provider.value} | model: {self._model}"

    def complete(self, prompt: str, response_format: ResponseFormat = ResponseFormat.JSON) -> str:
        return self._gateway.invoke_with_rotation(
            self._provider, self._key_ring, self._model, prompt, response_format
        )
