"""Repository interfaces for LLM completion."""

from abc import ABC, abstractmethod

from git_brag.summarization.domain.value_objects import ResponseFormat


class LLMClientRepository(ABC):
    """Interface for sending analysis prompts to a language model."""

    @abstractmethod
    def complete(self, prompt: str, response_format: ResponseFormat = ResponseFormat.JSON) -> str:
        """
        Send a prompt and return the raw response text.

        Args:
            prompt: Complete single-turn prompt
            response_format: Whether JSON or plain text is expected back

        Returns:
            Raw model output, possibly wrapped in prose

        Raises:
            RuntimeError: If the model cannot be reached or refuses the request
        """
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Short provider/model label for logs and run metadata."""
        ...
