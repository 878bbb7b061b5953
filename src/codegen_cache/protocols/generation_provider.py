"""Generation provider protocol.

Defines the interface for the external text-generation service whose
results are memoized.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class GenerationProvider(Protocol):
    """Protocol for text-generation services.

    Example:
        ```python
        provider: GenerationProvider = OpenAIGenerationProvider.create()
        text = await provider.generate("blink an LED")
        ```
    """

    @property
    def model_name(self) -> str:
        """Return the model identifier sent with every request."""
        ...

    async def generate(self, prompt: str) -> str:
        """Generate text for a prompt in a single attempt.

        Args:
            prompt: The input text

        Returns:
            The generated text, or the raw provider response body when it
            cannot be parsed

        Raises:
            UpstreamError: On transport failure or non-2xx status
        """
        ...

    async def is_available(self) -> bool:
        """Check if the provider is usable.

        Returns:
            True if available, False otherwise
        """
        ...
