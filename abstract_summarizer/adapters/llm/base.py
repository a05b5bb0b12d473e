from abc import ABC, abstractmethod


class AbstractSummarizationClient(ABC):
	"""Interface for clients that turn a prompt into generated text."""

	@abstractmethod
	async def generate(self, prompt: str) -> str:
		"""Send the prompt to the upstream model and return its text.

		Args:
			prompt: Full prompt, instructions included.

		Returns:
			str: Generated text (non-empty).

		Raises:
			LLMAppError: If the provider call fails or the response has no text.
		"""
		...
