"""Interface for LLM calls returning schema-constrained JSON."""

from typing import Protocol


class StructuredOutputClient(Protocol):
    """Interface for LLM structured-output completions."""

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object] | None,
        schema_name: str,
        image_data_url: str | None = None,
    ) -> object:
        """Return parsed JSON for the schema, or plain text without one."""
