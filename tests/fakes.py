"""Scripted providers for cascade, aggregator and route tests."""

import asyncio
from typing import List, Optional, Sequence, Union

from scholarcast.providers.base import BaseProvider, ProviderOutput

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class ScriptedProvider(BaseProvider):
    """Returns canned outputs (one per call, last one repeats) or raises."""

    def __init__(
        self,
        name: str,
        outputs: Sequence[Union[str, bytes]] = (),
        error: Optional[BaseException] = None,
        delay: float = 0.0,
        model: str = "fake-model",
        mime_type: str = "image/png",
        configured: bool = True,
    ):
        super().__init__(api_key="test-key" if configured else None, model=model)
        self.name = name
        self.outputs = list(outputs)
        self.error = error
        self.delay = delay
        self.mime_type = mime_type
        self.prompts: List = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def invoke(self, prompt) -> ProviderOutput:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

        value = self.outputs[min(len(self.prompts), len(self.outputs)) - 1] if self.outputs else ""
        if isinstance(value, bytes):
            return ProviderOutput(
                provider=self.name, model=self.model, data=value, mime_type=self.mime_type
            )
        return ProviderOutput(provider=self.name, model=self.model, text=value)
