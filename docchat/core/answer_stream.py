"""
Streaming answer assembler.

Drives one answer through Start -> Streaming -> CitationsSent ->
Persisted -> Done, with Errored reachable from any step once the stream
is open. Model output is forwarded delta by delta in generation order
while the full answer is accumulated for persistence.

Dependencies: langchain_core, docchat.models.streaming
System role: Answer streaming state machine
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from enum import Enum
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage

from docchat.models.citation import Citation
from docchat.models.streaming import StreamEvent, StreamEventType

logger = logging.getLogger(__name__)

PersistExchange = Callable[[str, list[Citation]], Awaitable[None]]


class AnswerState(str, Enum):
    """Lifecycle of one streamed answer."""

    START = "start"
    STREAMING = "streaming"
    CITATIONS_SENT = "citations_sent"
    PERSISTED = "persisted"
    DONE = "done"
    ERRORED = "errored"


def chunk_text(content: Any) -> str:
    """
    Text of one model output chunk.

    Chat models return either a plain string or a list of content parts
    (strings or {"type": "text", "text": ...} dicts).
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return ""


class AnswerStream:
    """
    One grounded answer, ready to stream.

    Built only after every pre-stream check has passed, so iterating it
    always opens the channel. Errors from that point on are reported as an
    error event followed by the terminal marker; deltas already sent are
    not retracted.
    """

    def __init__(
        self,
        chat_model: BaseChatModel,
        messages: list[BaseMessage],
        citations: list[Citation],
        persist: PersistExchange,
    ) -> None:
        """
        Args:
            chat_model: Model used for generation
            messages: Prompt messages
            citations: Ranked retrieval results used to build the prompt
            persist: Stores (answer, citations) with the question as one exchange
        """
        self.chat_model = chat_model
        self.messages = messages
        self.citations = citations
        self.persist = persist
        self.state = AnswerState.START
        self._parts: list[str] = []

    @property
    def answer(self) -> str:
        """Answer text accumulated so far."""
        return "".join(self._parts)

    def _fail(self, step: str, error: Exception, message: str | None = None) -> StreamEvent:
        logger.error(f"{__name__}:{step} - {type(error).__name__}: {error} (state={self.state.value})")
        self.state = AnswerState.ERRORED
        message = message or str(error) or type(error).__name__
        return StreamEvent(event=StreamEventType.ERROR, data=message)

    async def events(self) -> AsyncIterator[StreamEvent]:
        """
        Yield the stream frames in order.

        Yields:
            StreamEvent: start, deltas, citations, then done (or error, done)
        """
        yield StreamEvent(event=StreamEventType.START)

        try:
            self.state = AnswerState.STREAMING
            async for chunk in self.chat_model.astream(self.messages):
                text = chunk_text(chunk.content)
                if text:
                    self._parts.append(text)
                    yield StreamEvent(event=StreamEventType.DELTA, data=text)

            yield StreamEvent(
                event=StreamEventType.CITATIONS,
                data=[citation.model_dump(mode="json") for citation in self.citations],
            )
            self.state = AnswerState.CITATIONS_SENT
        except Exception as e:
            yield self._fail("events", e)
            yield StreamEvent(event=StreamEventType.DONE)
            return

        try:
            await self.persist(self.answer, self.citations)
            self.state = AnswerState.PERSISTED
        except Exception as e:
            yield self._fail("persist", e, "Failed to save chat history")
            yield StreamEvent(event=StreamEventType.DONE)
            return

        self.state = AnswerState.DONE
        logger.info(
            f"{__name__}:events - Answer complete, chars={len(self.answer)} "
            f"citations={len(self.citations)}"
        )
        yield StreamEvent(event=StreamEventType.DONE)

    async def sse(self) -> AsyncIterator[str]:
        """Encoded text/event-stream frames."""
        async for event in self.events():
            yield event.to_sse()
