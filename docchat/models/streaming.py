"""
Streaming event schemas for answer streaming.

Defines the server-to-client frames of the chat stream and their
text/event-stream encoding. Deltas are sent as bare text; the control
events are JSON objects with a "type" field.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel

DONE_MARKER = "[DONE]"


class StreamEventType(str, Enum):
    """Server-to-client event types for streaming chat."""

    START = "start"
    DELTA = "delta"
    CITATIONS = "citations"
    ERROR = "error"
    DONE = "done"


class StreamEvent(BaseModel):
    """
    One frame of the answer stream.

    Attributes:
        event: Event type identifier
        data: Payload (delta text, citation list, error message)
    """

    event: StreamEventType
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {"event": self.event.value, "data": self.data}

    def to_sse(self) -> str:
        """
        Encode as a text/event-stream frame.

        A delta containing newlines is split over several data lines, which
        SSE clients join back with newlines.
        """
        if self.event is StreamEventType.DELTA:
            payload = str(self.data)
        elif self.event is StreamEventType.DONE:
            payload = DONE_MARKER
        elif self.event is StreamEventType.CITATIONS:
            payload = json.dumps({"type": "citations", "citations": self.data})
        elif self.event is StreamEventType.ERROR:
            payload = json.dumps({"type": "error", "message": self.data})
        else:
            payload = json.dumps({"type": self.event.value})
        lines = payload.split("\n")
        return "".join(f"data: {line}\n" for line in lines) + "\n"
