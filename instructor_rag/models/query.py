"""Chat and retrieval models for the instructor RAG service."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """Chat message model."""
    role: Role = Field(..., description="Message role (system/user/assistant)")
    content: str = Field(..., description="Message content")

    model_config = ConfigDict(frozen=True, extra="ignore")


class InstructorMetadata(BaseModel):
    """Metadata stored alongside each instructor vector."""
    review: str = Field("", description="Review text")
    classes: List[str] = Field(default_factory=list, description="Classes taught")
    stars: Optional[Union[int, float]] = Field(None, description="Star rating")

    model_config = ConfigDict(extra="ignore")


class RetrievedRecord(BaseModel):
    """A match returned by the vector index."""
    id: str = Field(..., description="Instructor identifier")
    score: Optional[float] = Field(None, description="Similarity score")
    metadata: InstructorMetadata = Field(default_factory=InstructorMetadata)


class ParsedHistory(BaseModel):
    """A validated conversation history."""
    history: List[ChatMessage] = Field(..., min_length=1)

    @property
    def last_message(self) -> ChatMessage:
        return self.history[-1]

    @property
    def prior(self) -> List[ChatMessage]:
        """All turns before the last message, in order."""
        return self.history[:-1]
