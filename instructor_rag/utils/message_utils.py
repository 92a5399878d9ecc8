"""Utility helpers for constructing LangChain message histories."""

from __future__ import annotations

from typing import List

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from instructor_rag.models.query import ChatMessage


def to_langchain_message(message: ChatMessage) -> BaseMessage:
    """Convert a single chat message into its LangChain counterpart."""

    if message.role == "system":
        return SystemMessage(content=message.content)
    if message.role == "assistant":
        return AIMessage(content=message.content)
    return HumanMessage(content=message.content)


def build_langchain_messages(messages: List[ChatMessage]) -> List[BaseMessage]:
    """Convert an ordered chat history into LangChain message objects.

    Every role is forwarded, including caller-supplied system turns.
    """

    return [to_langchain_message(message) for message in messages]
