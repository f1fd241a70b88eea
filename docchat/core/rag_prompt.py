"""
Grounded answer prompt.

A fixed system instruction that restricts answers to the retrieved
context and asks for bracketed numeric citations, followed by the
question and the ranked context block.

Dependencies: langchain_core.prompts
System role: Prompt template for answer generation
"""

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

from docchat.models.citation import Citation

SYSTEM_PROMPT = (
    "You are a helpful assistant for a Retrieval-Augmented Generation (RAG) system. "
    "Answer only from the provided context. If the context is insufficient, say you do "
    "not have enough information. Keep answers concise and cite sources like [1], [2] "
    "based on the provided chunks."
)

RAG_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", "Question: {question}\n\nContext:\n{context}"),
])


def format_context(citations: list[Citation]) -> str:
    """
    Render retrieved chunks as a numbered context block.

    Each entry reads "[[rank]] (score: d.dddd) pages a-b:" followed by the
    chunk text; entries are separated by blank lines.
    """
    return "\n\n".join(
        f"[[{citation.rank}]] (score: {citation.score:.4f}) "
        f"pages {citation.page_start}-{citation.page_end}:\n{citation.content}"
        for citation in citations
    )


def build_messages(question: str, citations: list[Citation]) -> list[BaseMessage]:
    """
    Build the chat messages sent to the model.

    Args:
        question: User question
        citations: Ranked retrieval results

    Returns:
        list[BaseMessage]: System and human messages
    """
    return RAG_PROMPT.format_messages(question=question, context=format_context(citations))
