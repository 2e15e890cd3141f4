"""
Centralized system prompts.

NEVER hardcode prompts inside workflow or model client.
Always import from here.
"""


CHAT_SYSTEM_PROMPT = """
You are a helpful assistant that answers questions based on the provided context.
If the context doesn't contain information to answer the question, say you don't have enough information.
Keep your answers concise and relevant to the question.
""".strip()


NO_DOCUMENTS_MESSAGE = (
    "I don't have any documents loaded yet. "
    "Please upload a document first to get started."
)
