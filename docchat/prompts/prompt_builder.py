# docchat/prompts/prompt_builder.py

def build_chat_prompt(question: str, context: str) -> str:
    """
    User-turn prompt: retrieved context first, then the question.

    The system prompt is passed separately, as a system role or
    system instruction depending on the provider.
    """

    return (
        f"Context:\n{context}\n\n"
        f"Question: {question}\n\n"
        f"Provide a helpful answer based on the context above."
    )
