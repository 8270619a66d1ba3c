import asyncio
import logging
import os

from execution_openai import ChatRequest, ExecutionOptions, Message, ProviderError, create_openai_provider
from execution_openai.errors import ExecutionError


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    provider = create_openai_provider()

    req = ChatRequest(
        model="gpt-4o-mini",
        messages=[
            Message(role="developer", content="Answer in one sentence."),
            Message(role="user", content="What is the capital of France?"),
        ],
    )

    # Demonstrate fail-fast credential handling (no network round trip)
    try:
        await provider.execute(req, ExecutionOptions(api_key="DUMMY"))
    except ExecutionError as e:
        print("Expected error:", type(e).__name__, e)

    if not os.environ.get("OPENAI_API_KEY"):
        return

    try:
        async for chunk in provider.execute_stream(req):
            print(chunk)
    except ProviderError as e:
        print("Provider error:", e.correlation_id, e)


if __name__ == "__main__":
    asyncio.run(main())
