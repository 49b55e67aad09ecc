"""Interactive terminal demo for ChatSession."""
import sys
sys.path.insert(0, '.')

import asyncio

from config import GREETING_MESSAGE, SYSTEM_PROMPT, load_gemini_config
from models.conversation import Sender, Turn
from services.chat_session import ChatSession
from services.gemini_gateway import GeminiGateway
from services.request_composer import RequestComposer


def render(turn: Turn) -> None:
    """Print each appended turn as it lands."""
    label = "You" if turn.sender is Sender.USER else "Assistant"
    suffix = " (Error)" if turn.is_error else ""
    print(f"{label}: {turn.text}{suffix}\n")


async def main():
    """Run a chat session against the live endpoint until EOF or /quit."""
    print("=== Medical Chat Assistant Demo ===\n")

    try:
        gateway = GeminiGateway(load_gemini_config())
    except ValueError as e:
        print(f"✗ {e}")
        return

    session = ChatSession(gateway, RequestComposer(SYSTEM_PROMPT))
    session.subscribe(render)
    session.transcript.append(Turn.assistant(GREETING_MESSAGE))

    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line or line.strip() == "/quit":
                break
            await session.submit(line)
    finally:
        session.close()
        await gateway.aclose()
        print("=== Session closed ===")


if __name__ == "__main__":
    asyncio.run(main())
