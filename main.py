"""Simple CLI entry point for the property search agent."""

import asyncio
from typing import List

from property_agent import ChatTurn, PropertyChatAgent
from property_agent.utils import format_price

async def main() -> None:
    agent = PropertyChatAgent.from_config()
    history: List[ChatTurn] = []
    mode = "AI" if agent.ai_enabled else "pattern extraction"
    print(f"Property assistant is ready ({len(agent.catalog)} listings, {mode}). Type 'exit' or 'quit' to stop.")

    while True:
        try:
            user_input = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting.")
            break

        if not user_input:
            continue
        if user_input.lower() in {"exit", "quit"}:
            print("Goodbye.")
            break

        history.append(ChatTurn(speaker="user", text=user_input))
        reply = await agent.chat(user_input, history=history)
        history.append(ChatTurn(speaker="assistant", text=reply.message))

        print(f"Agent: {reply.message}")
        for p in reply.properties[:5]:
            print(f"  - {p.title} ({p.location}) {format_price(p.price)}, {p.bedrooms} bd")
        if len(reply.properties) > 5:
            print(f"  ... and {len(reply.properties) - 5} more")
        print()

    print("Session ended.")


if __name__ == "__main__":
    asyncio.run(main())
