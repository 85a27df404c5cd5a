#!/usr/bin/env python3
"""Manual smoke test: hold a two-turn conversation with the configured provider."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pr_reviewer.core.config import settings
from pr_reviewer.core.logging import setup_logging
from pr_reviewer.llm.errors import ConfigurationError
from pr_reviewer.llm.factory import get_bot

setup_logging()


async def chat_smoke(kind: str, first: str, second: str) -> bool:
    """Send two messages on one conversation and print the replies."""
    print(f"\n{'='*60}")
    print(f"🧪 Chat smoke test: {settings.ai_provider} ({kind} model)")
    print(f"{'='*60}\n")

    print("Step 1: Building session...")
    try:
        bot = get_bot(kind)
    except ConfigurationError as e:
        print(f"  ❌ Configuration error: {e}")
        return False
    print(f"  ✅ Model: {bot.model_options.model}")
    print(f"  ✅ Budget: {bot.token_limits.describe()}")

    async with bot:
        print("\nStep 2: First turn...")
        text, ids = await bot.chat(first, {"conversation_id": "smoke"})
        if not text:
            print("  ❌ Empty reply (see warnings above)")
            return False
        print(f"  ✅ {text[:200]}")
        print(f"     ids: {ids.model_dump()}")

        print("\nStep 3: Second turn on the same conversation...")
        text, ids = await bot.chat(second, ids)
        if not text:
            print("  ❌ Empty reply (see warnings above)")
            return False
        print(f"  ✅ {text[:200]}")
        if ids.conversation_id is None:
            print("  ⏭️  Provider is stateless, the second turn did not see the first")

    print(f"\n{'='*60}")
    print("✅ Chat smoke test completed successfully!")
    print(f"{'='*60}\n")
    return True


if __name__ == "__main__":
    kind = sys.argv[1] if len(sys.argv) > 1 else "light"
    success = asyncio.run(
        chat_smoke(
            kind,
            "Name one common cause of resource leaks in Python code.",
            "Show a one-line fix for the cause you just named.",
        )
    )
    sys.exit(0 if success else 1)
