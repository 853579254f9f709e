"""
Chat Session Example - Stream a Single-File App and Refine It
===============================================================

Opens a GenerationSession, sends a request and prints how the extracted
entry point grows while fragments arrive. A second message refines the
result; the session keeps the conversation history.

Usage:
    python examples/chat_session.py
"""

from __future__ import annotations

import asyncio

from genforge.core.config import load_config
from genforge.core.logging import configure_logging
from genforge.core.models import FileSet
from genforge.facade import GenForge


def show_preview(buffer: str, files: FileSet) -> None:
    for path, artifact in files.items():
        print(f"\r  {path}: {len(artifact.content):>6} chars", end="", flush=True)


async def main() -> None:
    config = load_config()
    configure_logging("WARNING", json_logs=config.json_logs)

    async with GenForge(config) as forge:
        session = forge.new_session()

        for message in ("A calm note-taking app", "Make it dark and add a search box"):
            print(f"\n> {message}")
            turn = await session.send(message, on_update=show_preview)
            print()
            status = "cancelled" if turn.cancelled else f"{turn.fragment_count} fragments"
            print(f"  ({status}, files updated: {turn.files_updated})")

        print(f"\nHistory: {len(session.history)} messages")
        if session.files:
            print(f"Files: {', '.join(session.files)}")


if __name__ == "__main__":
    asyncio.run(main())
