"""
Generate App Example - Run the Five-Stage Pipeline
====================================================

Runs coordinator → architect → frontend → backend → reviewer for one
request, prints per-role progress as it happens and writes the resulting
files below ./generated/.

With no configuration the mock provider answers, so this runs offline.
To use a real model:

    export GENFORGE_LLM__PROVIDER=openai
    export GENFORGE_LLM__API_KEY=sk-...

Usage:
    python examples/generate_app.py "A habit tracker with streaks"
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from genforge.core.config import load_config
from genforge.core.logging import configure_logging
from genforge.core.models import ProgressSnapshot
from genforge.facade import GenForge


def print_progress(status_text: str, overall: float, snapshot: ProgressSnapshot) -> None:
    roles = "  ".join(
        f"{role.value}={rp.status.value}" for role, rp in snapshot.per_role.items()
    )
    print(f"[{overall:>5.1f}%] {status_text:<40} {roles}")


async def main(request: str) -> int:
    config = load_config()
    configure_logging(config.log_level, json_logs=config.json_logs)

    async with GenForge(config) as forge:
        result = await forge.run_pipeline(request, on_progress=print_progress)

        print()
        print(result.summary)
        if not result.success:
            return 1

        out_dir = Path("generated")
        for path, artifact in result.files.items():
            target = out_dir / path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(artifact.content)
            print(f"  wrote {target} ({artifact.content_type.value})")

        if result.review and result.review.improvements:
            print("\nReviewer suggestions:")
            for suggestion in result.review.improvements:
                print(f"  - {suggestion}")

        record = await forge.save_result(result, name=request[:60])
        print(f"\nSaved as {record.project_id}")
    return 0


if __name__ == "__main__":
    user_request = " ".join(sys.argv[1:]) or "A pomodoro timer with a dark theme"
    sys.exit(asyncio.run(main(user_request)))
