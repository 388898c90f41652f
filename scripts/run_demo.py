"""
Quick demo script: walk through one reflection journey in the terminal.

Usage:
    python scripts/run_demo.py
    INNERGARDEN_CLASSIFIER=chat python scripts/run_demo.py
"""

import asyncio
import logging

from innergarden.core.engine import TherapeuticEngine
from innergarden.core.model import SessionAttributes

logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")
logging.getLogger("innergarden").setLevel(logging.INFO)


def _ask(prompt, default=""):
    answer = input(prompt).strip()
    return answer or default


def _show_progress(percentage, stage):
    print(f"  [{percentage:5.1f}%] {stage}")


async def main():
    print("=" * 60)
    print("  Inner Garden — a short guided reflection")
    print("=" * 60)
    print()

    engine = TherapeuticEngine.with_shared_classifier()
    store = engine.content

    intensity = int(_ask("How intense does this feel right now (0-10)? ", "3"))
    topics = store.topics()
    topic = _ask(f"Which area is it about? {topics} (blank to skip) ") or None
    emotion = None
    if topic:
        emotion = _ask(f"Which feeling fits best? {store.emotion_palette(topic)} (blank to skip) ") or None
    free_text = _ask("Anything you'd like to put into words? (blank to skip) ")

    if free_text:
        print("\nPreparing...")
        await engine.preload_model(_show_progress)

    attrs = SessionAttributes(intensity=intensity, free_text=free_text, topic=topic, emotion=emotion)
    start = await engine.begin_journey(attrs)
    print(f"\n[{start.technique}] 1/{start.total_steps}: {start.first_step_content}")
    if start.calming_exercise:
        for line in start.calming_exercise.steps:
            print(f"   - {line}")

    while True:
        choice = _ask("\n(b)etter / (a)nother angle / (q)uit? ", "b").lower()
        if choice.startswith("q"):
            break
        if choice.startswith("a"):
            alt = engine.request_alternative()
            print(f"\n{alt.content}")
            if alt.calming_exercise:
                for line in alt.calming_exercise.steps:
                    print(f"   - {line}")
            continue
        nxt = engine.advance()
        if nxt.is_complete:
            print(f"\n{nxt.content}")
            break
        print(f"\n{nxt.step}/{nxt.total_steps}: {nxt.content}")

    engine.close()


if __name__ == "__main__":
    asyncio.run(main())
