"""
Editor integration example
==========================

Shows how a host editor drives the SDK:
- annotate a document and render the returned diff
- rescan after an edit, touching only changed spans
- show a short-lived annotation for the UUID under the cursor
- clear everything when the mode is switched off

Run:
    python examples/editor_integration.py
"""

import asyncio

from uuid_timestamp_sdk import Annotation, RuntimeConfig, TransientConfig, create_annotator
from uuid_timestamp_sdk.observability.event_bus import InMemoryEventBus


DOCUMENT = """\
2023-01-16 19:34:41 INFO  job d2719bc0-95d4-11ed-9999-325096b39f47 started
2022-11-11 17:05:55 INFO  job 1aa3bc56-61e3-11ed-b61d-9cb6d0b80000 finished
2024-03-02 08:00:00 WARN  job 9b2e4a1c-3f5d-4e6a-8b7c-1d2e3f4a5b6c is v4, ignored
"""


def render(annotation: Annotation) -> str:
    return f"  [{annotation.start:>4}-{annotation.end:<4}] {annotation.uuid} -> {annotation.label}"


async def main():
    bus = InMemoryEventBus()
    bus.on_all(lambda e: print(f"  event: {e.event_type} {e.uuid or ''}"))

    config = RuntimeConfig(transient=TransientConfig(display_seconds=0.5))
    annotator = create_annotator(config=config, event_bus=bus)

    print("== initial scan")
    diff = await annotator.annotate("log.txt", DOCUMENT)
    for annotation in diff.added:
        print(render(annotation))

    print("== after deleting the second line")
    lines = DOCUMENT.splitlines(keepends=True)
    edited = lines[0] + lines[2]
    diff = await annotator.annotate("log.txt", edited)
    print(f"  added={len(diff.added)} removed={len(diff.removed)} unchanged={len(diff.unchanged)}")

    print("== cursor on the first UUID")
    shown = await annotator.show_at("scratch", DOCUMENT, DOCUMENT.index("d2719bc0") + 3)
    if shown:
        print(render(shown))
    await asyncio.sleep(0.6)

    print("== mode off")
    await annotator.clear("log.txt")
    await annotator.close()


if __name__ == "__main__":
    asyncio.run(main())
