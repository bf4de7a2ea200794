#!/usr/bin/env python3

import logging
import sys
from datetime import datetime

from plugins.calendar_grid.config import CalendarSettings
from plugins.calendar_grid.layout.classifier import classify_day, day_bounds
from plugins.calendar_grid.layout.columns import layout_day
from plugins.calendar_grid.layout.resolve import resolve_events
from plugins.calendar_grid.layout.spans import segment_span
from plugins.calendar_grid.services.events_api import EventsClient
from plugins.calendar_grid.time_cursor import compute_time_cursor

# Configure logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


def main():
    try:
        logger.info("Starting calendar layout debug script")
        settings = CalendarSettings.from_env()
        tz = settings.timezone
        now = datetime.now(tz)
        today = now.date()

        day_start, day_end = day_bounds(today, tz)
        events = EventsClient(settings).get_events(day_start, day_end)
        logger.info(f"Successfully retrieved {len(events)} events")

        diagnostics = []
        resolved = resolve_events(events, tz, now, diagnostics)
        partition = classify_day(resolved, today, tz)

        print("\nAll-day / multi-day:")
        print("-" * 80)
        for event in partition.spanning:
            segment = segment_span(event, today, window_start=today)
            print(f"{event.title}: first={segment.is_first_day} last={segment.is_last_day} "
                  f"title={segment.show_title} corners={segment.corners.value}")

        print("\nTimed:")
        print("-" * 80)
        for item in layout_day(resolved, today, settings.geometry, tz):
            print(f"{item.event.start:%H:%M}-{item.event.end:%H:%M} {item.event.title}: "
                  f"column={item.column} top={item.top:.1f} height={item.height:.1f} "
                  f"left={item.left:.2f} width={item.width:.2f} z={item.z_index}")

        cursor = compute_time_cursor(now, settings.start_hour, settings.end_hour)
        print(f"\nNow line: {cursor.percent:.1f}% (visible={cursor.visible})")

        if diagnostics:
            print("\nDiagnostics:")
            print("-" * 80)
            for diagnostic in diagnostics:
                print(f"[{diagnostic.kind.value}] {diagnostic.message}")

    except Exception:
        logger.error("An error occurred:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
