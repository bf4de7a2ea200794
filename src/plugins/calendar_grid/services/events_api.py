"""Event-data source: fetches calendar events from the remote data store."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from ..config import CalendarSettings
from ..layout.resolve import parse_instant
from ..models import CalendarEvent, EventColor

logger = logging.getLogger(__name__)

# Constants
EVENTS_ENDPOINT = "/api/v1/events"
PAGE_SIZE = 200


class EventsClient:
    """A class to read calendar events from the events API."""

    def __init__(self, settings: CalendarSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {'Accept': 'application/json'}
        if self.settings.api_token:
            headers['Authorization'] = f'Bearer {self.settings.api_token}'
        return headers

    def get_events(self, range_start: datetime, range_end: datetime) -> List[CalendarEvent]:
        """
        Fetch every event overlapping a time range.

        Args:
            range_start: Start of the requested range
            range_end: End of the requested range

        Returns:
            List[CalendarEvent]: Events with instants in the configured timezone

        Raises:
            RuntimeError: If the request fails or the response is malformed
        """
        url = f'{self.settings.api_url}{EVENTS_ENDPOINT}'
        logger.info(f"Fetching events from {range_start} to {range_end}")

        raw_events: List[Dict[str, Any]] = []
        offset = 0
        while True:
            data = self._fetch_page(url, range_start, range_end, offset)
            items = data['items']
            raw_events.extend(items)
            offset += len(items)

            total = data.get('total', offset)
            if not items or offset >= total:
                break

        logger.info(f"Retrieved {len(raw_events)} events from the events API")
        return self._organize_events(raw_events)

    def _fetch_page(self, url: str, range_start: datetime, range_end: datetime,
                    offset: int) -> Dict[str, Any]:
        params = {
            'start': range_start.isoformat(),
            'end': range_end.isoformat(),
            'limit': PAGE_SIZE,
            'offset': offset,
        }
        try:
            response = self.session.get(
                url, headers=self._headers(), params=params,
                timeout=self.settings.request_timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to fetch events: {str(e)}")
            raise RuntimeError(f"Failed to fetch events: {str(e)}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid API response: {str(e)}")
            raise RuntimeError(f"Invalid API response: {str(e)}")

        if not isinstance(data, dict) or 'items' not in data:
            logger.error("Invalid API response format: missing 'items' field")
            raise RuntimeError("Invalid API response format: missing 'items' field")
        return data

    def _organize_events(self, items: List[Dict[str, Any]]) -> List[CalendarEvent]:
        events = []
        for item in items:
            try:
                events.append(self._format_event(item))
            except (AttributeError, TypeError) as e:
                logger.warning(f"Failed to process event {item!r}: {str(e)}")
                continue
        return events

    def _format_event(self, item: Dict[str, Any]) -> CalendarEvent:
        """
        Convert an API event into a CalendarEvent.

        Instants that parse are converted to the configured timezone; the rest
        are kept as raw strings so the layout pass can flag them.
        """
        tz = self.settings.timezone
        start = item.get('start')
        end = item.get('end')
        event_id = item.get('id')

        return CalendarEvent(
            id=str(event_id) if event_id not in (None, '') else None,
            title=item.get('title') or '',
            start=parse_instant(start, tz) or start,
            end=parse_instant(end, tz) or end,
            all_day=bool(item.get('allDay', False)),
            color=EventColor.parse(item.get('color')),
            description=item.get('description'),
            location=item.get('location'),
        )
