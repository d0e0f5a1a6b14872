#!/usr/bin/env python3
import sys
import json
import asyncio
from dataclasses import dataclass
from datetime import date
from typing import Optional

from maccal.config import get_testing_mode
from maccal.errors import ErrorKind, QuickAddError
from maccal.event_sink import AppleCalendarSink, EventSink
from maccal.logger import setup_logger
from maccal.quick_add import ParsedEvent, QuickAddParser

# Get logger
logger = setup_logger('create_event', testing=get_testing_mode())


@dataclass(frozen=True)
class CreateResult:
    title: Optional[str] = None
    event: Optional[ParsedEvent] = None
    error: Optional[QuickAddError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class EventCreator:
    def __init__(self, sink: EventSink, parser: Optional[QuickAddParser] = None):
        self.sink = sink
        self.parser = parser or QuickAddParser()

    def create_event(self, text: str, reference_date: date) -> CreateResult:
        """Parse text and save the event; failures come back in the result"""
        if not self.sink.is_authorized():
            return self._fail(ErrorKind.ACCESS_DENIED)

        event = self.parser.parse(text, reference_date)
        if event is None:
            return self._fail(ErrorKind.NO_INPUT)

        return self.save(event)

    async def create_event_async(self, text: str, reference_date: date) -> CreateResult:
        """Like create_event, with the sink calls run off the event loop"""
        event = self.parser.parse(text, reference_date)
        return await asyncio.to_thread(self._authorize_and_save, event)

    def _authorize_and_save(self, event: Optional[ParsedEvent]) -> CreateResult:
        if not self.sink.is_authorized():
            return self._fail(ErrorKind.ACCESS_DENIED)
        if event is None:
            return self._fail(ErrorKind.NO_INPUT)
        return self.save(event)

    def save(self, event: ParsedEvent) -> CreateResult:
        calendar = self.sink.default_calendar()
        if calendar is None:
            return self._fail(ErrorKind.NO_DEFAULT_DESTINATION)

        logger.debug(f"Creating event: {event} in {calendar}")
        try:
            self.sink.save(event.title, event.start, event.end, event.is_all_day, calendar)
        except Exception as e:
            logger.error(f"Error saving event: {e}", exc_info=True)
            return self._fail(ErrorKind.PERSIST_FAILED, cause=e)

        return CreateResult(title=event.title, event=event)

    def _fail(self, kind: ErrorKind, cause: Optional[Exception] = None) -> CreateResult:
        error = QuickAddError(kind, cause=cause)
        logger.error(f"Quick add failed: {error.message}")
        return CreateResult(error=error)


def notification(result: CreateResult) -> str:
    """Notification payload for a creation result"""
    if result.ok:
        start = result.event.start.strftime('%-I:%M %p')
        end = result.event.end.strftime('%-I:%M %p')
        return json.dumps({
            "arg": f"{start} - {end}",
            "variables": {
                "notificationTitle": result.title
            }
        })
    return json.dumps({
        "arg": result.error.message,
        "variables": {
            "error": result.error.kind.value,
            "notificationTitle": "Error"
        }
    })


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    text = " ".join(args)
    logger.debug(f"Received quick add text: {text!r}")

    creator = EventCreator(AppleCalendarSink())
    result = creator.create_event(text, date.today())
    print(notification(result))
    return 0 if result.ok else 1


if __name__ == '__main__':
    sys.exit(main())
