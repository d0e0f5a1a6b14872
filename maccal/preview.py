#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import sys
import json
from datetime import date, timedelta
from typing import List, Optional

from maccal.config import get_testing_mode, load_config
from maccal.logger import setup_logger
from maccal.quick_add import ParsedEvent, QuickAddParser

# Get logger
logger = setup_logger('preview', testing=get_testing_mode())

def format_event_time(event: ParsedEvent) -> str:
    if event.is_all_day:
        return "All day"
    return f"{event.start.strftime('%-I:%M %p')} - {event.end.strftime('%-I:%M %p')}"

def format_day(day: date, today: date) -> str:
    if day == today:
        return "Today"
    elif day == today + timedelta(days=1):
        return "Tomorrow"
    return day.strftime("%A, %B %-d")

class EventPreview:
    def __init__(self, parser: Optional[QuickAddParser] = None, calendar: Optional[str] = None):
        logger.debug("Initializing EventPreview")
        self.parser = parser or QuickAddParser()
        if calendar is None:
            calendar = load_config().get('default_calendar') or 'No default calendar'
        self.calendar = calendar

    def generate_items(self, text: str, reference_date: date, today: Optional[date] = None) -> List[dict]:
        """Generate preview items"""
        logger.debug(f"Generating preview for: {text}")
        event = self.parser.parse(text, reference_date)
        if event is None:
            return [{
                "title": "Type event details...",
                "subtitle": "e.g. lunch 12-1:30pm",
                "valid": False
            }]

        when = f"{format_day(event.start.date(), today or date.today())} {format_event_time(event)}"
        return [{
            "title": event.title,
            "subtitle": " • ".join([f"📅 {self.calendar}", when]),
            "arg": text,
            "valid": True
        }]

def main():
    query = " ".join(sys.argv[1:])
    preview = EventPreview()
    items = preview.generate_items(query, date.today())
    print(json.dumps({"items": items}))

if __name__ == "__main__":
    main()
