"""Quick-add parser: turns "lunch 12-1:30pm" into a titled time interval.

Rules are tried in order and the first one that finds a time wins:

1. a time range with a mandatory end meridiem ("9-5pm", "2pm to 3:30pm")
2. the first detected date/time phrase whose time is not midnight ("at 7pm")
3. nothing: the event defaults to 9:00 on the reference day

Times always land on the reference day; an event without an explicit end
lasts one hour.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Optional, Tuple

from maccal import build_range_pattern, to_24_hour
from maccal.config import get_testing_mode
from maccal.detector import DateTimeDetector
from maccal.logger import setup_logger

logger = setup_logger('quick_add', testing=get_testing_mode())

PLACEHOLDER_TITLE = 'New Event'
DEFAULT_START = (9, 0)
DEFAULT_DURATION = timedelta(hours=1)

RANGE_PATTERN = re.compile(build_range_pattern(), re.IGNORECASE)
LEADING_CONNECTOR = re.compile(r'^(?:(?:at|on|for)\b|-)\s*', re.IGNORECASE)
TRAILING_CONNECTOR = re.compile(r'\s*(?:\b(?:at|on|for)|-)$', re.IGNORECASE)


@dataclass(frozen=True)
class ParsedEvent:
    title: str
    start: datetime
    end: datetime
    is_all_day: bool = False

    def to_dict(self) -> Dict:
        return {
            'title': self.title,
            'start_date': self.start.strftime('%Y-%m-%d'),
            'start_time': self.start.strftime('%H:%M:%S'),
            'end_date': self.end.strftime('%Y-%m-%d'),
            'end_time': self.end.strftime('%H:%M:%S'),
            'is_all_day': self.is_all_day,
        }


def strip_connectors(text: str) -> str:
    """Strip whitespace and dangling "at", "on", "for" or "-" from both ends"""
    previous = None
    text = text.strip()
    while text != previous:
        previous = text
        text = LEADING_CONNECTOR.sub('', text)
        text = TRAILING_CONNECTOR.sub('', text).strip()
    return text


def remove_span(text: str, start: int, end: int) -> str:
    return f"{text[:start].rstrip()} {text[end:].lstrip()}"


class QuickAddParser:
    def __init__(self, detector: Optional[DateTimeDetector] = None):
        self.range_pattern = RANGE_PATTERN
        self.detector = detector or DateTimeDetector()

    def parse_range(self, text: str) -> Optional[Tuple[Tuple[int, int], Tuple[int, int], str]]:
        """Find the first time range, returning start, end and the remaining text.

        A start clause without am/pm is inferred from the end clause:
        "9-5pm" starts in the morning, "1-5pm" in the afternoon.
        """
        match = self.range_pattern.search(text)
        if not match:
            return None

        start_hour = int(match.group(1))
        start_min = int(match.group(2)) if match.group(2) else 0
        start_meridiem = match.group(3).lower() if match.group(3) else None
        end_hour = int(match.group(4))
        end_min = int(match.group(5)) if match.group(5) else 0
        end_meridiem = match.group(6).lower()

        max_start_hour = 12 if start_meridiem else 23
        if not (0 <= start_hour <= max_start_hour and 1 <= end_hour <= 12
                and start_min <= 59 and end_min <= 59):
            logger.debug(f"Ignoring malformed range {match.group(0)!r}")
            return None

        start_is_pm = start_meridiem == 'pm'
        if start_meridiem is None and end_meridiem == 'pm':
            if start_hour > end_hour:
                start_is_pm = False
            elif start_hour < 12:
                start_is_pm = True

        # Only an explicit "am" turns 12 into 0
        start_hour = to_24_hour(start_hour, 'pm' if start_is_pm else start_meridiem)
        end_hour = to_24_hour(end_hour, end_meridiem)

        logger.debug(f"Range {match.group(0)!r} -> {start_hour}:{start_min:02d}-{end_hour}:{end_min:02d}")
        remaining = remove_span(text, match.start(), match.end())
        return (start_hour, start_min), (end_hour, end_min), remaining

    def parse_time(self, text: str, reference: date) -> Optional[Tuple[Tuple[int, int], str]]:
        """Find the first detected phrase carrying a usable (non-midnight) time"""
        for detection in self.detector.detect(text, reference):
            if detection.is_midnight:
                logger.debug(f"Skipping date-only phrase {detection.matched!r}")
                continue
            logger.debug(f"Time {detection.matched!r} -> {detection.hour}:{detection.minute:02d}")
            remaining = remove_span(text, detection.start, detection.end)
            return (detection.hour, detection.minute), remaining
        return None

    def parse(self, text: str, reference_date: date) -> Optional[ParsedEvent]:
        """Parse quick-add text; returns None when there is nothing to parse"""
        trimmed = (text or '').strip()
        if not trimmed:
            return None

        start_time = end_time = None
        candidate = trimmed

        time_range = self.parse_range(trimmed)
        if time_range:
            start_time, end_time, remaining = time_range
            candidate = strip_connectors(remaining)
        else:
            single = self.parse_time(trimmed, reference_date)
            if single:
                start_time, remaining = single
                candidate = strip_connectors(remaining)

        title = candidate or trimmed or PLACEHOLDER_TITLE

        start = at_time(reference_date, *(start_time or DEFAULT_START))
        if end_time:
            end = at_time(reference_date, *end_time)
        else:
            end = start + DEFAULT_DURATION

        event = ParsedEvent(title=title, start=start, end=end)
        logger.debug(f"Parsed {text!r} -> {event}")
        return event


def at_time(day: date, hour: int, minute: int) -> datetime:
    """The given time of day on day's calendar date, keeping any tzinfo"""
    if isinstance(day, datetime):
        return day.replace(hour=hour, minute=minute, second=0, microsecond=0)
    return datetime(day.year, day.month, day.day, hour, minute)


_default_parser = QuickAddParser()

def parse(text: str, reference_date: date) -> Optional[ParsedEvent]:
    return _default_parser.parse(text, reference_date)
