"""Date/time phrase detection for free-form text.

Finds phrases such as "7pm", "tomorrow at 7:30 p.m.", "friday", "dec 3rd"
or "19:00" and resolves each one with dateutil against a reference day.
Phrases that only name a day resolve to midnight of that day.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, Optional

from dateutil import parser as date_parser

from maccal import build_clock_pattern

RELATIVE_DAYS = {
    'today': 0,
    'tonight': 0,
    'tomorrow': 1,
    'tmr': 1,
    'yesterday': -1,
}

WEEKDAYS = 'monday|tuesday|wednesday|thursday|friday|saturday|sunday'

# Short forms double as ordinary words ("in the sun"), so they only count
# after next/this/on or right before a number
SHORT_WEEKDAYS = 'mon|tues|tue|wed|thurs|thur|thu|fri|sat|sun'

MONTHS = ('january|jan|february|feb|march|mar|april|apr|may|june|jun|july|jul|'
          'august|aug|september|sept|sep|october|oct|november|nov|december|dec')

TOKEN_PATTERN = re.compile(
    r'\b(?:'
    rf"{'|'.join(RELATIVE_DAYS)}"
    rf'|(?:(?:next|this)\s+)?(?:{WEEKDAYS})'
    rf'|(?:next|this|on)\s+(?:{SHORT_WEEKDAYS})'
    rf'|(?:{SHORT_WEEKDAYS})(?=,?\s*\d)'
    rf'|(?:{MONTHS})\.?\s+\d{{1,2}}(?:st|nd|rd|th)?(?:,?\s+\d{{4}})?'
    r'|\d{4}-\d{2}-\d{2}'
    r'|\d{1,2}/\d{1,2}(?:/\d{2,4})?'
    r'|noon|midnight'
    r')\b'
    rf'|{build_clock_pattern()}',
    re.IGNORECASE)

# Text allowed between two tokens of the same phrase
GAP_PATTERN = re.compile(r'(?:\s+|,|at\b|on\b)*', re.IGNORECASE)
CLOCK_TOKEN = re.compile(rf'{build_clock_pattern()}|noon|midnight', re.IGNORECASE)

SHORT_MERIDIEM = re.compile(r'(\d)\s*([ap])\.?(?:\s*m\.?)?(?![a-z])', re.IGNORECASE)
TWELVE_HOUR_CLOCK = re.compile(r'\b(\d{1,2})(?::\d{2})? [ap]m\b')

# Spellings dateutil does not know
DAY_ALIASES = {
    'tues': 'tue',
    'thurs': 'thu',
    'thur': 'thu',
}


@dataclass(frozen=True)
class Detection:
    start: int
    end: int
    matched: str
    value: datetime

    @property
    def hour(self) -> int:
        return self.value.hour

    @property
    def minute(self) -> int:
        return self.value.minute

    @property
    def is_midnight(self) -> bool:
        return self.value.hour == 0 and self.value.minute == 0


class DateTimeDetector:
    def detect(self, text: str, reference: Optional[date] = None) -> Iterator[Detection]:
        """Yield resolvable date/time phrases in text, left to right"""
        if reference is None:
            reference = date.today()
        for start, end in self._phrases(text):
            value = self.resolve(text[start:end], reference)
            if value is not None:
                yield Detection(start, end, text[start:end], value)

    def _phrases(self, text):
        """Merge adjacent tokens joined only by whitespace, commas, "at" or "on".

        A phrase holds at most one clock time: "7pm 8pm" is two phrases.
        """
        span = None
        has_clock = False
        for match in TOKEN_PATTERN.finditer(text):
            is_clock = bool(CLOCK_TOKEN.fullmatch(match.group(0)))
            if (span and GAP_PATTERN.fullmatch(text, span[1], match.start())
                    and not (has_clock and is_clock)):
                span = (span[0], match.end())
                has_clock = has_clock or is_clock
                continue
            if span:
                yield span
            span = (match.start(), match.end())
            has_clock = is_clock
        if span:
            yield span

    def resolve(self, phrase: str, reference: date) -> Optional[datetime]:
        """Resolve a phrase to a datetime on or around the reference day"""
        text = phrase.lower()
        offset = 0
        for word, days in RELATIVE_DAYS.items():
            text, count = re.subn(rf'\b{word}\b', ' ', text)
            if count:
                offset = days
        text = re.sub(r'\b(?:next|this)\b', ' ', text)
        for alias, name in DAY_ALIASES.items():
            text = re.sub(rf'\b{alias}\b', name, text)
        text = text.replace('noon', '12:00 pm').replace('midnight', '12:00 am')
        text = SHORT_MERIDIEM.sub(r'\1 \2m', text)
        text = ' '.join(text.replace(',', ' ').split())
        # dateutil happily reads "13pm" as 13:00
        if any(not 1 <= int(m.group(1)) <= 12 for m in TWELVE_HOUR_CLOCK.finditer(text)):
            return None

        try:
            default = datetime(reference.year, reference.month, reference.day) + timedelta(days=offset)
            if not text:
                return default
            return date_parser.parse(text, default=default)
        except (ValueError, OverflowError):
            return None
