import asyncio
import json
import unittest
from datetime import date, datetime
from unittest import mock

from maccal import create_event
from maccal.create_event import CreateResult, EventCreator, notification
from maccal.errors import ErrorKind
from maccal.event_sink import MemorySink
from maccal.quick_add import ParsedEvent

class TestEventCreator(unittest.TestCase):
    def setUp(self):
        self.day = date(2026, 10, 18)
        self.sink = MemorySink(calendar="Work")
        self.creator = EventCreator(self.sink)

    def test_creates_event(self):
        result = self.creator.create_event("lunch 12:30-1:45pm", self.day)
        self.assertTrue(result.ok)
        self.assertEqual(result.title, "lunch")
        self.assertEqual(self.sink.events, [{
            'title': 'lunch',
            'start': datetime(2026, 10, 18, 12, 30),
            'end': datetime(2026, 10, 18, 13, 45),
            'is_all_day': False,
            'calendar': 'Work',
        }])

    def test_failures(self):
        test_cases = [
            (MemorySink(authorized=False), "movie at 7pm", ErrorKind.ACCESS_DENIED),
            (MemorySink(), "   ", ErrorKind.NO_INPUT),
            (MemorySink(calendar=None), "movie at 7pm", ErrorKind.NO_DEFAULT_DESTINATION),
            (MemorySink(error=OSError("disk full")), "movie at 7pm", ErrorKind.PERSIST_FAILED),
        ]

        for sink, text, kind in test_cases:
            with self.subTest(kind=kind):
                result = EventCreator(sink).create_event(text, self.day)
                self.assertFalse(result.ok)
                self.assertIsNone(result.title)
                self.assertEqual(result.error.kind, kind)
                self.assertTrue(result.error.message)
                self.assertEqual(sink.events, [])

    def test_access_checked_before_parsing(self):
        parser = mock.Mock()
        result = EventCreator(MemorySink(authorized=False), parser).create_event("movie at 7pm", self.day)
        self.assertEqual(result.error.kind, ErrorKind.ACCESS_DENIED)
        parser.parse.assert_not_called()

    def test_persist_failure_keeps_cause(self):
        cause = RuntimeError("Calendar got an error")
        result = EventCreator(MemorySink(error=cause)).create_event("standup", self.day)
        self.assertIs(result.error.cause, cause)
        self.assertIn("Calendar got an error", result.error.message)

    def test_create_event_async(self):
        result = asyncio.run(self.creator.create_event_async("movie at 7pm", self.day))
        self.assertTrue(result.ok)
        self.assertEqual(result.event.start, datetime(2026, 10, 18, 19, 0))
        self.assertEqual(len(self.sink.events), 1)

    def test_create_event_async_failures(self):
        test_cases = [
            (MemorySink(authorized=False), "", ErrorKind.ACCESS_DENIED),
            (MemorySink(), "", ErrorKind.NO_INPUT),
        ]

        for sink, text, kind in test_cases:
            with self.subTest(kind=kind):
                result = asyncio.run(EventCreator(sink).create_event_async(text, self.day))
                self.assertEqual(result.error.kind, kind)

class TestNotification(unittest.TestCase):
    def test_success(self):
        event = ParsedEvent("movie", datetime(2026, 10, 18, 19, 0), datetime(2026, 10, 18, 20, 0))
        payload = json.loads(notification(CreateResult(title="movie", event=event)))
        self.assertEqual(payload["arg"], "7:00 PM - 8:00 PM")
        self.assertEqual(payload["variables"]["notificationTitle"], "movie")

    def test_failure(self):
        result = EventCreator(MemorySink(calendar=None)).create_event("movie", date(2026, 10, 18))
        payload = json.loads(notification(result))
        self.assertEqual(payload["arg"], "No default calendar set")
        self.assertEqual(payload["variables"]["error"], "no_default_destination")

    def test_main(self):
        sink = MemorySink()
        with mock.patch.object(create_event, 'AppleCalendarSink', return_value=sink), \
                mock.patch('builtins.print') as printed:
            self.assertEqual(create_event.main(["movie", "at", "7pm"]), 0)
        self.assertEqual(sink.events[0]['title'], "movie")
        payload = json.loads(printed.call_args[0][0])
        self.assertEqual(payload["variables"]["notificationTitle"], "movie")

        with mock.patch.object(create_event, 'AppleCalendarSink', return_value=MemorySink(authorized=False)), \
                mock.patch('builtins.print'):
            self.assertEqual(create_event.main([]), 1)

if __name__ == '__main__':
    unittest.main()
