import subprocess
from datetime import datetime
from typing import Dict, List, Optional, Protocol

from maccal.config import get_testing_mode, load_config
from maccal.logger import setup_logger

logger = setup_logger('event_sink', testing=get_testing_mode())


class EventSink(Protocol):
    """Where quick-add events end up"""

    def is_authorized(self) -> bool: ...

    def default_calendar(self) -> Optional[str]: ...

    def save(self, title: str, start: datetime, end: datetime,
             is_all_day: bool, calendar: str) -> None: ...


class MemorySink:
    """Keeps saved events in a list; used for dry runs and tests"""

    def __init__(self, calendar: Optional[str] = 'Calendar', authorized: bool = True,
                 error: Optional[Exception] = None):
        self.calendar = calendar
        self.authorized = authorized
        self.error = error
        self.events: List[Dict] = []

    def is_authorized(self) -> bool:
        return self.authorized

    def default_calendar(self) -> Optional[str]:
        return self.calendar

    def save(self, title, start, end, is_all_day, calendar):
        if self.error is not None:
            raise self.error
        self.events.append({
            'title': title,
            'start': start,
            'end': end,
            'is_all_day': is_all_day,
            'calendar': calendar,
        })


def escape(value: str) -> str:
    """Escape a string for use inside an AppleScript string literal"""
    return value.replace('\\', '\\\\').replace('"', '\\"')


def date_script(name: str, value: datetime) -> str:
    return f'''set {name} to current date
                set day of {name} to 1
                set year of {name} to {value.year}
                set month of {name} to {value.month}
                set day of {name} to {value.day}
                set hours of {name} to {value.hour}
                set minutes of {name} to {value.minute}
                set seconds of {name} to 0'''


class AppleCalendarSink:
    """Creates events in Calendar.app through osascript"""

    def __init__(self, config: Optional[Dict] = None):
        self.config = config if config is not None else load_config()

    def run_script(self, script: str) -> str:
        result = subprocess.run(['osascript', '-e', script],
                                capture_output=True,
                                text=True,
                                check=True)
        return result.stdout.strip()

    def is_authorized(self) -> bool:
        """Probe Calendar access; macOS refuses scripting without permission"""
        try:
            self.run_script('tell application "Calendar" to count calendars')
            return True
        except subprocess.CalledProcessError as e:
            logger.error(f"Calendar access check failed: {e.stderr}")
            return False
        except FileNotFoundError:
            logger.error("osascript not found")
            return False

    def available_calendars(self) -> List[str]:
        """Get list of writable calendars"""
        script = '''
        tell application "Calendar"
            set calList to {}
            repeat with calItem in calendars
                try
                    if writable of calItem then
                        copy (name of calItem as string) to the end of calList
                    end if
                end try
            end repeat
            return calList
        end tell
        '''
        try:
            output = self.run_script(script)
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            logger.error(f"Error getting calendars: {e}")
            return []
        return [cal.strip() for cal in output.split(',') if cal.strip()]

    def default_calendar(self) -> Optional[str]:
        """The configured default calendar, if it is still writable"""
        configured = self.config.get('default_calendar')
        if not configured:
            return None
        matching = [cal for cal in self.available_calendars()
                    if cal.lower() == configured.lower()]
        return matching[0] if matching else None

    def save(self, title, start, end, is_all_day, calendar):
        properties = f'summary:"{escape(title)}", start date:startDate, end date:endDate'
        if is_all_day:
            properties += ', allday event:true'

        script = f'''tell application "Calendar"
            tell calendar "{escape(calendar)}"
                {date_script('startDate', start)}
                {date_script('endDate', end)}
                make new event at end of events with properties {{{properties}}}
            end tell
        end tell'''

        logger.debug(f"AppleScript: {script}")
        self.run_script(script)
