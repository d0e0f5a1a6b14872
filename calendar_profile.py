#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import sys
import json
import re

from maccal.config import get_testing_mode, load_config, save_config
from maccal.event_sink import AppleCalendarSink
from maccal.logger import setup_logger

logger = setup_logger('calendar_profile', testing=get_testing_mode())

def sort_calendars(calendars):
    """Sort calendars with numbers and alphabetically"""
    def sort_key(name):
        parts = re.split(r'(\d+)', name)
        return [int(part) if part.isdigit() else part.lower() for part in parts]

    return sorted(calendars, key=sort_key)

class CalendarProfileManager:
    def __init__(self, sink=None, config=None):
        self.config = config if config is not None else load_config()
        self.sink = sink or AppleCalendarSink(self.config)
        self.calendars = sort_calendars(self.sink.available_calendars())
        if not self.config.get('default_calendar') and self.calendars:
            self.save_config(self.calendars[0])
        logger.debug(f"Calendars: {self.calendars}")
        logger.debug(f"Config: {self.config}")

    def save_config(self, calendar_name):
        """Save calendar_name as the default calendar"""
        if calendar_name not in self.calendars:
            return False
        self.config['default_calendar'] = calendar_name
        try:
            save_config(self.config)
        except OSError as e:
            logger.error(f"Failed to save configuration: {e}")
            return False
        return True

    def generate_items(self, query=None):
        """Generate calendar picker items"""
        items = []
        query_lower = query.lower() if query else ""
        default_cal = self.config.get('default_calendar', '')

        matching_calendars = [
            cal for cal in self.calendars
            if not query_lower or query_lower in cal.lower()
        ]

        # Move default to top
        if default_cal in matching_calendars:
            matching_calendars.remove(default_cal)
            items.append({
                "title": f"✓ {default_cal}",
                "subtitle": "Current default calendar",
                "valid": False
            })

        for cal in matching_calendars:
            items.append({
                "title": cal,
                "subtitle": "Press Enter to set as default calendar",
                "arg": f"--set:{cal}",
                "valid": True
            })

        return items

def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    manager = CalendarProfileManager()
    arg = " ".join(args)
    logger.debug(f"Received argument: {arg}")

    if arg.startswith("--set:"):
        calendar_name = arg.replace("--set:", "").strip()
        if manager.save_config(calendar_name):
            print(json.dumps({
                "arg": f"📅 {calendar_name}",
                "variables": {
                    "calendar": calendar_name,
                    "notificationTitle": "Default Calendar Set"
                }
            }))
            return 0
        logger.error(f"Failed to set calendar: {calendar_name}")
        print(json.dumps({
            "arg": f"Calendar '{calendar_name}' not found",
            "variables": {
                "error": "true",
                "notificationTitle": "Error"
            }
        }))
        return 1

    print(json.dumps({"items": manager.generate_items(arg)}))
    return 0

if __name__ == "__main__":
    sys.exit(main())
