"""Natural-language quick-add for the MacCal menu-bar calendar."""

# Clock-time pattern components
TIME_COMPONENTS = {
    'hours': r'(\d{1,2})',                  # 1-12 (validated after matching)
    'minutes': r'(?::(\d{2}))?',            # :00-:59
    'meridiem': r'(am|pm)',                 # full am/pm only
    'spaces': r'\s*',                       # Optional spaces
    'separator': r'(?:-|to)'                # "9-5pm", "9 to 5pm"
}

# Build range pattern
def build_range_pattern():
    """Build the "H[:MM] [am|pm] (-|to) H[:MM] (am|pm)" pattern from components.

    Groups: start hour, start minutes, start meridiem, end hour, end minutes,
    end meridiem. Only the end meridiem is mandatory.
    """
    return (r"\b"
            f"{TIME_COMPONENTS['hours']}"
            f"{TIME_COMPONENTS['minutes']}"
            f"{TIME_COMPONENTS['spaces']}"
            f"{TIME_COMPONENTS['meridiem']}?"
            f"{TIME_COMPONENTS['spaces']}"
            f"{TIME_COMPONENTS['separator']}"
            f"{TIME_COMPONENTS['spaces']}"
            f"{TIME_COMPONENTS['hours']}"
            f"{TIME_COMPONENTS['minutes']}"
            f"{TIME_COMPONENTS['spaces']}"
            f"{TIME_COMPONENTS['meridiem']}"
            r"\b")

def build_clock_pattern():
    """Build single clock time pattern (7pm, 7:30 p.m., 7p, 19:00)"""
    return (r"\b\d{1,2}"
            r"(?:"
            r"(?::\d{2})?\s*[ap]\.?(?:\s*m\.?)?(?![a-z])"
            r"|:\d{2}\b"
            r")")

# Shared 12h -> 24h conversion
def to_24_hour(hour, meridiem):
    """Convert a 12-hour clock value; meridiem is 'am', 'pm' or None"""
    if meridiem == 'pm' and hour < 12:
        return hour + 12
    if meridiem == 'am' and hour == 12:
        return 0
    return hour
