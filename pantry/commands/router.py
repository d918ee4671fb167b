"""Command router: clean a transcript, parse it, log it, and run it.

The transcript source (CLI, REPL, or any other front end) calls
dispatch(text); the grocery store applies the parsed command.
"""

import os
from datetime import datetime

from pantry.commands import grocery
from pantry.commands.voice_parser import clean_transcript, parse_voice_command

last_response = None  # most recent command response

# Log file: lives next to the pantry package directory
_LOG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "pantry.log")


def _log_request(text, command, source="[text]"):
    """Append a compact 2-line entry to the log file."""
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    if command is None:
        parse_line = "  -> none"
    else:
        parts = [command.action, f"items={[item.name for item in command.items]!r}"]
        if command.target_list:
            parts.append(f"target_list={command.target_list!r}")
        parse_line = f"  -> {', '.join(parts)}"
    try:
        with open(_LOG_PATH, "a") as f:
            f.write(f"{ts} {source}  {text}\n{parse_line}\n")
    except OSError:
        pass


def dispatch(text, list_id=None, source="[text]"):
    """Parse a transcript and apply it to the grocery lists.

    Args:
        text: Transcribed user input, punctuation and all.
        list_id: Explicit Our Groceries list id; overrides any list named
            in the transcript.
        source: Source tag for logging, e.g. "[text]" or "[stdin]".

    Returns:
        (response, command): response text and the ParsedCommand, or
        (message, None) when the transcript is empty.
    """
    global last_response

    cleaned = clean_transcript(text or "")
    if not cleaned:
        _log_request(text or "", None, source)
        return "No transcript provided.", None

    command = parse_voice_command(cleaned)
    _log_request(cleaned, command, source)
    response = grocery.handle(command, list_id)
    last_response = response
    return response, command
