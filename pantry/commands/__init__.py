from pantry.commands.voice_parser import (
    parse_voice_command, format_command_summary, clean_transcript,
)
from pantry.commands.parse import ParsedCommand, ParsedItem
from pantry.commands import grocery, router
