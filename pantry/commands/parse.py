"""Parse objects for voice grocery commands.

parse_voice_command(text) returns a ParsedCommand holding one ParsedItem per
item phrase. Both are built fresh per call and never mutated afterwards.
"""

from dataclasses import dataclass, field

ADD = "add"
COMPLETE = "complete"
UNCOMPLETE = "uncomplete"
REMOVE = "remove"

ACTIONS = (ADD, COMPLETE, UNCOMPLETE, REMOVE)


@dataclass(frozen=True)
class ParsedItem:
    name: str                   # capitalized per word, e.g. "Paper Towels"
    quantity: float = None      # int for counts, 0.5 / 0.25 for fractions
    unit: str = None            # e.g. "pounds", "can"; only set with quantity
    original_text: str = ""     # item phrase before quantity extraction


@dataclass(frozen=True)
class ParsedCommand:
    action: str                 # one of ACTIONS
    items: tuple = field(default_factory=tuple)
    target_list: str = None     # lowercase list-name fragment, e.g. "costco"
    raw: str = ""               # transcript as received
