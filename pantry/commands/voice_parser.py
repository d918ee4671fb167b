"""Voice command parser: turn a grocery transcript into a ParsedCommand.

Handles:
    "add milk"                        -> add [Milk]
    "add milk and eggs"               -> add [Milk, Eggs]
    "add 3 apples"                    -> add [Apples x3]
    "add two pounds of chicken"       -> add [Chicken, 2 pounds]
    "check off bread"                 -> complete [Bread]
    "uncheck the eggs"                -> uncomplete [The Eggs]
    "remove cheese"                   -> remove [Cheese]
    "add milk to costco list"         -> add [Milk] on list "costco"
    "add milk to my shopping list"    -> add [Milk] on the default list

Pipeline: normalize -> detect action -> extract target list -> strip action
verb -> split items -> parse quantity/unit/name for each item.

The parser never raises. Unknown verbs fall back to "add", phrases without
a recognizable quantity become plain names, and an empty transcript yields a
single item with an empty name.
"""

import re

from pantry.commands.parse import (
    ADD, COMPLETE, UNCOMPLETE, REMOVE, ParsedCommand, ParsedItem,
)
from pantry.commands.template import TemplatePattern, alternatives, match_any

# Matching order is significant: first category, then first verb, wins.
ACTION_VERBS = (
    (ADD, ("add", "adding", "buy", "get", "need", "pick up", "grab")),
    (COMPLETE, ("check off", "mark", "complete", "done with", "got", "bought")),
    (UNCOMPLETE, ("uncheck", "unmark", "undo")),
    (REMOVE, ("remove", "delete", "clear", "take off")),
)

UNITS = (
    "pound", "pounds", "lb", "lbs", "ounce", "ounces", "oz",
    "can", "cans", "box", "boxes", "bag", "bags", "bottle", "bottles",
    "gallon", "gallons", "quart", "quarts", "cup", "cups", "dozen",
)

NUMBER_WORDS = (
    ("one", 1), ("two", 2), ("three", 3), ("four", 4), ("five", 5),
    ("six", 6), ("seven", 7), ("eight", 8), ("nine", 9), ("ten", 10),
    ("eleven", 11), ("twelve", 12),
    ("half", 0.5), ("quarter", 0.25),
)
_WORD_VALUES = dict(NUMBER_WORDS)

_COUNT_WORDS = [w for w, _ in NUMBER_WORDS[:12]]        # one..twelve
_UNIT_COUNT_WORDS = _COUNT_WORDS[:10]                   # one..ten
_FRACTION_WORDS = ["half", "quarter"]

_ACTION_LABELS = {
    ADD: "Added",
    COMPLETE: "Checked off",
    UNCOMPLETE: "Unchecked",
    REMOVE: "Removed",
}

# Captured names that mean "whatever the default list is"
_GENERIC_LISTS = ("shopping", "grocery")

# Trailing list clauses, tried in order. Each needs some text before it.
_LIST_PATTERNS = [
    (TemplatePattern("$rest to my $list[shopping|grocery] list"), "default"),
    (TemplatePattern("$rest to the $list[shopping|grocery] list"), "default"),
    (TemplatePattern("$rest to my $list list"), "named"),
    (TemplatePattern("$rest to [the |]$list list"), "named"),
    (TemplatePattern("$rest on [my|the] $list list"), "named"),
]

_UNIT = "$unit" + alternatives(UNITS)

# (pattern, has_unit), in declared priority order
_QUANTITY_PATTERNS = [
    (TemplatePattern("#quantity $name"), False),
    (TemplatePattern("$quantity" + alternatives(_COUNT_WORDS) + " $name"), False),
    (TemplatePattern("$quantity" + alternatives(_FRACTION_WORDS) + " $name"), False),
    (TemplatePattern(f"#quantity {_UNIT} [of |]$name"), True),
    (TemplatePattern("$quantity" + alternatives(_UNIT_COUNT_WORDS) + f" {_UNIT} [of |]$name"), True),
]

_AND_RE = re.compile(r"\s+and\s+", re.IGNORECASE)
_TRAILING_PUNCT_RE = re.compile(r"[.,!?;:]+$")


def clean_transcript(text):
    """Trim a speech-recognition transcript and drop trailing punctuation."""
    return _TRAILING_PUNCT_RE.sub("", text.strip())


def normalize(transcript):
    return transcript.lower().strip()


def detect_action(text):
    """Classify normalized text as add, complete, uncomplete or remove.

    A verb matches when the text starts with it or contains it with a space
    on each side. Falls back to "add".
    """
    for action, verbs in ACTION_VERBS:
        for verb in verbs:
            if text.startswith(verb) or f" {verb} " in text:
                return action
    return ADD


def extract_target_list(text):
    """Strip a trailing "to/on ... list" clause.

    Returns (remaining_text, target_list). target_list is None when there is
    no clause or the clause names the generic shopping/grocery list.
    """
    match = match_any(_LIST_PATTERNS, text)
    if match is None:
        return text, None
    kind, fields = match
    name = fields["list"].lower()
    if kind == "default" or name in _GENERIC_LISTS:
        return fields["rest"], None
    return fields["rest"], name


def strip_action_verb(text, action):
    """Remove the first of the action's verbs that prefixes text."""
    for verb in dict(ACTION_VERBS)[action]:
        if text.startswith(verb):
            return text[len(verb):].strip()
    return text


def split_items(text):
    """Split "milk, eggs, and bread" into ["milk", "eggs", "bread"].

    Always returns at least one phrase; with nothing to split, that phrase is
    the original text.
    """
    parts = [p.strip() for p in _AND_RE.sub(", ", text).split(",")]
    parts = [p for p in parts if p]
    return parts or [text]


def _quantity_value(text):
    value = _WORD_VALUES.get(text.lower())
    if value is None:
        value = int(text)
    return value


def _has_unit_match(text):
    return any(p.match(text) is not None for p, has_unit in _QUANTITY_PATTERNS if has_unit)


def parse_item(text):
    """Parse one item phrase into a ParsedItem.

    Patterns are tried in declared order. A unit-less pattern gives way when
    a unit-aware pattern also matches, so "3 pounds of rice" keeps its unit.
    """
    cleaned = text.strip()
    for pattern, has_unit in _QUANTITY_PATTERNS:
        fields = pattern.match(cleaned)
        if fields is None:
            continue
        if not has_unit and _has_unit_match(cleaned):
            continue
        try:
            quantity = _quantity_value(fields["quantity"])
        except ValueError:
            # more digits than int() will convert
            continue
        if quantity <= 0:
            continue
        name = capitalize(fields["name"])
        if not name:
            break
        return ParsedItem(
            name=name,
            quantity=quantity,
            unit=fields.get("unit"),
            original_text=text,
        )
    return ParsedItem(name=capitalize(cleaned), original_text=text)


def capitalize(text):
    """Upper-case the first letter of each space-separated word."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def parse_voice_command(transcript):
    """Parse a cleaned transcript into a ParsedCommand. Never raises."""
    normalized = normalize(transcript)
    action = detect_action(normalized)
    without_list, target_list = extract_target_list(normalized)
    without_action = strip_action_verb(without_list, action)
    items = tuple(parse_item(phrase) for phrase in split_items(without_action))
    return ParsedCommand(
        action=action,
        items=items,
        target_list=target_list,
        raw=transcript,
    )


# --- Display ---

def format_quantity(quantity):
    """Render 3 as "3", 2.0 as "2" and 0.5 as "0.5"."""
    if isinstance(quantity, int):
        return str(quantity)
    if quantity.is_integer():
        return str(int(quantity))
    return str(quantity)


def describe_item(item):
    if item.quantity and item.unit:
        return f"{format_quantity(item.quantity)} {item.unit} of {item.name}"
    if item.quantity:
        return f"{format_quantity(item.quantity)} {item.name}"
    return item.name


def format_command_summary(command):
    """One-line summary such as "Added 2 pounds of Chicken, Milk"."""
    label = _ACTION_LABELS.get(command.action, _ACTION_LABELS[ADD])
    return f"{label} {', '.join(describe_item(item) for item in command.items)}"
