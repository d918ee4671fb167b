"""Grocery list store: apply a ParsedCommand to lists on Our Groceries.

Handles:
    add        -> add each item, with its quantity as an "Item (2 lbs)" note
    complete   -> cross off every item matching each name
    uncomplete -> restore every item matching each name
    remove     -> delete every item matching each name

The target list is the explicit list id when given, else the list named in
the command ("add milk to costco list"), else the configured default list.
"""

import asyncio
import re
import time
from dataclasses import dataclass
from ourgroceries import OurGroceries

from pantry import settings
from pantry.commands.parse import ADD, COMPLETE, UNCOMPLETE, REMOVE
from pantry.commands.voice_parser import format_command_summary, format_quantity


class GroceryError(RuntimeError):
    """A command that cannot be applied to the user's lists."""


class ListNotFoundError(GroceryError):
    pass


class NoMatchingItemsError(GroceryError):
    pass


@dataclass
class CommandResult:
    success: bool
    message: str
    summary: str
    list_name: str = None
    affected: int = 0


# Cached client and list directory
_og = None
_lists = None

# Items cache per list id: avoid hammering the Our Groceries API
_items_cache = {}     # list_id -> (timestamp, items)
_ITEMS_CACHE_TTL = 120  # seconds — refetch after 2 minutes

# "Milk (2 lbs)" -> "Milk"
_NOTE_RE = re.compile(r"\s*\([^()]*\)\s*$")


async def _get_client():
    """Get or create the logged-in Our Groceries client."""
    global _og
    if _og is None:
        username, password = settings.load_credentials()
        if not username or not password:
            raise GroceryError(
                "Our Groceries is not configured: create pantry/og_credentials.py "
                "or set OG_USERNAME and OG_PASSWORD.")
        og = OurGroceries(username, password)
        await og.login()
        _og = og
    return _og


async def _get_lists():
    """Fetch and cache the user's shopping lists as [{"id", "name"}, ...]."""
    global _lists
    if _lists is None:
        og = await _get_client()
        result = await og.get_my_lists()
        _lists = [
            {"id": lst["id"], "name": lst["name"]}
            for lst in result.get("shoppingLists", [])
        ]
    return _lists


async def _get_items(list_id):
    """Get items on a list, using cache when possible."""
    now = time.time()
    cached = _items_cache.get(list_id)
    if cached is not None and (now - cached[0]) < _ITEMS_CACHE_TTL:
        return cached[1]

    og = await _get_client()
    result = await og.get_list_items(list_id)
    items = result.get("list", {}).get("items", [])
    _items_cache[list_id] = (now, items)
    return items


def _invalidate_cache(list_id):
    """Invalidate a list's items cache after a mutation."""
    _items_cache.pop(list_id, None)


def reset():
    """Forget the cached client, lists and items."""
    global _og, _lists
    _og = None
    _lists = None
    _items_cache.clear()


# --- List resolution ---

def resolve_list(lists, list_id=None, target_list=None, default_name=None):
    """Pick the list a command applies to. Returns (id, name).

    Raises ListNotFoundError when nothing suitable exists.
    """
    if list_id:
        for lst in lists:
            if lst["id"] == list_id:
                return lst["id"], lst["name"]
        return list_id, None

    if target_list:
        wanted = target_list.lower()
        exact = [lst for lst in lists if lst["name"].lower() == wanted]
        partial = [lst for lst in lists if wanted in lst["name"].lower()]
        found = exact or partial
        if len(found) != 1:
            raise ListNotFoundError(f'Could not find a list matching "{target_list}"')
        return found[0]["id"], found[0]["name"]

    if not lists:
        raise ListNotFoundError("No shopping list found. Create a list first!")
    default_name = (default_name or settings.DEFAULT_LIST_NAME).lower()
    for lst in lists:
        if lst["name"].lower() == default_name:
            return lst["id"], lst["name"]
    return lists[0]["id"], lists[0]["name"]


# --- Item values ---

def quantity_note(item):
    """Display quantity stored with an added item: "2 lbs", "3", or None."""
    if item.quantity and item.unit:
        return f"{format_quantity(item.quantity)} {item.unit}"
    if item.quantity and item.quantity > 1:
        return format_quantity(item.quantity)
    return None


def stored_value(item):
    note = quantity_note(item)
    return f"{item.name} ({note})" if note else item.name


def base_name(value):
    """Stored item value without its quantity note."""
    return _NOTE_RE.sub("", value).strip()


def find_items(items, name):
    """All stored items matching name, case-insensitively.

    Exact name matches win; substring matches are used only when no item
    has exactly that name.
    """
    wanted = name.lower().strip()
    if not wanted:
        return []
    exact = [i for i in items if base_name(i["value"]).lower() == wanted]
    if exact:
        return exact
    return [i for i in items if wanted in base_name(i["value"]).lower()]


def _plural(n):
    return f"{n} {'item' if n == 1 else 'items'}"


# --- Actions ---
# Each mutation loop invalidates the list's cache even when a call fails
# partway, so the next command sees what actually changed.

async def _add_items(list_id, items):
    og = await _get_client()
    try:
        for item in items:
            await og.add_item_to_list(list_id, stored_value(item), auto_category=True)
    finally:
        _invalidate_cache(list_id)
    return len(items), f"Added {_plural(len(items))}"


async def _matching_items(list_id, items):
    """Stored items matching any of the parsed items, each at most once."""
    stored = await _get_items(list_id)
    matches = []
    seen = set()
    for item in items:
        for match in find_items(stored, item.name):
            if match["id"] not in seen:
                seen.add(match["id"])
                matches.append(match)
    if not matches:
        raise NoMatchingItemsError("No matching items found")
    return matches


async def _toggle_items(list_id, items, cross_off):
    og = await _get_client()
    matches = await _matching_items(list_id, items)
    try:
        for match in matches:
            await og.toggle_item_crossed_off(list_id, match["id"], cross_off=cross_off)
    finally:
        _invalidate_cache(list_id)
    label = "Checked off" if cross_off else "Unchecked"
    return len(matches), f"{label} {_plural(len(matches))}"


async def _remove_items(list_id, items):
    og = await _get_client()
    matches = await _matching_items(list_id, items)
    try:
        for match in matches:
            await og.remove_item_from_list(list_id, match["id"])
    finally:
        _invalidate_cache(list_id)
    return len(matches), f"Removed {_plural(len(matches))}"


_PREPOSITIONS = {ADD: "to", COMPLETE: "on", UNCOMPLETE: "on", REMOVE: "from"}


async def _run(command, list_id):
    lists = await _get_lists()
    list_id, list_name = resolve_list(
        lists, list_id, command.target_list, settings.default_list_name())

    if command.action == ADD:
        count, result = await _add_items(list_id, command.items)
    elif command.action == COMPLETE:
        count, result = await _toggle_items(list_id, command.items, True)
    elif command.action == UNCOMPLETE:
        count, result = await _toggle_items(list_id, command.items, False)
    elif command.action == REMOVE:
        count, result = await _remove_items(list_id, command.items)
    else:
        raise GroceryError(f"Unknown action: {command.action}")

    if list_name:
        result = f'{result} {_PREPOSITIONS[command.action]} "{list_name}"'
    return count, result, list_name


def run_command(command, list_id=None):
    """Apply a ParsedCommand. Returns a CommandResult; never raises."""
    summary = format_command_summary(command)
    try:
        count, message, list_name = asyncio.run(_run(command, list_id))
    except GroceryError as e:
        return CommandResult(success=False, message=str(e), summary=summary)
    except Exception as e:
        return CommandResult(
            success=False,
            message=f"Sorry, I had trouble reaching Our Groceries: {e}",
            summary=summary)
    return CommandResult(success=True, message=message, summary=summary,
                         list_name=list_name, affected=count)


def handle(command, list_id=None):
    """Apply a ParsedCommand and return the response text."""
    result = run_command(command, list_id)
    if result.success:
        return f"{result.message}."
    return result.message
