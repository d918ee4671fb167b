"""Template-based pattern matching for transcript grammars.

Converts patterns like "#quantity $unit[can|cans] [of |]$name" into compiled
regex, matches against input text, and returns extracted fields.

Syntax:
    [alt1|alt2|alt3]  — matches any of the alternatives (an empty alternative
                        makes the group optional: "[the |]")
    $name             — captures free text into a named field (non-greedy)
    $name[alt1|alt2]  — captures whichever alternative matched
    #name             — captures a run of ASCII digits
    literal text      — matches literally (case-insensitive, flexible whitespace)

Free-text fields may span line breaks.

Every pattern is anchored at both ends of the text. Captured values are
returned exactly as they appear in the input, trimmed of surrounding spaces.

Examples:
    >>> p = TemplatePattern("$rest to [the |]$list list")
    >>> p.match("add milk to the costco list")
    {'rest': 'add milk', 'list': 'costco'}
    >>> TemplatePattern("#quantity $name").match("3 apples")
    {'quantity': '3', 'name': 'apples'}
"""

import re


class TemplatePattern:
    """A compiled template pattern that can match text and extract named fields."""

    def __init__(self, template):
        self.template = template
        self._regex, self._group_map = _compile(template)

    def match(self, text):
        """Match text against this pattern. Returns dict of fields or None."""
        m = self._regex.match(text)
        if m is None:
            return None
        result = {}
        for group_num, field_name in self._group_map.items():
            value = m.group(group_num)
            if value is not None:
                result[field_name] = value.strip()
        return result

    def __repr__(self):
        return f"TemplatePattern({self.template!r})"


def match_any(templates, text):
    """Try matching text against a list of (TemplatePattern, tag) pairs.

    Returns (tag, fields_dict) for the first match, or None.
    """
    for tmpl, tag in templates:
        result = tmpl.match(text)
        if result is not None:
            return tag, result
    return None


def alternatives(words):
    """Render an ordered word table as a "[a|b|c]" alternatives group."""
    return "[" + "|".join(words) + "]"


# --- Compilation internals ---

_FIELD_RE = re.compile(r'[$#]([a-zA-Z_]\w*)')


class _Compiler:
    """Stateful compiler that tracks capturing group numbers."""

    def __init__(self):
        self.group_count = 0
        self.group_map = {}  # group_number -> field_name

    def compile_template(self, template):
        """Compile a full template string. Returns (regex_str, group_map)."""
        regex_str = self._compile_fragment(template)
        pattern = r'\A' + regex_str + r'\Z'
        return pattern, self.group_map

    def _new_group(self, name):
        self.group_count += 1
        self.group_map[self.group_count] = name

    def _compile_alternatives(self, inner):
        alts = _split_alternatives(inner)
        return '|'.join(self._compile_fragment(alt) for alt in alts)

    def _compile_fragment(self, fragment):
        """Compile a fragment to a regex string."""
        parts = []
        i = 0
        s = fragment
        while i < len(s):
            if s[i] == '[':
                j = _closing_bracket(s, i)
                parts.append('(?:' + self._compile_alternatives(s[i+1:j-1]) + ')')
                i = j
            elif s[i] in '$#':
                m = _FIELD_RE.match(s, i)
                if m is None:
                    parts.append(re.escape(s[i]))
                    i += 1
                    continue
                # Group numbers follow opening-paren order, so claim ours first
                self._new_group(m.group(1))
                i = m.end()
                if s[m.start()] == '#':
                    parts.append('([0-9]+)')
                elif i < len(s) and s[i] == '[':
                    j = _closing_bracket(s, i)
                    parts.append('(' + self._compile_alternatives(s[i+1:j-1]) + ')')
                    i = j
                else:
                    parts.append('(.+?)')
            elif s[i] in ' \t':
                while i < len(s) and s[i] in ' \t':
                    i += 1
                parts.append(r'\s+')
            else:
                parts.append(re.escape(s[i]))
                i += 1
        return ''.join(parts)


def _closing_bracket(s, start):
    """Index just past the ']' matching the '[' at s[start]."""
    depth = 1
    j = start + 1
    while j < len(s) and depth > 0:
        if s[j] == '[':
            depth += 1
        elif s[j] == ']':
            depth -= 1
        j += 1
    if depth:
        raise ValueError(f"Unbalanced '[' in template: {s!r}")
    return j


def _split_alternatives(text):
    """Split on top-level | characters, respecting nested brackets."""
    alts = []
    depth = 0
    current = []
    for ch in text:
        if ch == '[':
            depth += 1
            current.append(ch)
        elif ch == ']':
            depth -= 1
            current.append(ch)
        elif ch == '|' and depth == 0:
            alts.append(''.join(current))
            current = []
        else:
            current.append(ch)
    alts.append(''.join(current))
    return alts


def _compile(template):
    """Compile a template string to a (compiled_regex, group_map) tuple."""
    compiler = _Compiler()
    pattern_str, group_map = compiler.compile_template(template)
    return re.compile(pattern_str, re.IGNORECASE | re.DOTALL), group_map
