"""Entry point for `python -m pantry`.

Usage:
    python -m pantry                       # read transcripts from stdin
    python -m pantry -parse add 3 apples   # print the parse, test_cases.txt style
    python -m pantry -summary add milk     # print the one-line summary
"""

import sys


def _fmt_value(val):
    if val is None:
        return "none"
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val)


def _parse_cmd(text):
    """Parse a single input and print the result in test_cases.txt format."""
    from pantry.commands.voice_parser import clean_transcript, parse_voice_command

    command = parse_voice_command(clean_transcript(text))

    print(f"> {text}")
    print(f"action: {command.action}")
    print(f"items: {' | '.join(item.name for item in command.items)}")
    print(f"target_list: {_fmt_value(command.target_list)}")

    for n, item in enumerate(command.items, 1):
        if item.quantity is not None:
            print(f"item{n}.quantity: {_fmt_value(item.quantity)}")
        if item.unit is not None:
            print(f"item{n}.unit: {item.unit}")


def _summary_cmd(text):
    from pantry.commands.voice_parser import (
        clean_transcript, format_command_summary, parse_voice_command,
    )
    print(format_command_summary(parse_voice_command(clean_transcript(text))))


if __name__ == "__main__" or not sys.argv[0]:
    if len(sys.argv) >= 3 and sys.argv[1] == "-parse":
        _parse_cmd(" ".join(sys.argv[2:]))
    elif len(sys.argv) >= 3 and sys.argv[1] == "-summary":
        _summary_cmd(" ".join(sys.argv[2:]))
    else:
        from pantry.main import main
        main()
