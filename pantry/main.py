"""Pantry main loop.

Reads one transcript per line, applies it to Our Groceries, and prints the
response. Any speech-to-text front end can pipe its output in here.

Usage:
    python -m pantry.main
    echo "add milk and eggs to costco list" | python -m pantry
"""

import sys
import time

from pantry.commands import router
from pantry.commands.voice_parser import format_command_summary


def log(msg):
    print(msg, flush=True)


def main(stream=None):
    stream = stream or sys.stdin
    interactive = stream.isatty()

    log("Listening for grocery commands... (Ctrl-D to quit)\n")

    try:
        while True:
            if interactive:
                print("> ", end="", flush=True)
            line = stream.readline()
            if not line:
                break
            text = line.strip()
            if not text:
                continue

            t0 = time.time()
            response, command = router.dispatch(text, source="[stdin]")
            elapsed = time.time() - t0
            if command is not None:
                log(f"  [{elapsed:.1f}s] {format_command_summary(command)}")
            log(f"  Response: \"{response}\"")

    except KeyboardInterrupt:
        log("\nShutting down.")


if __name__ == "__main__":
    main()
