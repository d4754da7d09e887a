from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

DEFAULT_TTY_PATH = "/dev/tty"
AFFIRMATIVE_ANSWERS = ("y", "Y")


def confirm_from_tty(
    question: str,
    tty_path: str | Path = DEFAULT_TTY_PATH,
    *,
    stream: TextIO | None = None,
) -> bool:
    """Print ``question`` and read one answer line from the controlling terminal.

    stdin may be the pipe that delivered the script, so it is never read.
    No controlling terminal counts as a decline.
    """
    out = stream or sys.stderr
    print(question, end="", flush=True, file=out)
    try:
        with open(tty_path, encoding="utf-8") as tty:
            answer = tty.readline()
    except OSError:
        print("", file=out)
        return False
    return answer.strip() in AFFIRMATIVE_ANSWERS
