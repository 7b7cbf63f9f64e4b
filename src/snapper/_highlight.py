from __future__ import annotations

import functools

import pygments
import pygments.formatters
import pygments.lexer
import pygments.lexers


@functools.lru_cache()
def _get_lexer() -> pygments.lexer.Lexer:
    # Snapshots use the same brace delimited composite literals as go.
    return pygments.lexers.GoLexer(stripnl=False)


def highlight(code: str, style: str = "dark") -> str:
    """Colour a snapshot for a terminal.

    args:
      code(str): The snapshot
      style(str): ``"dark"`` or ``"light"``, the background of the terminal
    """
    formatter = pygments.formatters.TerminalFormatter(bg=style)
    res: str = pygments.highlight(code, _get_lexer(), formatter)
    # pygments always ends its output with a newline
    if not code.endswith("\n") and res.endswith("\n"):
        res = res[:-1]
    return res
