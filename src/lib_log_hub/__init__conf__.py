"""Static package metadata surfaced by the CLI banner."""

from __future__ import annotations

from typing import Callable

name = "lib_log_hub"
title = "Structured leveled logging core with ring buffer, broadcast stream and Rich console output"
version = "0.1.0"
homepage = "https://github.com/bitranox/lib_log_hub"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_hub"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Emit the metadata banner, one ``key = value`` line per field.

    Examples
    --------
    >>> print_info()  # doctest: +ELLIPSIS
    Info for lib_log_hub:
    <BLANKLINE>
        name          = lib_log_hub
    ...
    """

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    text = "\n".join(lines) + "\n"
    if writer is None:
        print(text, end="")
    else:
        writer(text)


__all__ = ["author", "author_email", "homepage", "name", "print_info", "shell_command", "title", "version"]
