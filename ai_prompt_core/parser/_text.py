"""Whitespace normalisation for raw text between tags."""


def normalize_text(text: str, *, is_first: bool, is_last: bool) -> str | None:
    """Normalise one raw text run based on its position among its siblings.

    - Text without newlines is kept verbatim (inline text such as " to ").
    - Whitespace-only text containing a newline is indentation between tags and is dropped.
    - First child: leading whitespace-only lines are stripped.
    - Last child: trailing whitespace-only lines are stripped.
    - Common indentation is removed while relative indentation is kept.

    Returns:
        The normalised text, or None when the run should be dropped.
    """
    if text == "":
        return None
    if "\n" not in text:
        return text
    if text.strip() == "":
        return None

    lines = text.split("\n")
    if is_first:
        while lines and lines[0].strip() == "":
            lines.pop(0)
    if is_last:
        while lines and lines[-1].strip() == "":
            lines.pop()
    if not lines:
        return None

    # A run that does not start with a newline continues a previous sibling on
    # the same line; its first line carries content, not indentation.
    is_continuation = text[0] != "\n" and not is_first
    measured = lines[1:] if is_continuation else lines
    indents = [len(line) - len(line.lstrip()) for line in measured if line.strip()]
    min_indent = min(indents) if indents else 0

    dedented: list[str] = []
    for index, line in enumerate(lines):
        if is_continuation and index == 0:
            dedented.append(line)
        elif line.strip() == "":
            dedented.append("")
        else:
            dedented.append(line[min_indent:])

    result = "\n".join(dedented)
    return result or None


__all__ = ["normalize_text"]
