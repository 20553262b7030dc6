"""The cat, grep and mkdir builtins."""

from __future__ import annotations

from typing import Optional

from .shell import ExitStatus, Node, NodeType, Terminal


class _CommandFailure(Exception):
    """Carries the status and message of a failed builtin."""

    def __init__(self, status: ExitStatus, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


def resolve_parent_and_name(term: Terminal, path: str) -> tuple[Node, str]:
    """Split a path into its existing parent directory and final name.

    Raises ValueError for a path naming no entry, FileNotFoundError when the
    parent does not exist and NotADirectoryError when it is not a directory.
    """
    trimmed = path
    while len(trimmed) > 1 and trimmed.endswith("/"):
        trimmed = trimmed[:-1]
    if trimmed == "/":
        raise ValueError(f"{path}: names the root directory")
    head, sep, name = trimmed.rpartition("/")
    parent: Optional[Node]
    if not sep:
        parent = term.cwd or term.fs.root
    elif not head:
        parent = term.fs.root
    else:
        parent = term.fs.resolve(head, term.cwd)
    if not name:
        raise ValueError(f"{path}: empty name")
    if parent is None:
        raise FileNotFoundError(path)
    if not parent.is_dir:
        raise NotADirectoryError(path)
    return parent, name


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def grep_lines(
    text: str, pattern: str, ignore_case: bool = False, invert: bool = False
) -> list[tuple[int, str]]:
    """Numbered lines of text (from 1) that contain pattern, or lack it if inverted."""
    needle = pattern.lower() if ignore_case else pattern
    matches = []
    for number, line in enumerate(_split_lines(text), start=1):
        haystack = line.lower() if ignore_case else line
        if (needle in haystack) != invert:
            matches.append((number, line))
    return matches


def _open_output(term: Terminal, out_path: str) -> Node:
    node = term.fs.resolve(out_path, term.cwd)
    if node is not None:
        if node.is_dir:
            raise _CommandFailure(ExitStatus.EINVAL, f"cat: {out_path}: not a file")
    else:
        try:
            parent, name = resolve_parent_and_name(term, out_path)
        except FileNotFoundError:
            raise _CommandFailure(
                ExitStatus.ENOENT, f"cat: {out_path}: no such file or directory"
            ) from None
        except NotADirectoryError:
            raise _CommandFailure(
                ExitStatus.ENOTDIR, f"cat: {out_path}: invalid path"
            ) from None
        except ValueError:
            raise _CommandFailure(
                ExitStatus.EINVAL, f"cat: {out_path}: invalid path"
            ) from None
        try:
            node = term.fs.create(parent, name, NodeType.FILE)
        except (OSError, ValueError):
            raise _CommandFailure(
                ExitStatus.ERR, f"cat: {out_path}: failed to create file"
            ) from None
    term.fs.write_file(node, "")
    return node


def _cat(term: Terminal, argv: list[str]) -> None:
    pipe = term.pipe_input or ""
    if len(argv) < 2:
        if pipe:
            term.write(pipe)
            return
        raise _CommandFailure(ExitStatus.EINVAL, "cat: missing file operand")

    redirect = argv.index(">", 1) if ">" in argv[1:] else None
    inputs = argv[1:redirect] if redirect is not None else argv[1:]
    use_pipe = False
    if not inputs:
        if not pipe:
            raise _CommandFailure(ExitStatus.EINVAL, "cat: missing file operand")
        use_pipe = True

    out_node: Optional[Node] = None
    if redirect is not None:
        if redirect + 1 >= len(argv):
            raise _CommandFailure(
                ExitStatus.EINVAL, "cat: missing output file operand"
            )
        if redirect + 2 != len(argv):
            raise _CommandFailure(ExitStatus.EINVAL, "cat: too many arguments")
        out_node = _open_output(term, argv[redirect + 1])

    written = ""

    def emit(data: str) -> None:
        nonlocal written
        if out_node is None:
            term.write(data)
        else:
            written += data
            term.fs.write_file(out_node, written)

    if use_pipe:
        emit(pipe)
        return

    for path in inputs:
        node = term.fs.resolve(path, term.cwd)
        if node is None:
            raise _CommandFailure(
                ExitStatus.ENOENT, f"cat: {path}: no such file or directory"
            )
        if node.is_dir:
            raise _CommandFailure(ExitStatus.EINVAL, f"cat: {path}: not a file")
        emit(term.fs.read_file(node))


def cmd_cat(term: Terminal, argv: list[str]) -> ExitStatus:
    """Print files or piped input, optionally redirected with '>' to a file."""
    try:
        _cat(term, argv)
    except _CommandFailure as failure:
        term.error(failure.message)
        return failure.status
    return ExitStatus.OK


def _parse_grep_flags(argv: list[str]) -> tuple[bool, bool, bool, int]:
    ignore_case = invert = show_line = False
    for index in range(1, len(argv)):
        arg = argv[index]
        if not arg.startswith("-") or arg == "-":
            return ignore_case, invert, show_line, index
        if arg == "--":
            return ignore_case, invert, show_line, index + 1
        for flag in arg[1:]:
            if flag == "i":
                ignore_case = True
            elif flag == "v":
                invert = True
            elif flag == "n":
                show_line = True
            else:
                raise _CommandFailure(ExitStatus.EINVAL, "grep: invalid option")
    return ignore_case, invert, show_line, len(argv)


def _grep(term: Terminal, argv: list[str]) -> None:
    if len(argv) < 2:
        raise _CommandFailure(ExitStatus.EINVAL, "grep: missing pattern")
    ignore_case, invert, show_line, first = _parse_grep_flags(argv)
    if first >= len(argv):
        raise _CommandFailure(ExitStatus.EINVAL, "grep: missing pattern")
    pattern = argv[first]
    paths = argv[first + 1:]

    def report(text: str, filename: Optional[str]) -> None:
        for number, line in grep_lines(text, pattern, ignore_case, invert):
            if filename is not None:
                term.write(f"{filename}:")
            if show_line:
                term.write(f"{number}:")
            term.write(line)
            term.newline()

    if not paths:
        if term.pipe_input:
            report(term.pipe_input, None)
            return
        raise _CommandFailure(ExitStatus.EINVAL, "grep: missing file operand")

    show_filename = len(paths) > 1
    for path in paths:
        node = term.fs.resolve(path, term.cwd)
        if node is None:
            raise _CommandFailure(
                ExitStatus.ENOENT, f"grep: {path}: no such file or directory"
            )
        if node.is_dir:
            raise _CommandFailure(ExitStatus.EINVAL, f"grep: {path}: not a file")
        report(term.fs.read_file(node), path if show_filename else None)


def cmd_grep(term: Terminal, argv: list[str]) -> ExitStatus:
    """Print lines containing a fixed pattern; flags -i, -v and -n."""
    try:
        _grep(term, argv)
    except _CommandFailure as failure:
        term.error(failure.message)
        return failure.status
    return ExitStatus.OK


def _has_extension(name: str) -> bool:
    return name.rfind(".") > 0


def _mkdir_single(term: Terminal, path: str, parents: bool) -> None:
    if not path:
        raise _CommandFailure(ExitStatus.EINVAL, "mkdir: missing operand")
    fs = term.fs
    current = fs.root if path.startswith("/") else (term.cwd or fs.root)
    parts = path.split("/")
    if not any(parts):
        raise _CommandFailure(ExitStatus.EINVAL, f"mkdir: {path}: file exists")

    for index, part in enumerate(parts):
        if part in ("", "."):
            continue
        is_last = not any(parts[index + 1:])
        if part == "..":
            parent = fs.resolve("..", current)
            if parent is None:
                raise _CommandFailure(
                    ExitStatus.ENOENT, f"mkdir: {path}: no such file or directory"
                )
            current = parent
            continue
        existing = fs.resolve(part, current)
        if existing is not None:
            if not existing.is_dir:
                raise _CommandFailure(
                    ExitStatus.ENOTDIR, f"mkdir: {part}: not a directory"
                )
            if is_last and not parents:
                raise _CommandFailure(
                    ExitStatus.EINVAL, f"mkdir: {path}: file exists"
                )
            current = existing
            continue
        if not parents and not is_last:
            raise _CommandFailure(
                ExitStatus.ENOENT, f"mkdir: {path}: no such file or directory"
            )
        if _has_extension(part):
            raise _CommandFailure(
                ExitStatus.EINVAL, f"mkdir: {part}: invalid directory name"
            )
        try:
            current = fs.create(current, part, NodeType.DIR)
        except (OSError, ValueError):
            raise _CommandFailure(
                ExitStatus.ERR, f"mkdir: {path}: failed to create directory"
            ) from None


def cmd_mkdir(term: Terminal, argv: list[str]) -> ExitStatus:
    """Create directories; -p creates missing parents and accepts existing ones."""
    try:
        if len(argv) < 2:
            raise _CommandFailure(ExitStatus.EINVAL, "mkdir: missing operand")
        parents = False
        found = False
        for arg in argv[1:]:
            if arg == "-p":
                parents = True
                continue
            if arg.startswith("-"):
                raise _CommandFailure(
                    ExitStatus.EINVAL, f"mkdir: invalid option -- {arg}"
                )
            found = True
            _mkdir_single(term, arg, parents)
        if not found:
            raise _CommandFailure(ExitStatus.EINVAL, "mkdir: missing operand")
    except _CommandFailure as failure:
        term.error(failure.message)
        return failure.status
    return ExitStatus.OK