"""The cd, clear, echo, exit, kill and ls builtins."""

from __future__ import annotations

from .shell import ExitStatus, Terminal, read_username

_SIMPLE_ESCAPES = {
    "a": "\a", "b": "\b", "f": "\f", "n": "\n",
    "r": "\r", "t": "\t", "v": "\v", "\\": "\\",
}
_HEX = "0123456789abcdefABCDEF"


def interpret_escapes(text: str) -> tuple[str, bool]:
    """Expand backslash escapes; the flag is True if \\c stopped output."""
    out: list[str] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        i += 1
        if i >= n:
            out.append("\\")
            break
        esc = text[i]
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
            i += 1
        elif esc == "c":
            return "".join(out), True
        elif esc == "0":
            j = i
            while j < n and j - i < 3 and text[j] in "01234567":
                j += 1
            out.append(chr(int(text[i:j], 8)))
            i = j
        elif esc == "x":
            i += 1
            j = i
            while j < n and j - i < 2 and text[j] in _HEX:
                j += 1
            out.append(chr(int(text[i:j], 16)) if j > i else "x")
            i = j
        else:
            out.append(esc)
            i += 1
    return "".join(out), False


def cmd_cd(term: Terminal, argv: list[str]) -> ExitStatus:
    if len(argv) == 1:
        term.cwd = term.fs.root
        return ExitStatus.OK
    if len(argv) > 2:
        term.error("cd: too many arguments")
        return ExitStatus.EINVAL
    path = argv[1]
    if path == "~" or path.startswith("~/"):
        user = read_username(term.fs)
        path = f"/home/{user}{path[1:]}" if user else f"/home{path[1:]}"
    node = term.fs.resolve(path, term.cwd)
    if node is None:
        term.error(f"cd: {path}: no such file or directory")
        return ExitStatus.ENOENT
    if not node.is_dir:
        term.error(f"cd: {path}: not a directory")
        return ExitStatus.ENOTDIR
    term.cwd = node
    return ExitStatus.OK


def cmd_clear(term: Terminal, argv: list[str]) -> ExitStatus:
    if len(argv) > 1:
        term.error("clear: too many arguments")
        return ExitStatus.EINVAL
    term.clear()
    term.history.clear()
    return ExitStatus.OK


def cmd_echo(term: Terminal, argv: list[str]) -> ExitStatus:
    newline = True
    escapes = False
    start = 1
    while start < len(argv):
        opt = argv[start]
        if not opt.startswith("-") or opt == "-":
            break
        if opt == "--":
            start += 1
            break
        flags = opt[1:]
        if any(c not in "neE" for c in flags):
            break
        for c in flags:
            if c == "n":
                newline = False
            else:
                escapes = c == "e"
        start += 1

    args = argv[start:]
    for pos, arg in enumerate(args):
        if escapes:
            text, stopped = interpret_escapes(arg)
            term.write(text)
            if stopped:
                newline = False
                break
        else:
            term.write(arg)
        if pos < len(args) - 1:
            term.write(" ")
    if newline:
        term.newline()
    return ExitStatus.OK


def cmd_exit(term: Terminal, argv: list[str]) -> ExitStatus:
    if len(argv) > 2:
        term.error("exit: too many arguments")
        return ExitStatus.EINVAL
    if len(argv) == 2:
        try:
            int(argv[1])
        except ValueError:
            term.error("exit: numeric argument required")
            return ExitStatus.EINVAL
    term.active = False
    return ExitStatus.OK


def cmd_kill(term: Terminal, argv: list[str]) -> ExitStatus:
    if len(argv) < 2:
        term.error("kill: missing process ID")
        return ExitStatus.EINVAL
    if len(argv) > 2:
        term.error("kill: too many arguments")
        return ExitStatus.EINVAL
    try:
        pid = int(argv[1])
    except ValueError:
        term.error(f"kill: {argv[1]}: invalid process ID")
        return ExitStatus.EINVAL
    if not term.processes.terminate(pid):
        term.error(f"kill: {pid}: no such process")
        return ExitStatus.ENOENT
    return ExitStatus.OK


def cmd_ls(term: Terminal, argv: list[str]) -> ExitStatus:
    if len(argv) > 2:
        term.error("ls: too many arguments")
        return ExitStatus.EINVAL
    if len(argv) == 2:
        path = argv[1]
        node = term.fs.resolve(path, term.cwd)
        if node is None:
            term.error(f"ls: {path}: no such file or directory")
            return ExitStatus.ENOENT
        if not node.is_dir:
            term.error(f"ls: {path}: not a directory")
            return ExitStatus.ENOTDIR
    else:
        node = term.cwd or term.fs.root
    names = list(node.children)
    if term.capturing:
        for name in names:
            term.write(name)
            term.newline()
    else:
        term.write(" ".join(names))
        term.newline()
    return ExitStatus.OK