"""The mv builtin."""

from __future__ import annotations

from .file_commands import resolve_parent_and_name
from .shell import ExitStatus, Node, Terminal


class _MoveFailure(Exception):
    """Carries the status and message of a failed move."""

    def __init__(self, status: ExitStatus, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


def _trim_trailing_slashes(path: str) -> str:
    while len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return path


def _has_extension(name: str) -> bool:
    return name.rfind(".") > 0


def _basename(path: str) -> str:
    name = _trim_trailing_slashes(path).rpartition("/")[2]
    if not name:
        raise ValueError(f"{path}: empty name")
    return name


def _parent_and_name(term: Terminal, path: str) -> tuple[Node, str]:
    parent, name = resolve_parent_and_name(term, path)
    if name in (".", ".."):
        raise ValueError(f"{path}: names a relative directory")
    return parent, name


def _destination(term: Terminal, src_path: str, dst_path: str,
                 dst_is_dir: bool) -> tuple[Node, str]:
    if dst_is_dir:
        dst_dir = term.fs.resolve(dst_path, term.cwd)
        if dst_dir is None:
            raise _MoveFailure(
                ExitStatus.ENOENT, f"mv: {dst_path}: no such file or directory"
            )
        if not dst_dir.is_dir:
            raise _MoveFailure(
                ExitStatus.ENOTDIR, f"mv: {dst_path}: not a directory"
            )
        try:
            return dst_dir, _basename(src_path)
        except ValueError:
            raise _MoveFailure(
                ExitStatus.EINVAL, f"mv: {src_path}: invalid path"
            ) from None
    try:
        return _parent_and_name(term, dst_path)
    except FileNotFoundError:
        raise _MoveFailure(
            ExitStatus.ENOENT, f"mv: {dst_path}: no such file or directory"
        ) from None
    except (NotADirectoryError, ValueError):
        raise _MoveFailure(
            ExitStatus.EINVAL, f"mv: {dst_path}: invalid path"
        ) from None


def _move_one(term: Terminal, src_path: str, dst_path: str,
              dst_is_dir: bool) -> None:
    fs = term.fs
    src_node = fs.resolve(src_path, term.cwd)
    if src_node is None:
        raise _MoveFailure(
            ExitStatus.ENOENT, f"mv: {src_path}: no such file or directory"
        )
    try:
        src_parent, src_name = _parent_and_name(term, src_path)
    except (OSError, ValueError):
        raise _MoveFailure(
            ExitStatus.EINVAL, f"mv: {src_path}: invalid path"
        ) from None

    dst_dir, dst_name = _destination(term, src_path, dst_path, dst_is_dir)
    dst_node = fs.resolve(dst_name, dst_dir)

    if src_node.is_dir and _has_extension(dst_name):
        raise _MoveFailure(
            ExitStatus.EINVAL, f"mv: {dst_name}: invalid directory name"
        )

    if dst_node is not None:
        if dst_node is src_node:
            return
        if dst_node.is_dir:
            raise _MoveFailure(
                ExitStatus.ENOTDIR, f"mv: {dst_name}: is a directory"
            )
        if src_node.is_dir:
            raise _MoveFailure(
                ExitStatus.ENOTDIR, f"mv: {dst_path}: not a directory"
            )
        try:
            fs.remove(dst_dir, dst_name)
        except OSError:
            raise _MoveFailure(
                ExitStatus.ERR, f"mv: {dst_path}: failed to remove"
            ) from None

    try:
        fs.rename(src_parent, src_name, dst_dir, dst_name)
    except (OSError, ValueError):
        raise _MoveFailure(
            ExitStatus.ERR, f"mv: {src_path}: failed to move"
        ) from None


def _mv(term: Terminal, argv: list[str]) -> None:
    if len(argv) < 3:
        raise _MoveFailure(ExitStatus.EINVAL, "mv: missing file operand")
    sources = argv[1:-1]
    target = argv[-1]
    trailing_slash = len(target) > 1 and target.endswith("/")

    target_node = term.fs.resolve(target, term.cwd)
    target_is_dir = target_node is not None and target_node.is_dir
    if target_node is None and trailing_slash:
        raise _MoveFailure(ExitStatus.ENOTDIR, f"mv: {target}: not a directory")

    if len(sources) > 1:
        if not target_is_dir:
            raise _MoveFailure(
                ExitStatus.ENOTDIR, f"mv: {target}: not a directory"
            )
        for src in sources:
            _move_one(term, src, target, True)
        return
    _move_one(term, sources[0], target, target_is_dir)


def cmd_mv(term: Terminal, argv: list[str]) -> ExitStatus:
    """Rename a file or directory, or move sources into a directory."""
    try:
        _mv(term, argv)
    except _MoveFailure as failure:
        term.error(failure.message)
        return failure.status
    return ExitStatus.OK