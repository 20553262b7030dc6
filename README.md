# tilixi

`tilixi` is a small shell environment in plain Python, with no dependencies
outside the standard library. It provides:

- `tilixi.shell`: an in-memory filesystem (`FileSystem`, `Node`, `NodeType`),
  a `BuiltinRegistry` of named commands, `parse_command` for splitting command
  lines, and a `Terminal` that runs commands, joins them with `|` pipes, keeps
  its output and its history. Commands return an `ExitStatus`.
- `tilixi.basic_commands`: the `cd`, `clear`, `echo`, `exit`, `kill` and `ls`
  builtins, and `interpret_escapes` for `echo -e`.
- `tilixi.file_commands`: the `cat` (with `>` redirection), `grep` (`-i`, `-v`,
  `-n`) and `mkdir` (`-p`) builtins, and the helpers
  `resolve_parent_and_name` and `grep_lines`.
- `tilixi.move_command`: the `mv` builtin.
- `tilixi.process`: a fixed-size `ProcessTable` of `ProcessControlBlock`s.
- `tilixi.scheduler`: a cooperative, priority-based `Scheduler`.
- `tilixi.scripts`: a `ScriptSystem` that starts named script handlers and
  pipelines as processes.

## A terminal session

The registry starts empty; register the builtins you want under the names you
want:

```python
from tilixi import basic_commands, file_commands, move_command
from tilixi.shell import BuiltinRegistry, FileSystem, Terminal

registry = BuiltinRegistry()
for name, handler in [
    ("cd", basic_commands.cmd_cd),
    ("ls", basic_commands.cmd_ls),
    ("echo", basic_commands.cmd_echo),
    ("clear", basic_commands.cmd_clear),
    ("exit", basic_commands.cmd_exit),
    ("kill", basic_commands.cmd_kill),
    ("cat", file_commands.cmd_cat),
    ("grep", file_commands.cmd_grep),
    ("mkdir", file_commands.cmd_mkdir),
    ("mv", move_command.cmd_mv),
]:
    registry.register(name, handler, "")

fs = FileSystem()
fs.add_file("/notes.txt", "alpha\nbeta\ngamma\n")

term = Terminal(fs, registry)
term.run_line("mkdir -p /docs/old")
term.run_line("mv /notes.txt /docs")
term.run_line("grep -n a /docs/notes.txt")
term.run_line("echo hello | grep hell")
print(term.output())
```

`run_line` records non-blank lines in `term.history` (the last 32 are kept) and
runs them. Unknown commands print `damocles: unknown command: NAME`. Errors
from a builtin are written to the terminal as messages, and the builtin returns
a non-`OK` `ExitStatus` (`ERR`, `EINVAL`, `ENOENT` or `ENOTDIR`).

In a pipe, each stage's output becomes `term.pipe_input` for the next stage.
`cat` and `grep` read it when no file is given. While output is being captured
for a pipe, `ls` prints one name per line instead of one line of names.

Some builtins act on the terminal rather than on files. `exit` sets
`term.active` to `False`. `clear` empties the output and the history. `kill PID`
terminates a process in `term.processes`, the terminal's own `ProcessTable`.

## Processes and scheduling

```python
from tilixi.process import ProcessPriority, ProcessTable
from tilixi.scheduler import Scheduler, describe_processes

table = ProcessTable(16)
pid = table.create("worker", lambda args: print("ran", args), "job",
                   ProcessPriority.NORMAL, None)

scheduler = Scheduler(table, clock=lambda: 0)
scheduler.run()
print(describe_processes(table))
```

Process ids start at 1 and are not reused until `reset()`. When the table is
full, `create` raises `ProcessLimitError`. `terminate` calls the process's
cleanup function with its arguments. The scheduler picks the ready process with
the highest priority and calls its entry point. That process keeps the CPU for
a 10 ms time slice, measured by the clock you pass in (milliseconds, and
`time.monotonic` when none is given), or until `yield_current()` is called.
`spawn_example_process` adds a demonstration process that yields straight away.

`ScriptSystem(table)` registers up to 16 handlers with `register_handler`.
`execute_script(name, args)` starts a process whose entry point passes the
first `ScriptCommand` to the handler, and raises `LookupError` for an unknown
name. `execute_pipeline(commands)` starts one process per command. These
processes share a `ScriptContext`, which counts references and is released when
the last of them is terminated.

## What it does not do

- There is no script interpreter and no `run` builtin. Shell scripts with
  variables, `if`, `while` or `for` cannot be executed.
- There is no system-information builtin.
- There is no ready-made registry of builtins. You register them yourself, as
  shown above.
- There is no interactive prompt and no command-line program. The filesystem
  lives only in memory and nothing is saved to disk.