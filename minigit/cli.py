"""
minigit CLI

A thin dispatch layer over Repository. Human-readable output by
default; every command prints JSON instead when --json is passed.

Usage:
    minigit init [--initial-branch NAME]
    minigit add FILES...
    minigit commit MESSAGE --author AUTHOR
    minigit log [--limit N]
    minigit branch [-c NAME] [-l] [-s NAME]
    minigit status
    minigit show COMMIT_ID

Exit codes: 0 on success, 1 when the core reports an error, 2 for
usage errors.
"""

import argparse
import difflib
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import minigit as _minigit_pkg

from .errors import MiniGitError, NotARepository
from .repo import Repository


def open_repo(args) -> Repository:
    """Locate the repository for this invocation, walking up from -C."""
    return Repository.find(Path(args.path or "."))


def format_time(ts) -> str:
    return ts.astimezone().strftime("%Y-%m-%d %H:%M:%S %z")


def print_json(data):
    print(json.dumps(data, indent=2, default=str))


def get_verbosity(args) -> int:
    """Return verbosity level: 0=quiet, 1=normal, 2=verbose."""
    if getattr(args, "json", False):
        return 1
    if getattr(args, "verbose", False):
        return 2
    if getattr(args, "quiet", False):
        return 0
    return 1


def _display_hash(h: str | None, verbosity: int) -> str:
    """Return full or short hash based on verbosity."""
    if not h:
        return "none"
    if verbosity >= 2:
        return h
    return h[:12]


def _resolve_input(args, name: str) -> Path:
    """Paths on the command line are relative to -C."""
    p = Path(name)
    if p.is_absolute():
        return p
    return Path(args.path or ".") / p


def cmd_init(args):
    v = get_verbosity(args)
    path = Path(args.path or ".").resolve()
    repo = Repository.init(path, initial_branch=args.initial_branch)
    branch = repo.current_branch()

    if args.json:
        print_json({"root": str(repo.root), "repo_dir": str(repo.repo_dir), "branch": branch})
    elif v == 0:
        print(repo.repo_dir)
    else:
        print(f"Initialized empty repository in {repo.repo_dir}")
        if v >= 2:
            print(f"  Branch: {branch}")


def cmd_add(args):
    v = get_verbosity(args)
    repo = open_repo(args)
    paths = [_resolve_input(args, f) for f in args.files]
    staged = repo.stage(*paths)

    if args.json:
        print_json({"staged": staged})
    elif v == 0:
        for name in staged:
            print(name)
    elif not staged:
        print("Nothing staged (all paths ignored).")
    else:
        for name in staged:
            print(f"✓ Staged {name}")


def cmd_commit(args):
    v = get_verbosity(args)
    repo = open_repo(args)
    branch = repo.current_branch()
    commit = repo.commit(args.message, args.author)

    if args.json:
        print_json({**commit.to_dict(), "branch": branch})
    elif v == 0:
        print(commit.id)
    else:
        print(f"✓ Committed {_display_hash(commit.id, v)} on '{branch}'")
        print(f"  Files: {len(commit.files)}")
        if v >= 2:
            print(f"  Parent: {_display_hash(commit.parent, v)}")


def cmd_log(args):
    v = get_verbosity(args)
    repo = open_repo(args)
    entries = repo.log(limit=args.limit)

    if args.json:
        print_json([c.to_dict() for c in entries])
        return
    if v == 0:
        for c in entries:
            print(c.id)
        return

    shown = 0
    for c in entries:
        print(f"commit {c.id}")
        print(f"Author: {c.author}")
        print(f"Date:   {format_time(c.timestamp)}")
        if v >= 2:
            print(f"Parent: {_display_hash(c.parent, v)}")
            print(f"Files:  {', '.join(c.files) or '(none)'}")
        print()
        for line in c.message.splitlines() or [""]:
            print(f"    {line}")
        print()
        shown += 1
    if not shown:
        print(f"No commits yet on branch '{repo.current_branch()}'.")


def cmd_branch(args):
    if not (args.create or args.list or args.switch):
        print("No action specified. Use --help for branch options.")
        return

    repo = open_repo(args)
    result = {}
    if args.create:
        repo.create_branch(args.create)
        result["created"] = args.create
        if not args.json:
            print(f"✓ Created branch '{args.create}'")
    if args.switch:
        repo.switch_branch(args.switch)
        result["switched"] = args.switch
        if not args.json:
            print(f"✓ Switched to branch '{args.switch}'")
    if args.list:
        current = repo.current_branch()
        branches = repo.list_branches()
        result["branches"] = branches
        result["current"] = current
        if not args.json:
            for name in branches:
                marker = "*" if name == current else " "
                print(f"  {marker} {name}")

    if args.json:
        print_json(result)


def cmd_status(args):
    v = get_verbosity(args)
    repo = open_repo(args)
    status = repo.status()

    if args.json:
        print_json(status)
    elif v == 0:
        print(status["branch"])
    else:
        print(f"On branch {status['branch']}")
        print(f"Head: {_display_hash(status['head'], v)}")
        if v >= 2:
            print(f"Default branch: {status['default_branch']}")
            if status["created_at"] is not None:
                created = datetime.fromtimestamp(status["created_at"], timezone.utc)
                print(f"Created: {format_time(created)}")
        if status["staged"]:
            print("\nStaged files:")
            for name in status["staged"]:
                print(f"  {name}")
        else:
            print("\nNothing staged.")


def cmd_show(args):
    repo = open_repo(args)
    commit = repo.get_commit(args.commit_id)

    if args.json:
        print_json(commit.to_dict())
        return
    print(f"commit {commit.id}")
    print(f"Author: {commit.author}")
    print(f"Date:   {format_time(commit.timestamp)}")
    print(f"Parent: {commit.parent or 'none'}")
    print()
    for line in commit.message.splitlines() or [""]:
        print(f"    {line}")
    print()
    print("Files:")
    for name in commit.files:
        print(f"  {name}")
    if not commit.files:
        print("  (none)")


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minigit",
        description="minigit: a minimal local version-control system",
    )
    ver = _minigit_pkg.__version__
    parser.add_argument("--version", "-V", action="version", version=f"minigit {ver}")
    parser.add_argument("--path", "-C", default=".", help="Repository path")
    parser.add_argument("--json", "-j", action="store_true", help="JSON output")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Quiet output")

    sub = parser.add_subparsers(dest="command")

    # init
    p = sub.add_parser("init", help="Initialize a repository in the current directory")
    p.add_argument("--initial-branch", "-b", default=None, help="Name of the first branch")
    p.set_defaults(func=cmd_init)

    # add
    p = sub.add_parser("add", help="Stage files for commit")
    p.add_argument("files", nargs="+", metavar="<files>", help="Files to stage")
    p.set_defaults(func=cmd_add)

    # commit
    p = sub.add_parser("commit", help="Commit staged files")
    p.add_argument("message", metavar="<message>", help="Commit message")
    p.add_argument("--author", "-a", required=True, help="Author of the commit")
    p.set_defaults(func=cmd_commit)

    # log
    p = sub.add_parser("log", help="View commit history")
    p.add_argument(
        "--limit", "-n", type=_non_negative_int, default=None, help="Show at most N commits"
    )
    p.set_defaults(func=cmd_log)

    # branch
    p = sub.add_parser("branch", help="Manage branches")
    p.add_argument("--create", "-c", default=None, metavar="NAME", help="Create a new branch")
    p.add_argument("--list", "-l", action="store_true", help="List all branches")
    p.add_argument("--switch", "-s", default=None, metavar="NAME", help="Switch to a branch")
    p.set_defaults(func=cmd_branch)

    # status
    p = sub.add_parser("status", help="Show the repository status")
    p.set_defaults(func=cmd_status)

    # show
    p = sub.add_parser("show", help="Show one commit")
    p.add_argument("commit_id")
    p.set_defaults(func=cmd_show)

    return parser


def _error_hint(msg: str) -> str | None:
    """Return a hint for common error messages, or None."""
    lower = msg.lower()
    if "branch" in lower and "does not exist" in lower:
        return "Hint: Use 'minigit branch -l' to see available branches."
    if "already initialized" in lower:
        return "Hint: Remove the .minigit directory to start over."
    if "corrupt commit" in lower:
        return "Hint: Use 'minigit log' to find valid commit ids."
    return None


_KNOWN_COMMANDS = [
    "init",
    "add",
    "commit",
    "log",
    "branch",
    "status",
    "show",
]


def _configure_logging(args):
    if getattr(args, "verbose", False):
        level = logging.DEBUG
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)

    # Check for "did you mean?" before argparse (which exits with code 2)
    if argv and not argv[0].startswith("-"):
        attempted = argv[0]
        if attempted not in _KNOWN_COMMANDS:
            matches = difflib.get_close_matches(attempted, _KNOWN_COMMANDS, n=3, cutoff=0.6)
            if matches:
                print(f"Unknown command: '{attempted}'", file=sys.stderr)
                print(f"  Did you mean: {', '.join(matches)}?", file=sys.stderr)
                sys.exit(1)

    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    if not args.command:
        print("Welcome to minigit! Use --help for available commands.")
        return

    try:
        args.func(args)
    except NotARepository as e:
        if args.json:
            print_json({"error": str(e)})
        else:
            print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (MiniGitError, OSError) as e:
        msg = str(e)
        if args.json:
            print_json({"error": msg})
        else:
            print(f"Error: {msg}", file=sys.stderr)
            hint = _error_hint(msg)
            if hint:
                print(f"  {hint}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
