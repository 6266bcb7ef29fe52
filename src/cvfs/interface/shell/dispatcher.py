from __future__ import annotations

"""
Command Shell Dispatcher.

Maps tokenized command lines onto Session operations and renders their
results. Domain errors are caught here, and only here, and printed as
'Error: <message>' so an interactive session survives any failed command.
"""

import logging
import sys
from typing import Callable, Dict, List, Optional, TextIO, Tuple

from cvfs.core.session import Session
from cvfs.domain.constants import PARENT_TOKEN
from cvfs.domain.errors import CVFSError, ValidationError
from cvfs.interface.shell.render import render_criteria, render_listing
from cvfs.interface.shell.tokenizer import parse_input
from cvfs.utils.i18n import i18n

logger = logging.getLogger(__name__)

Handler = Callable[[List[str]], List[str]]

CWD_PLACEHOLDER = "{cwd}"


class ShellUsageError(CVFSError):
    """A command was invoked with the wrong number of arguments."""


class Shell:
    """
    Line-oriented front end over a Session.

    Attributes:
        session: The state every command acts upon.
        finished: Set once 'quit' has been executed.
        last_error: The error raised by the most recent failed command.
    """

    def __init__(self, session: Optional[Session] = None, out: Optional[TextIO] = None) -> None:
        self.session = session if session is not None else Session()
        self.out = out if out is not None else sys.stdout
        self.finished = False
        self.last_error: Optional[CVFSError] = None

        # command -> (argument count, handler)
        self._commands: Dict[str, Tuple[int, Handler]] = {
            "newDisk": (1, self._new_disk),
            "newDoc": (3, self._new_doc),
            "newDir": (1, self._new_dir),
            "delete": (1, self._delete),
            "rename": (2, self._rename),
            "changeDir": (1, self._change_dir),
            "list": (0, self._list),
            "rList": (0, self._rlist),
            "newSimpleCri": (4, self._new_simple_cri),
            "newNegation": (2, self._new_negation),
            "newBinaryCri": (4, self._new_binary_cri),
            "printAllCriteria": (0, self._print_all_criteria),
            "search": (1, self._search),
            "rSearch": (1, self._rsearch),
            "save": (1, self._save),
            "load": (1, self._load),
            "undo": (0, self._undo),
            "redo": (0, self._redo),
            "quit": (0, self._quit),
        }

    @property
    def commands(self) -> List[str]:
        return list(self._commands)

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def execute(self, line: str) -> bool:
        """
        Run one command line and print its output.

        Returns:
            bool: False if the command failed, True otherwise (blank lines
            and successful commands).
        """
        tokens = parse_input(line.strip())
        if not tokens:
            return True

        command, args = tokens[0], tokens[1:]
        self.last_error = None
        entry = self._commands.get(command)
        if entry is None:
            self._emit(i18n.t("shell.errors.unknown", command=command))
            self.last_error = ShellUsageError(f"Unknown command: {command}")
            return False

        arity, handler = entry
        try:
            if len(args) != arity:
                raise ShellUsageError(i18n.t(f"shell.usage.{command}"))
            lines = handler(args)
        except CVFSError as e:
            self.last_error = e
            logger.debug(f"Command '{command}' rejected: {e}")
            self._emit(i18n.t("shell.errors.prefix", message=str(e)))
            return False

        for text in lines:
            self._emit(text)
        return True

    def run_lines(self, lines: List[str], *, stop_on_error: bool = False) -> int:
        """
        Execute a batch of lines (script mode).

        Returns:
            int: Number of failed commands (counting stops at the first
            failure when `stop_on_error` is set).
        """
        failures = 0
        for line in lines:
            if self.finished:
                break
            if not self.execute(line):
                failures += 1
                if stop_on_error:
                    break
        return failures

    def repl(self, stdin: Optional[TextIO] = None, prompt: str = "CVFS> ") -> None:
        """
        Interactive loop until 'quit' or end of input.

        A '{cwd}' placeholder in `prompt` is replaced by the path of the
        active directory before every line.
        """
        source = stdin if stdin is not None else sys.stdin
        self._emit(i18n.t("app.welcome"))
        while not self.finished:
            self.out.write(self._render_prompt(prompt))
            self.out.flush()
            line = source.readline()
            if not line:
                self._emit("")
                break
            self.execute(line)

    def _render_prompt(self, prompt: str) -> str:
        cwd = self.session.cwd_path() if self.session.has_store else ""
        return prompt.replace(CWD_PLACEHOLDER, cwd)

    def _emit(self, text: str) -> None:
        self.out.write(text + "\n")

    # -------------------------------------------------------------------------
    # Handlers: disk and tree
    # -------------------------------------------------------------------------

    def _new_disk(self, args: List[str]) -> List[str]:
        try:
            capacity = int(args[0])
        except ValueError:
            raise ValidationError(i18n.t("shell.errors.bad_size", value=args[0])) from None
        self.session.new_store(capacity)
        return [i18n.t("shell.ok.disk_created", size=capacity)]

    def _new_doc(self, args: List[str]) -> List[str]:
        name, doc_type, content = args
        self.session.create_document(name, doc_type, content)
        return [i18n.t("shell.ok.doc_created", name=name)]

    def _new_dir(self, args: List[str]) -> List[str]:
        self.session.create_directory(args[0])
        return [i18n.t("shell.ok.dir_created", name=args[0])]

    def _delete(self, args: List[str]) -> List[str]:
        self.session.remove(args[0])
        return [i18n.t("shell.ok.deleted", name=args[0])]

    def _rename(self, args: List[str]) -> List[str]:
        old, new = args
        self.session.rename(old, new)
        return [i18n.t("shell.ok.renamed", old=old, new=new)]

    def _change_dir(self, args: List[str]) -> List[str]:
        target = args[0]
        self.session.move_cursor(target)
        if target == PARENT_TOKEN:
            return [i18n.t("shell.ok.changed_parent")]
        return [i18n.t("shell.ok.changed_dir", name=target)]

    def _list(self, args: List[str]) -> List[str]:
        return render_listing(self.session.list_children())

    def _rlist(self, args: List[str]) -> List[str]:
        return render_listing(self.session.list_children(recursive=True))

    # -------------------------------------------------------------------------
    # Handlers: criteria and search
    # -------------------------------------------------------------------------

    def _new_simple_cri(self, args: List[str]) -> List[str]:
        name, attr, op, value = args
        self.session.define_comparator(name, attr, op, value)
        return [i18n.t("shell.ok.simple_cri", name=name)]

    def _new_negation(self, args: List[str]) -> List[str]:
        name, of = args
        self.session.define_negation(name, of)
        return [i18n.t("shell.ok.negation", name=name)]

    def _new_binary_cri(self, args: List[str]) -> List[str]:
        name, left, op, right = args
        self.session.define_binary(name, left, op, right)
        return [i18n.t("shell.ok.binary", name=name)]

    def _print_all_criteria(self, args: List[str]) -> List[str]:
        return render_criteria(self.session.list_criteria())

    def _search(self, args: List[str]) -> List[str]:
        return render_listing(self.session.search(args[0]))

    def _rsearch(self, args: List[str]) -> List[str]:
        return render_listing(self.session.search(args[0], recursive=True))

    # -------------------------------------------------------------------------
    # Handlers: persistence and history
    # -------------------------------------------------------------------------

    def _save(self, args: List[str]) -> List[str]:
        path = self.session.save(args[0])
        return [i18n.t("shell.ok.saved", path=path)]

    def _load(self, args: List[str]) -> List[str]:
        self.session.load(args[0])
        return [i18n.t("shell.ok.loaded", path=args[0])]

    def _undo(self, args: List[str]) -> List[str]:
        self.session.undo()
        return [i18n.t("shell.ok.undo")]

    def _redo(self, args: List[str]) -> List[str]:
        self.session.redo()
        return [i18n.t("shell.ok.redo")]

    def _quit(self, args: List[str]) -> List[str]:
        self.finished = True
        return [i18n.t("app.goodbye")]
