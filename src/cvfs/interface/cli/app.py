from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: resolution of the configuration hierarchy
(defaults, stored settings, CLI overrides), logging bootstrap, optional disk
bootstrap (load or create), and routing into either the interactive shell or
a command script.
"""

import json
import sys
from typing import Any, Dict, List, Optional, TextIO

from cvfs.core.session import Session
from cvfs.core.validator import validate_config
from cvfs.domain.config import get_config_path, get_default_config, load_config, save_config
from cvfs.domain.errors import CVFSError
from cvfs.infra.logging import LoggingConfig, configure_logging, get_default_log_path, get_logger
from cvfs.interface.cli import args as cli_args
from cvfs.interface.shell.dispatcher import Shell
from cvfs.utils.i18n import i18n

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None, *, stdin: Optional[TextIO] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Command line arguments. Defaults to sys.argv.
        stdin: Source of interactive input. Defaults to sys.stdin.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Resolve base configuration (Default vs Persistent state)
    base_conf = get_default_config() if args.use_defaults else load_config()

    # 3. Map, merge and normalize
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    # 4. Logging bootstrap (stderr, optional rotating file)
    configure_logging(
        LoggingConfig.from_settings(
            clean_conf,
            debug=bool(args.debug),
            default_log_file=get_default_log_path(),
        )
    )
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config:
        path = get_config_path()
        if not save_config(clean_conf):
            msg = i18n.t("cli.errors.config_save", path=path)
            print(f"ERROR: {msg}", file=sys.stderr)
            return EXIT_FAILURE
        print(i18n.t("cli.status.config_saved", path=path))
        return EXIT_OK

    if clean_conf["locale"] != i18n.locale:
        i18n.load_locale(clean_conf["locale"])

    # 5. Disk bootstrap
    session = Session()
    shell = Shell(session, out=sys.stdout)
    try:
        if args.load_path:
            session.load(args.load_path)
            print(i18n.t("shell.ok.loaded", path=args.load_path))
        elif clean_conf["default_capacity"] is not None:
            session.new_store(clean_conf["default_capacity"])
            print(i18n.t("shell.ok.disk_created", size=clean_conf["default_capacity"]))
    except CVFSError as e:
        msg = i18n.t("cli.errors.startup", error=str(e))
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_FAILURE

    # 6. Execution phase
    try:
        if args.script_path:
            return _run_script(shell, args.script_path, strict=clean_conf["strict_scripts"])
        shell.repl(stdin, prompt=clean_conf["prompt"])
    except KeyboardInterrupt:
        msg = i18n.t("cli.status.interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return EXIT_INTERRUPTED

    return EXIT_OK

# -----------------------------------------------------------------------------
# SCRIPT MODE
# -----------------------------------------------------------------------------

def _run_script(shell: Shell, path: str, *, strict: bool) -> int:
    """
    Feed every line of `path` to the shell.

    In strict mode execution stops at the first failing command and the
    exit code is non-zero; otherwise failures are only reported.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except FileNotFoundError:
        msg = i18n.t("cli.errors.script_missing", path=path)
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_USAGE
    except OSError as e:
        msg = i18n.t("cli.errors.script_read", path=path, error=str(e))
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_USAGE

    logger.info(f"Running script {path} ({len(lines)} lines, strict={strict})")
    failures = shell.run_lines(lines, stop_on_error=strict)
    if failures:
        logger.info(i18n.t("cli.status.script_done", failures=failures))
    return EXIT_FAILURE if (strict and failures) else EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of override values into the base configuration.

    Only known keys are merged; None values never clobber stored settings.
    """
    out = dict(base)
    keys_to_merge = [
        "prompt", "locale", "strict_scripts", "default_capacity",
        "log_level", "log_to_file", "log_file",
    ]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out


if __name__ == "__main__":
    sys.exit(main())
