from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the `cvfs` launcher and translates the
parsed namespace into configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict

from cvfs.utils.i18n import i18n

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the CVFS CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="cvfs",
        description=i18n.t("app.description"),
    )

    # --- Startup State ---
    p.add_argument(
        "-c", "--capacity",
        dest="capacity",
        type=int,
        default=None,
        help=i18n.t("cli.args.capacity"),
    )
    p.add_argument(
        "-l", "--load",
        dest="load_path",
        default=None,
        help=i18n.t("cli.args.load"),
    )

    # --- Batch Mode ---
    p.add_argument(
        "-s", "--script",
        dest="script_path",
        metavar="FILE",
        default=None,
        help=i18n.t("cli.args.script"),
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help=i18n.t("cli.args.strict"),
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help=i18n.t("cli.args.defaults"),
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help=i18n.t("cli.args.dump"),
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help=i18n.t("cli.args.save"),
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help=i18n.t("cli.args.log_file"),
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help=i18n.t("cli.args.debug"),
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only flags the user actually set are included, so stored settings
    survive an invocation that does not mention them.
    """
    overrides: Dict[str, Any] = {}

    if args.capacity is not None:
        overrides["default_capacity"] = args.capacity
    if args.strict:
        overrides["strict_scripts"] = True
    if args.log_file:
        overrides["log_file"] = args.log_file
        overrides["log_to_file"] = True
    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides
