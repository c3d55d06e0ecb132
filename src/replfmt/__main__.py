# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root
# for license information.

import argparse
import sys

import replfmt
from replfmt.common import log, options
from replfmt.console import ReplConsole
from replfmt.inspect import MemberDisplayFormat, NumberRadix, PrintOptions


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="replfmt",
        description="Interactive Python console with bounded value display.",
    )
    parser.add_argument(
        "--hex", action="store_true", help="display integers in hexadecimal"
    )
    parser.add_argument(
        "--max-output",
        type=int,
        default=PrintOptions.maximum_output_length,
        metavar="N",
        help="truncate each result to N characters (0 for no limit)",
    )
    parser.add_argument(
        "--members",
        choices=[format.value for format in MemberDisplayFormat],
        default=PrintOptions.member_display_format.value,
        help="which members of objects to display",
    )
    parser.add_argument(
        "--no-escape",
        action="store_true",
        help="use Python escapes for non-printable characters instead of code points",
    )
    parser.add_argument("--ellipsis", default=PrintOptions.ellipsis)
    parser.add_argument("--log-dir", default=options.log_dir, metavar="DIR")
    args = parser.parse_args(argv)

    try:
        print_options = PrintOptions(
            ellipsis=args.ellipsis,
            maximum_output_length=args.max_output or None,
            number_radix=NumberRadix.HEXADECIMAL if args.hex else NumberRadix.DECIMAL,
            escape_non_printable_characters=not args.no_escape,
            member_display_format=MemberDisplayFormat(args.members),
        )
    except ValueError as exc:
        parser.error(str(exc))
    return args, print_options


def main(argv=None):
    args, print_options = parse_args(argv)

    if args.log_dir is not None:
        options.log_dir = args.log_dir
        log.to_file()
    log.debug("Parsed {0!r} into {1!r}", sys.argv[1:] if argv is None else argv, print_options)

    console = ReplConsole(print_options)
    console.interact(banner=f"replfmt {replfmt.__version__}", exitmsg="")


if __name__ == "__main__":
    main()
