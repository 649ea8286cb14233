import argparse
import sys
from pprint import pprint

from termcolor import colored

from .errors import NomiError, ReadCancelled, diagnose, format_error
from .interpreter import Interpreter
from .lexer import print_tokens, tokenize
from .natives import Host
from .parser import parse

SOURCE_SUFFIX = ".nm"


def read_source(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def error(msg: str):
    print(colored("error: ", "red", attrs=["bold"]) + msg, file=sys.stderr)


def report(err: NomiError, source: str):
    print(format_error(err), file=sys.stderr)
    diagnosis = diagnose(err, source)
    if diagnosis:
        print(diagnosis, file=sys.stderr)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nomi", description="Run a NomiScript (.nm) program.")
    parser.add_argument("file", help=f"program to run (must end in {SOURCE_SUFFIX})")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--tokens", action="store_true", help="print the token stream and stop")
    mode.add_argument("--ast", action="store_true", help="print the parsed program and stop")
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    if not args.file.endswith(SOURCE_SUFFIX):
        error(f"File is not of type {SOURCE_SUFFIX} (NomiScript).")
        return 1

    try:
        source = read_source(args.file)
    except OSError as e:
        error(f"'{args.file}' could not be opened: {e.strerror}")
        return 1
    except UnicodeDecodeError as e:
        error(f"'{args.file}' is not valid UTF-8: {e.reason} at byte {e.start}")
        return 1

    try:
        if args.tokens:
            print_tokens(tokenize(source))
            return 0

        program = parse(source)
        if args.ast:
            pprint(program)
            return 0

        interpreter = Interpreter(Host.console())
        interpreter.evaluate(program, interpreter.global_env())
    except NomiError as e:
        report(e, source)
        return 1
    except ReadCancelled as e:
        print(str(e), file=sys.stderr)
        return 0
    except RecursionError:
        error("maximum recursion depth exceeded")
        return 1
    except KeyboardInterrupt:
        error("keyboard interrupt")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
