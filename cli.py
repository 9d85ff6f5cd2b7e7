import sys
import traceback

import colorama

from errors import InterpError
from loader import load_file
from tracer import CountingTracer, PrintTracer
from vm import VM


FLAGS = ("--debug", "--trace", "--profile", "--color", "--dump")

_colorama_inited = False


def usage():
    print("Usage:")
    print("  python cli.py <program.iin>")
    print("  (optional) --trace    print every control point to stderr")
    print("  (optional) --profile  count control points and report hot ones")
    print("  (optional) --dump     print the loaded instructions instead of running")
    print("  (optional) --color    colour the FATAL prefix")
    print("  (optional) --debug    show Python traceback")


def fatal_line(e: InterpError, color: bool = False) -> str:
    global _colorama_inited
    text = e.format()
    if not color:
        return text
    if not _colorama_inited:
        colorama.just_fix_windows_console()
        _colorama_inited = True
    prefix = "FATAL:"
    return colorama.Fore.RED + colorama.Style.BRIGHT + prefix + colorama.Style.RESET_ALL + text[len(prefix):]


def cmd_dump(program):
    print("LABELS:")
    for name, addr in program.labels.items():
        print(f"  {name} -> {addr:04d}")

    print("\nINSTRUCTIONS:")
    for line in program.listing():
        print(line)


def cmd_run(path, debug=False, trace=False, profile=False, color=False, dump=False):
    try:
        program = load_file(path)
        if dump:
            cmd_dump(program)
            return

        tracer = None
        if trace:
            tracer = PrintTracer(program)
        elif profile:
            tracer = CountingTracer()

        vm = VM(program, tracer=tracer)
        try:
            vm.run()
        finally:
            sys.stdout.flush()
            if profile:
                print(tracer.report(program), file=sys.stderr)
    except InterpError as e:
        if debug:
            traceback.print_exc()
        else:
            print(fatal_line(e, color=color))
        sys.exit(1)


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)

    opts = {}
    for flag in FLAGS:
        opts[flag[2:]] = flag in args
        while flag in args:
            args.remove(flag)

    if len(args) != 1 or args[0].startswith("--"):
        usage()
        sys.exit(1)

    if opts["trace"] and opts["profile"]:
        print("--trace and --profile cannot be combined.")
        sys.exit(1)

    cmd_run(args[0], **opts)


if __name__ == "__main__":
    main()
