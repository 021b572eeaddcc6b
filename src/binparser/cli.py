from __future__ import annotations
import argparse, json, logging, sys

from .binary.errors import CursorError
from .binary.reader import open_cursor
from .binary.codecs.field_plan import parse_fields


def cmd_info(args):
    cur = open_cursor(args.input)
    out = cur.state().model_dump(mode="json")
    out["length_bits"] = cur.length * 8
    print(json.dumps(out, indent=2))


def cmd_read(args):
    cur = open_cursor(args.input, offset=args.offset, bit=args.bit)
    try:
        fields = parse_fields(cur, args.plan)
    finally:
        if args.dump:
            cur.dump()
    print(json.dumps([f.model_dump(mode="json") for f in fields], indent=2))


def build_parser():
    p = argparse.ArgumentParser(prog="binparser", description="Bit-level binary field reader")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd")

    sp = sub.add_parser("info", help="print buffer length and start position as JSON")
    sp.add_argument("input", help="Path to a binary file")
    sp.set_defaults(func=cmd_info)

    sp = sub.add_parser("read", help="decode a field plan and print the fields as JSON")
    sp.add_argument("input", help="Path to a binary file")
    sp.add_argument("plan", help='e.g. "version:u4,flags:u12,count:ue,delta:se,align,payload:bytes4"')
    sp.add_argument("--offset", type=int, default=0, help="Start byte")
    sp.add_argument("--bit", type=int, default=0, help="Start bit within the start byte (0 = MSB)")
    sp.add_argument("--dump", action="store_true", help="Print the cursor state to stderr after decoding")
    sp.set_defaults(func=cmd_read)

    return p


def main(argv=None):
    p = build_parser()
    ns = p.parse_args(argv)
    if ns.verbose:
        logging.basicConfig(level=logging.DEBUG)
    if not hasattr(ns, "func"):
        p.print_help()
        return 2
    try:
        ns.func(ns)
    except (CursorError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
