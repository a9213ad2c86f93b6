import argparse
import logging
import pathlib
import sys

from . import config
from .api_files import decode_file, describe, encode_file, list_entries


class _CliTheme:
    _COLORS = {"ok": "32", "warn": "33", "err": "31", "info": "36", "dir": "34", "matched": "35"}
    _EMOJI = {"ok": "✅", "warn": "⚠️", "err": "❌", "info": "✨"}

    def __init__(self, plain: bool):
        self.plain = plain

    def _wrap(self, msg: str, kind: str, bold: bool = True) -> str:
        if self.plain:
            return msg
        emoji = self._EMOJI.get(kind)
        prefix = f"{emoji} " if emoji else ""
        weight = "1;" if bold else ""
        return f"\033[{weight}{self._COLORS[kind]}m{prefix}{msg}\033[0m"

    def ok(self, msg: str) -> str:
        return self._wrap(msg, "ok")

    def warn(self, msg: str) -> str:
        return self._wrap(msg, "warn")

    def err(self, msg: str) -> str:
        return self._wrap(msg, "err")

    def info(self, msg: str) -> str:
        return self._wrap(msg, "info")

    def entry(self, entry: dict) -> str:
        """One ``list`` line; ``*`` marks files keyed by the auto-add library."""
        if entry["dir"]:
            return self._wrap(entry["path"], "dir", bold=False)
        marker = "*" if entry["matched"] else " "
        line = f"{marker} {entry['path']} ({entry['size']} bytes)"
        return self._wrap(line, "matched", bold=False) if entry["matched"] else line


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return parsed


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wbzconv", description="Convert between WBZ, WU8 and U8 archives")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every node and pass")
    parser.add_argument("--plain", action="store_true", help="Disable colours and emoji")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def _add_autoadd(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "-a", "--autoadd",
            default=None,
            help="Auto-add library directory (default: $WBZCONV_AUTOADD or ./auto-add)"
        )
        sub.add_argument(
            "--max-depth",
            type=_positive_int,
            default=None,
            help="Deepest directory nesting accepted (default: $WBZCONV_MAX_DEPTH or 3)"
        )

    decode = subparsers.add_parser("decode", help="Decode WBZ/WU8 archives into U8")
    decode.add_argument("paths", nargs="+", help="One or more WBZ or WU8 files")
    decode.add_argument("-o", "--output", default=None, help="Output path (single input only)")
    _add_autoadd(decode)

    encode = subparsers.add_parser("encode", help="Encode U8 archives into WBZ (or WU8)")
    encode.add_argument("paths", nargs="+", help="One or more U8 files")
    encode.add_argument("-o", "--output", default=None, help="Output path (single input only)")
    encode.add_argument("--wu8", action="store_true", help="Write uncompressed WU8 instead of WBZ")
    _add_autoadd(encode)

    info = subparsers.add_parser("info", help="Show the header of a WBZ, WU8 or U8 file")
    info.add_argument("path", help="Archive path")

    listing = subparsers.add_parser("list", help="List the entries of an archive")
    listing.add_argument("path", help="Archive path")
    _add_autoadd(listing)
    return parser


def cli(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    theme = _CliTheme(args.plain or config.plain_output())
    _setup_logging(args.verbose or config.verbose_enabled())

    if args.command == "info":
        try:
            fields = describe(pathlib.Path(args.path).read_bytes())
        except Exception as exc:
            print(theme.err(f"info failed: {exc}"))
            return 1
        print(theme.info(f"{args.path}: {fields['format'].upper()}"))
        for key, value in fields.items():
            if key == "format":
                continue
            print(f"  {key}: {value:#x}" if key.endswith("offset") else f"  {key}: {value}")
        return 0

    autoadd = config.autoadd_path(args.autoadd)
    if not autoadd.is_dir():
        print(theme.warn(f"Auto-add library {autoadd} not found; every file will use the derived key"))

    if args.command == "list":
        try:
            entries = list_entries(pathlib.Path(args.path).read_bytes(), autoadd, args.max_depth)
        except Exception as exc:
            print(theme.err(f"list failed: {exc}"))
            return 1
        for entry in entries:
            print(theme.entry(entry))
        return 0

    if args.output and len(args.paths) > 1:
        parser.error("--output can only be used with a single input")

    results = {}
    for raw_path in args.paths:
        try:
            if args.command == "decode":
                out = decode_file(raw_path, autoadd, output=args.output, max_depth=args.max_depth)
            else:
                out = encode_file(
                    raw_path,
                    autoadd,
                    output=args.output,
                    wu8=args.wu8,
                    max_depth=args.max_depth
                )
            results[raw_path] = (True, f"Wrote {out}")
        except Exception as exc:
            results[raw_path] = (False, f"FAIL! {exc}")

    failures = 0
    for path, (ok, message) in results.items():
        if ok:
            print(theme.ok(f"{path}: {message}"))
        else:
            print(theme.err(f"{path}: {message}"))
            failures += 1
    return 0 if failures == 0 else 1


def main(argv=None) -> int:
    try:
        return cli(argv)
    except KeyboardInterrupt:
        print("Exiting...")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
