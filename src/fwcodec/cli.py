from __future__ import annotations
import argparse, json, sys
from .engine.engine import Engine
from .engine.parser import FixedWidthParser
from .engine.registry import SchemaRegistry
from .inputs.line_input import LineInput
from .logging_setup import configure_logging
from . import __version__


def _column_detector(column_range: str):
    """Build a detector reading the record type from a 1-based ``START:END`` column range."""
    start_text, _, end_text = column_range.partition(":")
    start, end = int(start_text), int(end_text)
    if start < 1 or end < start:
        raise argparse.ArgumentTypeError(f"invalid column range: {column_range}")

    def detect(line: str):
        token = line[start - 1:end].strip()
        return token or None
    return detect


def _add_schema_args(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--schema", required=True, help="Path to YAML/JSON schema description")
    cmd.add_argument("--source", required=True, help="Source name inside the schema")
    cmd.add_argument("--encoding", default="utf-8")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser("fwcodec")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--log-level", default=None, help="Logging level (default: $FWCODEC_LOG_LEVEL or INFO)")
    sub = p.add_subparsers(dest="cmd", required=True)

    decode = sub.add_parser("decode", help="Decode a fixed-width file")
    decode.add_argument("path")
    _add_schema_args(decode)
    kind = decode.add_mutually_exclusive_group(required=True)
    kind.add_argument("--record-type")
    kind.add_argument("--type-column", type=_column_detector, help="1-based START:END holding the record type")
    decode.add_argument("--dest", help="Output directory; prints JSON lines to stdout when omitted")
    decode.add_argument("--output", choices=["parquet", "jsonl"], default="parquet")
    decode.add_argument("--strict", action="store_true", help="Quarantine lines failing strict validation")

    validate = sub.add_parser("validate", help="Strictly validate every line of a file")
    validate.add_argument("path")
    _add_schema_args(validate)
    validate.add_argument("--record-type", required=True)

    encode = sub.add_parser("encode", help="Encode JSON lines into fixed-width lines")
    encode.add_argument("path", help="JSON Lines file, one object of field values per line")
    _add_schema_args(encode)
    encode.add_argument("--record-type", required=True)

    args = p.parse_args(argv)
    configure_logging(args.log_level)
    registry = SchemaRegistry.from_file(args.schema)
    parser = FixedWidthParser(registry)

    if args.cmd == "decode":
        if args.dest:
            eng = Engine(
                registry,
                args.source,
                record_type=args.record_type,
                detector=args.type_column,
                strict=args.strict,
                output_kind=args.output,
                encoding=args.encoding,
            )
            eng.run(args.path, args.dest)
            return 0
        lines = LineInput(args.path, encoding=args.encoding).iter_lines()
        if args.record_type:
            records = parser.decode_all(args.source, args.record_type, lines)
        else:
            records = parser.decode_with_type_detection(args.source, lines, args.type_column)
        for record in records:
            print(json.dumps({"record_type": record.record_type, "fields": record.to_dict()}, ensure_ascii=False))
        return 0

    if args.cmd == "validate":
        failures = 0
        for line_number, line in enumerate(LineInput(args.path, encoding=args.encoding).iter_lines(), start=1):
            if not line.strip():
                continue
            ok = parser.validate(args.source, args.record_type, line)
            failures += not ok
            print(f"{line_number}: {'valid' if ok else 'invalid'}")
        return 1 if failures else 0

    if args.cmd == "encode":
        with open(args.path, encoding=args.encoding) as fh:
            for line in fh:
                if not line.strip():
                    continue
                values = json.loads(line)
                print(parser.encode(values, args.source, args.record_type))
        return 0
    return 2


if __name__ == "__main__":
    sys.exit(main())
