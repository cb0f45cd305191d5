"""Entry point for the event converter.

Reads test engine output line by line (from a file or stdin), converts
JSON events into service messages, passes other text through, and writes
the result to a file or stdout.  Optionally writes a YAML summary of the
converted run.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from eventbridge.config import ConverterConfig
from eventbridge.engine.converter import TestEventsConverter
from eventbridge.errors import ConversionError
from eventbridge.messages.emitter import StreamSink
from eventbridge.reporting.reporter import RunReporter

# Undecodable input bytes survive the round trip to the output unchanged
PASSTHROUGH_ERRORS = "surrogateescape"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Convert test engine JSON events into service messages"
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="File with engine output, one event per line (default: stdin)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="File to write converted output to (default: stdout)",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="Path to the converter JSON config file",
    )
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Path to write a YAML summary of the converted run",
    )
    parser.add_argument(
        "--channel",
        choices=["stdout", "stderr"],
        default="stdout",
        help="Output channel the input was captured from (default: stdout)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Diagnostic logging level, written to stderr (default: WARNING)",
    )
    return parser.parse_args(argv)


def configure_logging(log_level: str) -> None:
    """Configure diagnostic logging on stderr.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR).
    """
    level = getattr(logging, log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


class _ReportingSink(StreamSink):
    """Writes converted text to a stream and feeds the run reporter."""

    def __init__(self, stream: TextIO, reporter: RunReporter | None) -> None:
        super().__init__(stream)
        self.reporter = reporter

    def __call__(self, text: str, channel: str) -> bool:
        written = super().__call__(text, channel)
        if self.reporter is not None:
            self.reporter.add_line(text)
        return written


def convert_stream(
    source: TextIO,
    destination: TextIO,
    config: ConverterConfig,
    reporter: RunReporter | None = None,
    channel: str = "stdout",
) -> int:
    """Convert every line of *source* into *destination*.

    Args:
        source: Engine output, one chunk per line.
        destination: Stream receiving messages and passthrough text.
        config: Converter configuration.
        reporter: Optional reporter fed with every written line.
        channel: Output channel name passed to the converter.

    Returns:
        Exit code: 0 on success, 1 on a fatal conversion error.
    """
    converter = TestEventsConverter(_ReportingSink(destination, reporter), config)
    for line_number, line in enumerate(source, start=1):
        text = line.rstrip("\r\n")
        try:
            converter.process(text, channel)
        except ConversionError as e:
            print(f"Error: line {line_number}: {e}", file=sys.stderr)
            return 1
    try:
        converter.flush()
    except ConversionError as e:
        print(f"Error: at end of input: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.log_level)

    config = ConverterConfig(args.config_file)
    reporter = RunReporter() if args.summary is not None else None

    try:
        if args.input is not None:
            source = open(args.input, encoding="utf-8", errors=PASSTHROUGH_ERRORS)
        else:
            sys.stdin.reconfigure(errors=PASSTHROUGH_ERRORS)
            source = sys.stdin
    except OSError as e:
        print(f"Error: cannot read input: {e}", file=sys.stderr)
        return 1

    try:
        if args.output is not None:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            with open(
                args.output, "w", encoding="utf-8", errors=PASSTHROUGH_ERRORS,
            ) as destination:
                exit_code = convert_stream(
                    source, destination, config, reporter, args.channel,
                )
        else:
            sys.stdout.reconfigure(errors=PASSTHROUGH_ERRORS)
            exit_code = convert_stream(
                source, sys.stdout, config, reporter, args.channel,
            )
    except OSError as e:
        print(f"Error: cannot write output: {e}", file=sys.stderr)
        return 1
    finally:
        if source is not sys.stdin:
            source.close()

    if reporter is not None:
        reporter.write_yaml(args.summary)
        print(f"Summary written to: {args.summary}", file=sys.stderr)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
