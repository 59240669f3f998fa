"""Command line entry point for running Query 5 over a TPC-H data directory."""

from __future__ import annotations

import re
import sys
import time
from dataclasses import dataclass

from tpchq5.query import Query5Error, execute_query5, read_tpch_data, write_results

_FLAGS = {
    "--r_name": "r_name",
    "--start_date": "start_date",
    "--end_date": "end_date",
    "--threads": "num_threads",
    "--table_path": "table_path",
    "--result_path": "result_path",
}

_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


@dataclass(frozen=True)
class Options:
    """Validated command line options."""

    r_name: str
    start_date: str
    end_date: str
    num_threads: int
    table_path: str
    result_path: str


def _parse_threads(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise Query5Error(f"Invalid thread count: {text}")
    return int(match.group())


def parse_args(argv) -> Options:
    """Parse arguments (without the program name) into :class:`Options`."""
    values: dict = {}
    args = iter(argv)
    for arg in args:
        name = _FLAGS.get(arg)
        value = next(args, None) if name is not None else None
        if value is None:
            raise Query5Error(f"Unknown or incomplete argument: {arg}")
        values[name] = value

    num_threads = _parse_threads(values["num_threads"]) if "num_threads" in values else 0
    strings = {key: values.get(key, "") for key in _FLAGS.values() if key != "num_threads"}
    if num_threads <= 0 or not all(strings.values()):
        raise Query5Error("Missing required arguments.")
    return Options(num_threads=num_threads, **strings)


def _elapsed_ms(since: float) -> int:
    return int((time.perf_counter() - since) * 1000)


def main(argv=None) -> int:
    """Run the query and write the results; return the process exit status."""
    total_start = time.perf_counter()
    print("Starting...", flush=True)
    if argv is None:
        argv = sys.argv[1:]

    steps = (
        ("Failed to parse command line arguments.", "Parsing arguments"),
        ("Failed to read TPCH data.", "Reading data"),
        ("Failed to execute TPCH Query 5", "Executing query"),
    )
    fail_message = steps[0][0]
    try:
        started = time.perf_counter()
        options = parse_args(argv)
        print(f"{steps[0][1]} took {_elapsed_ms(started)} ms")

        fail_message = steps[1][0]
        started = time.perf_counter()
        data = read_tpch_data(options.table_path)
        print(f"{steps[1][1]} took {_elapsed_ms(started)} ms")

        fail_message = steps[2][0]
        started = time.perf_counter()
        results = execute_query5(
            options.r_name, options.start_date, options.end_date, options.num_threads, data
        )
        print(f"{steps[2][1]} took {_elapsed_ms(started)} ms")

        fail_message = "Failed to output results"
        write_results(options.result_path, results)
    except (Query5Error, ValueError) as exc:
        print(exc, file=sys.stderr)
        print(fail_message, file=sys.stderr)
        return 1

    print(
        f"Total execution time with {options.num_threads} threads: "
        f"{_elapsed_ms(total_start)} ms"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())