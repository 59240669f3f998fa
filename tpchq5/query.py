"""TPC-H Query 5: revenue from local suppliers, per nation within one region."""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

Row = Dict[str, str]

REGION_COLUMNS = ("r_regionkey", "r_name", "r_comment")
NATION_COLUMNS = ("n_nationkey", "n_name", "n_regionkey", "n_comment")
SUPPLIER_COLUMNS = (
    "s_suppkey", "s_name", "s_address", "s_nationkey", "s_phone", "s_acctbal", "s_comment",
)
CUSTOMER_COLUMNS = (
    "c_custkey", "c_name", "c_address", "c_nationkey", "c_phone", "c_acctbal",
    "c_mktsegment", "c_comment",
)
ORDERS_COLUMNS = (
    "o_orderkey", "o_custkey", "o_orderstatus", "o_totalprice", "o_orderdate",
    "o_orderpriority", "o_clerk", "o_shippriority", "o_comment",
)
LINEITEM_COLUMNS = (
    "l_orderkey", "l_partkey", "l_suppkey", "l_linenumber", "l_quantity",
    "l_extendedprice", "l_discount", "l_tax", "l_returnflag", "l_linestatus",
    "l_shipdate", "l_commitdate", "l_receiptdate", "l_shipinstruct", "l_shipmode",
    "l_comment",
)

# Tables in the order they are read.
TABLE_COLUMNS: Dict[str, Sequence[str]] = {
    "region": REGION_COLUMNS,
    "nation": NATION_COLUMNS,
    "supplier": SUPPLIER_COLUMNS,
    "customer": CUSTOMER_COLUMNS,
    "orders": ORDERS_COLUMNS,
    "lineitem": LINEITEM_COLUMNS,
}

_FLOAT_PREFIX = re.compile(
    r"\s*[+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)",
    re.IGNORECASE,
)


class Query5Error(Exception):
    """Raised when data cannot be read, parsed or written."""


@dataclass
class TPCHData:
    """The six TPC-H tables that Query 5 needs, each a list of rows."""

    customer: List[Row] = field(default_factory=list)
    orders: List[Row] = field(default_factory=list)
    lineitem: List[Row] = field(default_factory=list)
    supplier: List[Row] = field(default_factory=list)
    nation: List[Row] = field(default_factory=list)
    region: List[Row] = field(default_factory=list)


def _split_row(line: str, columns: Sequence[str], delimiter: str) -> Row:
    fields = line.split(delimiter)
    # A trailing delimiter closes the last field rather than opening an empty one.
    if line.endswith(delimiter):
        fields.pop()
    return dict(zip(columns, fields))


def read_table(path, columns, delimiter="|") -> List[Row]:
    """Read a delimited table file; fields beyond ``columns`` are dropped."""
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
            return [
                _split_row(line, columns, delimiter)
                for raw in handle
                if (line := raw.rstrip("\n"))
            ]
    except OSError as exc:
        raise Query5Error(f"Failed to open file: {path}") from exc


def read_tpch_data(table_path) -> TPCHData:
    """Read all ``<table>.tbl`` files from ``table_path``."""
    tables: Dict[str, List[Row]] = {}
    failures: List[str] = []
    for name, columns in TABLE_COLUMNS.items():
        try:
            tables[name] = read_table(Path(table_path) / f"{name}.tbl", columns)
        except Query5Error as exc:
            failures.append(str(exc))
    if failures:
        raise Query5Error("; ".join(failures))
    return TPCHData(**tables)


def _to_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise Query5Error(f"Invalid number: {text!r}")
    return float(match.group().strip())


def _partition_revenue(
    items: Sequence[Row],
    order_nation: Mapping[str, str],
    supp_nation: Mapping[str, str],
) -> Dict[str, float]:
    local: Dict[str, float] = {}
    try:
        for item in items:
            cust_nation = order_nation.get(item["l_orderkey"])
            supplier_nation = supp_nation.get(item["l_suppkey"])
            if cust_nation is None or supplier_nation is None:
                continue
            if cust_nation == supplier_nation:
                price = _to_float(item["l_extendedprice"])
                discount = _to_float(item["l_discount"])
                local[cust_nation] = local.get(cust_nation, 0.0) + price * (1 - discount)
    except KeyError as exc:
        raise Query5Error(f"Missing column: {exc.args[0]}") from exc
    return local


def execute_query5(r_name, start_date, end_date, num_threads, data) -> Dict[str, float]:
    """Return revenue per nation name, sorted by name.

    Only orders dated in ``[start_date, end_date)`` whose customer and
    supplier share a nation in region ``r_name`` count.
    """
    if num_threads <= 0:
        raise ValueError("num_threads must be positive")

    try:
        region_keys = {r["r_regionkey"] for r in data.region if r["r_name"] == r_name}
        nation_names = {
            n["n_nationkey"]: n["n_name"]
            for n in data.nation
            if n["n_regionkey"] in region_keys
        }
        supp_nation = {
            s["s_suppkey"]: nation_names[s["s_nationkey"]]
            for s in data.supplier
            if s["s_nationkey"] in nation_names
        }
        cust_nation = {
            c["c_custkey"]: nation_names[c["c_nationkey"]]
            for c in data.customer
            if c["c_nationkey"] in nation_names
        }
        order_nation = {
            o["o_orderkey"]: cust_nation[o["o_custkey"]]
            for o in data.orders
            if o["o_custkey"] in cust_nation and start_date <= o["o_orderdate"] < end_date
        }
    except KeyError as exc:
        raise Query5Error(f"Missing column: {exc.args[0]}") from exc

    items = data.lineitem
    chunk = len(items) // num_threads
    bounds = [
        (t * chunk, len(items) if t == num_threads - 1 else (t + 1) * chunk)
        for t in range(num_threads)
    ]
    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        futures = [
            pool.submit(_partition_revenue, items[start:end], order_nation, supp_nation)
            for start, end in bounds
        ]
        partials = [future.result() for future in futures]

    results: Dict[str, float] = {}
    for local in partials:
        for nation, revenue in local.items():
            results[nation] = results.get(nation, 0.0) + revenue
    return dict(sorted(results.items()))


def format_revenue(value) -> str:
    """Format a revenue figure with six significant digits."""
    return format(value, "g")


def write_results(result_path, results) -> None:
    """Write ``nation | revenue`` lines to ``result_path`` and echo them to stdout."""
    try:
        with open(result_path, "w", encoding="utf-8") as out:
            for nation, revenue in sorted(results.items()):
                text = format_revenue(revenue)
                print(f"Nation: {nation}, Revenue: {text}")
                out.write(f"{nation} | {text}\n")
    except OSError as exc:
        raise Query5Error(f"Failed to open output file: {result_path}") from exc