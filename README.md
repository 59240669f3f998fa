# tpchq5

Runs TPC-H Query 5 (revenue from local suppliers, summed by nation) over the
pipe-delimited `.tbl` files that `dbgen` produces.

For each line item, the query joins region, nation, supplier, customer and
orders. A line item counts only when all of these hold:

- the region's name equals the one you give,
- the order date falls in `[start_date, end_date)`, compared as strings,
- the customer and the supplier belong to the same nation.

Each line item that counts adds `l_extendedprice * (1 - l_discount)` to its
nation's total. The query splits the line items into one chunk per thread and
sums the chunks in a thread pool.

## Installation

```
pip install .
```

## Command line

```
tpchq5 --r_name ASIA --start_date 1994-01-01 --end_date 1995-01-01 \
       --threads 4 --table_path ./data --result_path ./result.txt
```

`python -m tpchq5.cli` takes the same options.

Every option is required. Each option takes a value, and an unknown option or
an option without a value is an error. `--threads` must start with a positive
integer.

`--table_path` is a directory that holds these files:

- `region.tbl`
- `nation.tbl`
- `supplier.tbl`
- `customer.tbl`
- `orders.tbl`
- `lineitem.tbl`

The command prints how long parsing, reading and executing took, and the total
time. It prints one `Nation: NAME, Revenue: VALUE` line per nation, in sorted
order, and writes `NAME | VALUE` lines to the result file. Revenue is shown
with six significant digits.

The command exits with status 1 in these cases:

- the arguments are invalid,
- a table cannot be read or lacks a needed column,
- the result file cannot be written.

## Library use

```python
from tpchq5.query import read_tpch_data, execute_query5, write_results

data = read_tpch_data("./data")
results = execute_query5("ASIA", "1994-01-01", "1995-01-01", 4, data)
write_results("result.txt", results)
```

- `read_table(path, columns, delimiter="|")` reads one table file into a list
  of dicts keyed by `columns`. It skips empty lines and drops extra fields. A
  trailing delimiter does not add an empty field.
- `read_tpch_data(table_path)` reads all six tables into a `TPCHData` with the
  fields `customer`, `orders`, `lineitem`, `supplier`, `nation` and `region`.
- `execute_query5(r_name, start_date, end_date, num_threads, data)` returns a
  dict that maps each nation name to its revenue, sorted by name.
- `write_results(result_path, results)` writes the result file and echoes each
  line to standard output.
- `format_revenue(value)` renders a revenue value the way the result file
  shows it.

These functions raise `Query5Error` when a file cannot be opened, a needed
column is missing, or a price or discount is not a number. `execute_query5`
raises `ValueError` when `num_threads` is not positive.

## Limitations

The package holds every table in memory as lists of dicts. It has no database
storage and no indexes, and it runs only Query 5.