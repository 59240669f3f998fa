import pytest

from tpchq5.query import (
    LINEITEM_COLUMNS,
    REGION_COLUMNS,
    Query5Error,
    TPCHData,
    execute_query5,
    format_revenue,
    read_table,
    read_tpch_data,
    write_results,
)


def _lineitem(orderkey, suppkey, price, discount="0"):
    return f"{orderkey}|1|{suppkey}|1|5|{price}|{discount}|0|N|O|d|d|d|i|m|c|"


TABLES = {
    "region": ["0|AFRICA|c|", "1|ASIA|c|"],
    "nation": ["0|KENYA|0|c|", "1|CHINA|1|c|", "2|JAPAN|1|c|"],
    "supplier": ["1|S1|a|1|p|0|c|", "2|S2|a|2|p|0|c|", "3|S3|a|0|p|0|c|"],
    "customer": ["10|C1|a|1|p|0|SEG|c|", "11|C2|a|2|p|0|SEG|c|", "12|C3|a|0|p|0|SEG|c|"],
    "orders": [
        "100|10|O|0|1994-03-01|1-URGENT|clerk|0|c|",
        "101|11|O|0|1994-06-15|1-URGENT|clerk|0|c|",
        "102|10|O|0|1995-02-01|1-URGENT|clerk|0|c|",
        "103|12|O|0|1994-05-01|1-URGENT|clerk|0|c|",
    ],
    "lineitem": [
        _lineitem(100, 1, "1000"),
        _lineitem(100, 2, "500"),
        _lineitem(101, 2, "250"),
        _lineitem(102, 1, "777"),
        _lineitem(103, 3, "333"),
    ],
}


@pytest.fixture
def table_dir(tmp_path):
    for name, lines in TABLES.items():
        (tmp_path / f"{name}.tbl").write_text("\n".join(lines) + "\n")
    return tmp_path


def test_read_table_drops_trailing_delimiter(tmp_path):
    path = tmp_path / "region.tbl"
    path.write_text("0|AFRICA|comment|\n")
    assert read_table(path, REGION_COLUMNS) == [
        {"r_regionkey": "0", "r_name": "AFRICA", "r_comment": "comment"}
    ]


def test_read_table_skips_blank_lines_and_extra_fields(tmp_path):
    path = tmp_path / "t.tbl"
    path.write_text("a|b|c|d\n\nx|y\n")
    rows = read_table(path, ("one", "two", "three"), "|")
    assert rows == [{"one": "a", "two": "b", "three": "c"}, {"one": "x", "two": "y"}]


def test_read_table_keeps_empty_inner_fields(tmp_path):
    path = tmp_path / "t.tbl"
    path.write_text("a,,c\n")
    assert read_table(path, ("p", "q", "r"), ",") == [{"p": "a", "q": "", "r": "c"}]


def test_read_table_missing_file(tmp_path):
    with pytest.raises(Query5Error):
        read_table(tmp_path / "absent.tbl", REGION_COLUMNS)


def test_read_tpch_data_loads_all_tables(table_dir):
    data = read_tpch_data(table_dir)
    assert len(data.lineitem) == len(TABLES["lineitem"])
    assert data.nation[2]["n_name"] == "JAPAN"
    assert set(data.lineitem[0]) == set(LINEITEM_COLUMNS)


def test_read_tpch_data_missing_table(table_dir):
    (table_dir / "orders.tbl").unlink()
    with pytest.raises(Query5Error, match="orders.tbl"):
        read_tpch_data(table_dir)


def test_execute_query5_local_supplier_revenue(table_dir):
    data = read_tpch_data(table_dir)
    result = execute_query5("ASIA", "1994-01-01", "1995-01-01", 2, data)
    assert result == {"CHINA": 1000.0, "JAPAN": 250.0}
    assert list(result) == sorted(result)


def test_execute_query5_other_region(table_dir):
    data = read_tpch_data(table_dir)
    assert execute_query5("AFRICA", "1994-01-01", "1995-01-01", 1, data) == {"KENYA": 333.0}


def test_execute_query5_unknown_region_is_empty(table_dir):
    data = read_tpch_data(table_dir)
    assert execute_query5("EUROPE", "1994-01-01", "1995-01-01", 3, data) == {}


def test_execute_query5_end_date_is_exclusive(table_dir):
    data = read_tpch_data(table_dir)
    result = execute_query5("ASIA", "1994-01-01", "1994-06-15", 1, data)
    assert "JAPAN" not in result
    assert result["CHINA"] == 1000.0


@pytest.mark.parametrize("threads", [1, 2, 3, 5, 10])
def test_execute_query5_independent_of_thread_count(table_dir, threads):
    data = read_tpch_data(table_dir)
    baseline = execute_query5("ASIA", "1994-01-01", "1995-01-01", 1, data)
    assert execute_query5("ASIA", "1994-01-01", "1995-01-01", threads, data) == baseline


def test_execute_query5_applies_discount():
    data = TPCHData(
        region=[{"r_regionkey": "1", "r_name": "ASIA"}],
        nation=[{"n_nationkey": "1", "n_name": "CHINA", "n_regionkey": "1"}],
        supplier=[{"s_suppkey": "1", "s_nationkey": "1"}],
        customer=[{"c_custkey": "10", "c_nationkey": "1"}],
        orders=[{"o_orderkey": "100", "o_custkey": "10", "o_orderdate": "1994-03-01"}],
        lineitem=[{"l_orderkey": "100", "l_suppkey": "1",
                   "l_extendedprice": "200", "l_discount": "0.25"}],
    )
    assert execute_query5("ASIA", "1994-01-01", "1995-01-01", 1, data) == {"CHINA": 150.0}


def test_execute_query5_missing_column():
    data = TPCHData(region=[{"r_regionkey": "1"}])
    with pytest.raises(Query5Error, match="r_name"):
        execute_query5("ASIA", "1994-01-01", "1995-01-01", 1, data)


def test_execute_query5_rejects_zero_threads(table_dir):
    data = read_tpch_data(table_dir)
    with pytest.raises(ValueError):
        execute_query5("ASIA", "1994-01-01", "1995-01-01", 0, data)


def test_format_revenue_uses_six_significant_digits():
    assert format_revenue(1000.0) == "1000"
    assert format_revenue(1234567.0) == "1.23457e+06"


def test_write_results_file_and_stdout(tmp_path, capsys):
    out = tmp_path / "result.txt"
    write_results(out, {"JAPAN": 250.0, "CHINA": 1000.0})
    assert out.read_text() == "CHINA | 1000\nJAPAN | 250\n"
    printed = capsys.readouterr().out.splitlines()
    assert printed == ["Nation: CHINA, Revenue: 1000", "Nation: JAPAN, Revenue: 250"]


def test_write_results_unwritable_path(tmp_path):
    with pytest.raises(Query5Error):
        write_results(tmp_path, {"CHINA": 1.0})