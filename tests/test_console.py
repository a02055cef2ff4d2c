"""Tests for console output module."""

import pandas as pd
import pytest

from coinfeed.models import MarketRecord


@pytest.fixture
def records():
    return [
        MarketRecord(id='bitcoin', symbol='BTC', name='Bitcoin', price=65000.5,
                     market_cap=1.28e12, total_volume=3.1e10, sparkline=[1.0, 2.0, 3.0]),
        MarketRecord(id='ethereum', symbol='ETH', name='Ethereum', price=3200.0),
    ]


class TestConsoleImports:
    def test_print_import(self):
        from coinfeed.console import print
        assert callable(print)

    def test_console_import(self):
        from coinfeed.console import console
        from rich.console import Console
        assert isinstance(console, Console)

    def test_table_import(self):
        from coinfeed.console import Table
        from rich.table import Table as RichTable
        assert Table is RichTable


class TestToFrame:
    def test_one_row_per_record(self, records):
        from coinfeed.console import to_frame, FRAME_COLUMNS

        df = to_frame(records)

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == FRAME_COLUMNS
        assert list(df['symbol']) == ['BTC', 'ETH']
        assert df.loc[0, 'price'] == 65000.5
        assert df.loc[0, 'sparkline'] == [1.0, 2.0, 3.0]

    def test_empty(self):
        from coinfeed.console import to_frame

        df = to_frame([])

        assert df.empty
        assert 'symbol' in df.columns


class TestRichTableOutput:
    def test_market_table_rows(self, records):
        from coinfeed.console import market_table

        table = market_table(records, title="gecko / usd")

        assert table.row_count == 2
        assert len(table.columns) == 6

    def test_show_market_prints_symbols(self, records):
        from coinfeed.console import console, show_market

        with console.capture() as capture:
            show_market(records, title="gecko / usd")

        output = capture.get()
        assert 'BTC' in output
        assert 'Ethereum' in output
