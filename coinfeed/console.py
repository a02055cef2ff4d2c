"""Console output utilities for coinfeed."""

from typing import Iterable, Optional

import pandas as pd
from rich import print as rprint
from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

from .models import MarketRecord

console = Console()
print = rprint

FRAME_COLUMNS = ['id', 'symbol', 'name', 'price', 'market_cap', 'total_volume', 'image', 'sparkline']


def to_frame(records: Iterable[MarketRecord]) -> pd.DataFrame:
    """Tabulate records, one row per symbol in input order."""
    rows = [
        {
            'id': r.id,
            'symbol': r.symbol,
            'name': r.name,
            'price': r.price,
            'market_cap': r.market_cap,
            'total_volume': r.total_volume,
            'image': r.image,
            'sparkline': list(r.sparkline),
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def market_table(records: Iterable[MarketRecord], title: Optional[str] = None) -> Table:
    table = Table(title=title, box=SIMPLE)
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Price", justify="right")
    table.add_column("Market Cap", justify="right")
    table.add_column("24h Volume", justify="right")
    table.add_column("7d", justify="right")

    for r in records:
        table.add_row(
            r.symbol,
            r.name,
            f"{r.price:,.6g}",
            f"{r.market_cap:,.0f}",
            f"{r.total_volume:,.0f}",
            str(len(r.sparkline)),
        )
    return table


def show_market(records: Iterable[MarketRecord], title: Optional[str] = None) -> None:
    """Print records as a rich table."""
    console.print(market_table(records, title=title))
