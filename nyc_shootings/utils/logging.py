# Logging utilities for pipeline steps.

from typing import List, Dict, Any
import pandas as pd
from rich.console import Console
from rich.table import Table

console = Console()

pipeline_log: List[Dict[str, Any]] = []


def log_step(step_name: str, df: pd.DataFrame) -> None:
    """
    Log pipeline step name + shape.

    Parameters:
        step_name: Description of the pipeline step
        df: DataFrame produced by the step
    """
    if not isinstance(df, pd.DataFrame) or df.empty:
        rows_val: Any = "N/A"
        cols_val: Any = "N/A"
    else:
        rows_val = int(df.shape[0])
        cols_val = int(df.shape[1])

    pipeline_log.append({"step": step_name, "rows": rows_val, "cols": cols_val})
    rows_str = f"{rows_val:,}" if isinstance(rows_val, int) else rows_val
    console.print(f"[green]{step_name}[/green] [cyan]shape: {rows_str} x {cols_val}[/cyan]")


def show_pipeline_table() -> None:
    """Pretty-print pipeline log as a table."""
    if not pipeline_log:
        console.print("[red]No pipeline steps logged yet.[/red]")
        return

    table = Table(title="Data Pipeline Summary", show_lines=True)
    table.add_column("Step", style="cyan", no_wrap=True)
    table.add_column("Rows", style="green")
    table.add_column("Cols", style="yellow")

    for entry in pipeline_log:
        rows_val = entry["rows"]
        rows_str = f"{rows_val:,}" if isinstance(rows_val, int) else str(rows_val)
        table.add_row(entry["step"], rows_str, str(entry["cols"]))

    console.print(table)


def show_frame(title: str, df: pd.DataFrame, float_format: str = "{:,.2f}") -> None:
    """Print a DataFrame as a rich table; NaN cells render as blanks."""
    table = Table(title=title)
    for col in df.columns:
        table.add_column(str(col), justify="right")

    for row in df.itertuples(index=False):
        cells = []
        for value in row:
            if pd.isna(value):
                cells.append("")
            elif isinstance(value, float):
                cells.append(float_format.format(value))
            else:
                cells.append(str(value))
        table.add_row(*cells)

    console.print(table)


def clear_pipeline_log() -> None:
    """Clear the pipeline log."""
    pipeline_log.clear()
