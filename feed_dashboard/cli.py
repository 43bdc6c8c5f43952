"""儀表板指令列介面（唯讀，直接連資料來源）。"""

from __future__ import annotations

from typing import Optional

import typer

from feed_dashboard.analytics.daily_active import compute_daily_active_users, summarize_daily_active
from feed_dashboard.analytics.models import FeedStatus
from feed_dashboard.analytics.windows import RecencyWindow, window_label
from feed_dashboard.config.settings import ConfigurationError, get_settings
from feed_dashboard.feeds.errors import FeedError
from feed_dashboard.feeds.reader import FeedReader
from feed_dashboard.feeds.timestamps import NORMALIZED_DATE_FIELD
from feed_dashboard.pipelines.dashboard_pipeline import DashboardPipeline
from feed_dashboard.sources.base import FeedSource
from feed_dashboard.sources.duckdb_source import DuckDBSource
from feed_dashboard.sources.factory import create_source

app = typer.Typer(help="使用者活動儀表板工具：列出 feed 表、檢視資料、計算活躍統計。")

_DUCKDB_HELP = "改讀本機 DuckDB 檔案（唯讀），不連 MySQL"


def _open_source(duckdb_path: Optional[str]) -> FeedSource:
    """開啟資料來源；設定錯誤（例如缺 DB_PASSWORD）直接結束程式。"""

    if duckdb_path:
        return DuckDBSource(db_path=duckdb_path, read_only=True)
    try:
        return create_source(get_settings())
    except ConfigurationError as exc:
        typer.echo(f"設定錯誤：{exc}", err=True)
        raise typer.Exit(code=1) from exc


def _parse_window(raw: str) -> RecencyWindow:
    try:
        return RecencyWindow(raw)
    except ValueError as exc:
        choices = ", ".join(w.value for w in RecencyWindow)
        raise typer.BadParameter(f"時間範圍需為：{choices}") from exc


@app.command("list-tables")
def list_tables(duckdb_path: Optional[str] = typer.Option(None, "--duckdb", help=_DUCKDB_HELP)) -> None:
    """列出所有以 _new_feed 結尾的資料表。"""

    with _open_source(duckdb_path) as source:
        try:
            tables = FeedReader(source).list_tables()
        except FeedError as exc:
            typer.echo(f"錯誤：{exc.message}", err=True)
            raise typer.Exit(code=1) from exc

    for name in tables:
        typer.echo(name)
    typer.echo(f"共 {len(tables)} 張資料表")


@app.command("show-table")
def show_table(
    table_name: str = typer.Argument(..., help="資料表名稱，需以 _new_feed 結尾"),
    limit: int = typer.Option(10, min=1, help="顯示前 N 筆（最新的在前）"),
    duckdb_path: Optional[str] = typer.Option(None, "--duckdb", help=_DUCKDB_HELP),
) -> None:
    """顯示單一 feed 表的最新資料（時間已轉為洛杉磯時區）。"""

    with _open_source(duckdb_path) as source:
        try:
            table = FeedReader(source).read_table(table_name)
        except FeedError as exc:
            typer.echo(f"錯誤：{exc.message}", err=True)
            raise typer.Exit(code=1) from exc

    columns = list(table.columns)
    if NORMALIZED_DATE_FIELD not in columns and any(NORMALIZED_DATE_FIELD in row for row in table.rows):
        columns.append(NORMALIZED_DATE_FIELD)

    typer.echo(f"{table.table_name}：{table.row_count} 筆，時間欄位 {table.timestamp_column or '（無）'}")
    typer.echo(" | ".join(columns))
    for row in table.rows[:limit]:
        typer.echo(" | ".join("" if row.get(col) is None else str(row.get(col)) for col in columns))


@app.command("summary")
def summary(
    range_: str = typer.Option("month", "--range", help="week / month / 3months / 6months / year / all"),
    duckdb_path: Optional[str] = typer.Option(None, "--duckdb", help=_DUCKDB_HELP),
) -> None:
    """讀取全部 feed 表，輸出整體統計與每日活躍使用者。"""

    window = _parse_window(range_)
    with _open_source(duckdb_path) as source:
        try:
            snapshot = DashboardPipeline(FeedReader(source)).run()
        except FeedError as exc:
            typer.echo(f"錯誤：{exc.message}", err=True)
            raise typer.Exit(code=1) from exc

    overall = snapshot.overall
    typer.echo(f"使用者：{overall.total_users}，互動：{overall.total_interactions}，平均每人：{overall.avg_per_user}")
    for idx, entry in enumerate(overall.most_active, start=1):
        typer.echo(f"  {idx}. {entry.user_id}：{entry.total_interactions}")

    buckets = compute_daily_active_users(snapshot.user_stats, window=window)
    total = sum(1 for s in snapshot.user_stats if s.status == FeedStatus.SUCCESS)
    dau = summarize_daily_active(buckets, total)
    typer.echo(
        f"[{window_label(window)}] 平均 DAU：{dau.average_dau}，最高：{dau.peak_dau}，"
        f"天數：{dau.days_tracked}，活躍比例：{dau.engagement_rate}%"
    )
    for bucket in buckets:
        typer.echo(f"  {bucket.date}  {bucket.active_users}/{bucket.total_users}")

    for stats in snapshot.user_stats:
        if stats.error_message:
            typer.echo(f"  ! {stats.table_name}：{stats.error_message}", err=True)


if __name__ == "__main__":
    app()
