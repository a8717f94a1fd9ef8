"""Terminal table presenter using Rich."""

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from dialysis_log.domain.enums import PassFail
from dialysis_log.domain.ports import PresenterPort
from dialysis_log.domain.session_record import ConversionSession

PASS_BADGE = ("✓ P", "bold green")
FAIL_BADGE = ("✗ F", "bold red")


def prs_badge(pass_fail: PassFail) -> Text:
    """Render the pass/fail outcome as one of two styled badges."""
    label, style = PASS_BADGE if pass_fail is PassFail.PASS else FAIL_BADGE
    return Text(label, style=style)


class TablePresenter(PresenterPort):
    """Render a session as a Rich table.

    Parameters:
        console: Console to print to (default: a new stdout console)
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, session: ConversionSession, limit: Optional[int] = None) -> Table:
        """Build the table for a session.

        Parameters:
            session: Decoded session
            limit: Show at most this many records (default: all)

        Returns:
            Table: Rows in file order
        """
        records = session.records if limit is None else session.records[:max(limit, 0)]

        caption = f"{session.record_count:,} records from {session.filename}"
        if len(records) < session.record_count:
            caption += f" (showing first {len(records):,})"

        table = Table(title="Dialysis Sessions", caption=caption, header_style="bold")
        table.add_column("Date", style="cyan")
        table.add_column("Time")
        table.add_column("Patient ID", style="magenta")
        table.add_column("Patient Name")
        table.add_column("Dialyzer ID")
        table.add_column("Volume", justify="right")
        table.add_column("PRS", justify="center")

        for record in records:
            table.add_row(
                record.date,
                record.time,
                Text(record.patient_id),
                Text(record.patient_name),
                Text(record.dialyzer_id),
                f"{record.volume:,}",
                prs_badge(record.pass_fail),
            )

        return table

    def show(self, session: ConversionSession, limit: Optional[int] = None) -> None:
        """Print the session table to the console."""
        self.console.print(self.render(session, limit=limit))
