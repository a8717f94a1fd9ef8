"""HTML table presenter.

Renders a session as the results table of the web converter. Text fields come
straight from the device and are escaped before they are placed in markup.
"""

from html import escape
from typing import Optional

from dialysis_log.domain.enums import PassFail
from dialysis_log.domain.ports import PresenterPort
from dialysis_log.domain.session_record import ConversionSession, SessionRecord

PASS_ICON = (
    '<svg fill="none" stroke="currentColor" viewBox="0 0 24 24">'
    '<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" '
    'd="M9 12l2 2 4-4m6 2a9 9 0 11-18 0 9 9 0 0118 0z"></path></svg>'
)
FAIL_ICON = (
    '<svg fill="none" stroke="currentColor" viewBox="0 0 24 24">'
    '<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" '
    'd="M10 14l2-2m0 0l2-2m-2 2l-2-2m2 2l2 2m7-2a9 9 0 11-18 0 9 9 0 0118 0z"></path></svg>'
)

TABLE_HEADERS = ["Date", "Time", "Patient ID", "Patient Name", "Dialyzer ID", "Volume", "PRS"]


class HTMLTablePresenter(PresenterPort):
    """Render a session as an HTML ``<table>`` fragment."""

    @staticmethod
    def render_badge(pass_fail: PassFail) -> str:
        state, icon = ("pass", PASS_ICON) if pass_fail is PassFail.PASS else ("fail", FAIL_ICON)
        return f'<span class="prs-badge {state}">{icon} {pass_fail.value}</span>'

    def render_row(self, record: SessionRecord) -> str:
        return (
            "<tr>"
            f"<td>{escape(record.date)}</td>"
            f"<td>{escape(record.time)}</td>"
            f'<td class="patient-id">{escape(record.patient_id)}</td>'
            f'<td class="patient-name">{escape(record.patient_name)}</td>'
            f"<td>{escape(record.dialyzer_id)}</td>"
            f'<td class="volume">{record.volume}</td>'
            f"<td>{self.render_badge(record.pass_fail)}</td>"
            "</tr>"
        )

    def render(self, session: ConversionSession, limit: Optional[int] = None) -> str:
        """Render the session.

        Parameters:
            session: Decoded session
            limit: Render at most this many records (default: all)

        Returns:
            str: ``<table>`` markup with a summary caption
        """
        records = session.records if limit is None else session.records[:max(limit, 0)]
        header = "".join(f"<th>{name}</th>" for name in TABLE_HEADERS)
        body = "\n".join(self.render_row(record) for record in records)
        return (
            '<table class="session-table">\n'
            f'<caption><span class="record-count">{session.record_count}</span> records from '
            f'<span class="file-name">{escape(session.filename)}</span></caption>\n'
            f"<thead><tr>{header}</tr></thead>\n"
            f"<tbody>\n{body}\n</tbody>\n"
            "</table>"
        )
