"""Presenter adapters that render decoded sessions as tables."""

from dialysis_log.adapters.presenters.html_presenter import HTMLTablePresenter
from dialysis_log.adapters.presenters.table_presenter import TablePresenter

__all__ = ["HTMLTablePresenter", "TablePresenter"]
