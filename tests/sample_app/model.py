"""Model of the sample application."""

from __future__ import annotations

from row_wiring.orm.model import Model


class AppModel(Model):
    pass


class NotAModel:
    pass
