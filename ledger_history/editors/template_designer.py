"""
Invoice Template Designer

The designer modal keeps its own HistoryEngine so undo inside the modal
never reaches into company-data history, and the history is discarded when
the modal closes.

Two ways of building actions are used here and kept apart:
- Single-field edits (color pickers, the border slider) are coalescing
  edits keyed per field, so a drag gesture is one history entry.
- Switching style changes six colors at once and is one hand-built action
  restoring all of them together, never six coalesced entries.
"""

from typing import Any, Callable, Optional

import structlog

from ledger_history.history import HistoryEngine, RecordingGuard
from ledger_history.models.action import ActionBuilder, ReversibleAction
from ledger_history.models.template import STYLE_PRESETS, InvoiceTemplate, TemplateStyle


logger = structlog.get_logger(__name__)


class TemplateDesigner:
    """Edits one InvoiceTemplate with modal-scoped undo."""

    def __init__(
        self,
        template: Optional[InvoiceTemplate] = None,
        engine: Optional[HistoryEngine] = None,
        persist: Optional[Callable[[InvoiceTemplate], None]] = None,
    ):
        self._engine = engine or HistoryEngine.from_settings(scope="template_designer")
        self._guard = RecordingGuard()
        self._persist = persist
        self._template = InvoiceTemplate(name="New template")
        if template is not None:
            self.load_template(template)

    @property
    def template(self) -> InvoiceTemplate:
        return self._template

    @property
    def engine(self) -> HistoryEngine:
        return self._engine

    @property
    def has_unsaved_changes(self) -> bool:
        return not self._engine.is_at_saved_state

    def load_template(self, template: InvoiceTemplate) -> None:
        """Edit a copy of `template`, starting with empty history."""
        with self._guard.suppressed():
            self._template = template.model_copy()
        self._engine.clear()

    # -------------------------------------------------------------------------
    # Single-field edits (coalescing)
    # -------------------------------------------------------------------------

    def set_primary_color(self, color: str) -> None:
        self._set_field("primary_color", "PrimaryColor", "primary color", color)

    def set_accent_color(self, color: str) -> None:
        self._set_field("accent_color", "AccentColor", "accent color", color)

    def set_border_width(self, width: float) -> None:
        self._set_field("border_width", "BorderWidth", "border width", width)

    def set_footer_text(self, text: str) -> None:
        self._set_field("footer_text", "FooterText", "footer text", text)

    def set_show_logo(self, show: bool) -> None:
        """Toggle the logo. Toggles never coalesce."""
        template = self._template
        old = template.show_logo
        if old == show:
            return
        template.show_logo = show
        self._guard.record(self._engine, ActionBuilder.property_change(
            "Show logo" if show else "Hide logo",
            lambda value: setattr(template, "show_logo", value),
            old,
            show,
        ))

    # -------------------------------------------------------------------------
    # Multi-field edit
    # -------------------------------------------------------------------------

    def apply_style(self, style: TemplateStyle) -> None:
        """Switch style and apply its color preset as one undoable edit."""
        template = self._template
        new_values: dict[str, Any] = {"style": style, **STYLE_PRESETS[style]}
        old_values = {name: getattr(template, name) for name in new_values}
        if old_values == new_values:
            return

        self._apply_values(template, new_values)
        self._guard.record(self._engine, ReversibleAction(
            description=f"Apply {style.value} style",
            undo=lambda: self._apply_values(template, old_values),
            redo=lambda: self._apply_values(template, new_values),
        ))

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def save(self) -> InvoiceTemplate:
        """Persist the template and mark the checkpoint."""
        saved = self._template.model_copy()
        if self._persist is not None:
            self._persist(saved)
        self._engine.mark_saved()
        logger.info("template_saved", template=saved.name)
        return saved

    def close(self, force: bool = False) -> bool:
        """
        Close the designer.

        Returns False without closing when there are unsaved changes and
        `force` is not set; the caller should ask the user to confirm.
        """
        if self.has_unsaved_changes and not force:
            return False
        self._engine.clear()
        return True

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _set_field(self, field: str, key_name: str, label: str, value: Any) -> None:
        template = self._template
        old = getattr(template, field)
        if old == value:
            return

        # Assignment is validated; an invalid value raises before recording.
        setattr(template, field, value)
        self._guard.record(self._engine, ActionBuilder.coalescing_edit(
            f"Change {label}",
            f"template:{key_name}",
            lambda v: setattr(template, field, v),
            old,
            getattr(template, field),
        ))

    def _apply_values(self, template: InvoiceTemplate, values: dict[str, Any]) -> None:
        # Dependent fields are set together; nothing here may record.
        with self._guard.suppressed():
            for name, value in values.items():
                setattr(template, name, value)
