"""
Streamlit Frontend for Ledger History

A small expenses page and invoice template designer wired to history
engines, for trying undo/redo, coalescing and the unsaved-changes
indicator by hand.

DESIGN PRINCIPLES:
1. Every button that edits data goes through an editor, never the book
2. The toolbar state is read from the engine after every rerun
3. Each page owns its own engine, like the desktop app's modals

Run with: streamlit run app/main.py
"""

from datetime import date
from decimal import Decimal

import streamlit as st

from ledger_history.audit import AuditLogger, InMemoryAuditStorage, configure_logging
from ledger_history.config import get_settings, validate_all_settings
from ledger_history.editors import ExpenseBook, ExpenseEditor, TemplateDesigner
from ledger_history.history import HistoryEngine, UndoRedoToolbar
from ledger_history.models import (
    ExpenseCategory,
    InvoiceTemplate,
    PaymentStatus,
    TemplateStyle,
)


# Page configuration
st.set_page_config(
    page_title="Ledger History",
    page_icon="↩️",
    layout="wide",
    initial_sidebar_state="expanded",
)


def get_components():
    """Create per-session editors, engines and toolbars."""
    if "components" not in st.session_state:
        settings = get_settings().history
        audit_storage = InMemoryAuditStorage(retention=settings.audit_retention)
        audit_logger = AuditLogger(storage=audit_storage)

        company_engine = HistoryEngine.from_settings(
            settings, audit_logger=audit_logger, scope="company",
        )
        designer_engine = HistoryEngine.from_settings(
            settings, audit_logger=audit_logger, scope="template_designer",
        )
        st.session_state.components = {
            "expense_editor": ExpenseEditor(ExpenseBook(), company_engine),
            "company_toolbar": UndoRedoToolbar(company_engine),
            "designer": TemplateDesigner(
                InvoiceTemplate(name="Default invoice"), engine=designer_engine,
            ),
            "designer_toolbar": UndoRedoToolbar(designer_engine),
            "audit_storage": audit_storage,
        }
    return st.session_state.components


def render_toolbar(toolbar: UndoRedoToolbar, key: str):
    """Undo/redo buttons, history dropdowns and dirty indicator."""
    toolbar.refresh_history()

    col1, col2, col3, col4, col5 = st.columns([1, 1, 2, 2, 2])
    with col1:
        if st.button("↩️ Undo", key=f"{key}_undo", disabled=not toolbar.can_undo,
                     help=toolbar.undo_tooltip):
            toolbar.undo()
            st.rerun()
    with col2:
        if st.button("↪️ Redo", key=f"{key}_redo", disabled=not toolbar.can_redo,
                     help=toolbar.redo_tooltip):
            toolbar.redo()
            st.rerun()
    with col3:
        if toolbar.undo_items:
            choice = st.selectbox(
                "Undo back to",
                options=toolbar.undo_items,
                format_func=lambda item: item.description,
                key=f"{key}_undo_to",
            )
            if st.button("Undo to here", key=f"{key}_undo_to_btn"):
                toolbar.undo_to(choice.index)
                st.rerun()
    with col4:
        if toolbar.redo_items:
            choice = st.selectbox(
                "Redo up to",
                options=toolbar.redo_items,
                format_func=lambda item: item.description,
                key=f"{key}_redo_to",
            )
            if st.button("Redo to here", key=f"{key}_redo_to_btn"):
                toolbar.redo_to(choice.index)
                st.rerun()
    with col5:
        if toolbar.is_dirty:
            st.warning("Unsaved changes")
        else:
            st.success("All changes saved")


def _record_notes(editor: ExpenseEditor, expense_id):
    # Runs only when the user edits the text area, never on reruns
    editor.set_notes(expense_id, st.session_state[f"notes_{expense_id}"])


def render_expenses_page(editor: ExpenseEditor, toolbar: UndoRedoToolbar):
    st.header("📒 Expenses")
    render_toolbar(toolbar, "company")

    with st.form("add_expense", clear_on_submit=True):
        col1, col2, col3 = st.columns(3)
        with col1:
            supplier = st.text_input("Supplier")
        with col2:
            amount = st.number_input("Amount", min_value=0.0, step=1.0)
        with col3:
            category = st.selectbox(
                "Category",
                options=list(ExpenseCategory),
                format_func=lambda c: c.value.replace("_", " ").title(),
            )
        if st.form_submit_button("➕ Add expense", type="primary"):
            try:
                editor.add_expense(
                    supplier_name=supplier,
                    amount=Decimal(str(amount)).quantize(Decimal("0.01")),
                    category=category,
                    expense_date=date.today(),
                )
                st.rerun()
            except ValueError as e:
                st.error(f"Could not add expense: {e}")

    expenses = editor.book.all()
    if not expenses:
        st.info("No expenses yet. Add one above.")

    for expense in expenses:
        with st.expander(f"{expense.supplier_name} - {expense.total}"):
            # Show the book's notes, which change under undo/redo
            st.session_state[f"notes_{expense.id}"] = expense.notes
            st.text_area(
                "Notes",
                key=f"notes_{expense.id}",
                on_change=_record_notes,
                args=(editor, expense.id),
            )

            col1, col2 = st.columns(2)
            with col1:
                if expense.payment_status != PaymentStatus.PAID:
                    if st.button("✅ Mark paid", key=f"paid_{expense.id}"):
                        editor.set_payment_status(expense.id, PaymentStatus.PAID)
                        st.rerun()
            with col2:
                if st.button("🗑️ Delete", key=f"delete_{expense.id}"):
                    editor.delete_expense(expense.id)
                    st.rerun()

    if st.button("💾 Save", disabled=not editor.has_unsaved_changes):
        editor.save()
        st.rerun()


def render_designer_page(designer: TemplateDesigner, toolbar: UndoRedoToolbar):
    st.header("🎨 Invoice Template Designer")
    render_toolbar(toolbar, "designer")

    template = designer.template
    col1, col2 = st.columns(2)
    with col1:
        style = st.selectbox(
            "Style",
            options=list(TemplateStyle),
            index=list(TemplateStyle).index(template.style),
            format_func=lambda s: s.value.title(),
        )
        if style != template.style:
            designer.apply_style(style)
            st.rerun()

        primary = st.color_picker("Primary color", value=template.primary_color)
        if primary.upper() != template.primary_color.upper():
            designer.set_primary_color(primary.upper())
            st.rerun()

        accent = st.color_picker("Accent color", value=template.accent_color)
        if accent.upper() != template.accent_color.upper():
            designer.set_accent_color(accent.upper())
            st.rerun()
    with col2:
        width = st.slider("Border width", 0.0, 10.0, value=float(template.border_width), step=0.5)
        if width != template.border_width:
            designer.set_border_width(width)
            st.rerun()

        show_logo = st.checkbox("Show logo", value=template.show_logo)
        if show_logo != template.show_logo:
            designer.set_show_logo(show_logo)
            st.rerun()

    if st.button("💾 Save template", disabled=not designer.has_unsaved_changes):
        designer.save()
        st.rerun()


def render_activity_page(audit_storage: InMemoryAuditStorage):
    st.header("🧾 Activity")
    events = audit_storage.get_recent_events(limit=100)
    if not events:
        st.info("No activity yet.")
        return
    st.dataframe(
        [
            {
                "time": e.timestamp.strftime("%H:%M:%S"),
                "scope": e.scope,
                "event": e.event_type.value,
                "description": e.description,
            }
            for e in events
        ],
        use_container_width=True,
    )


def render_settings_page():
    st.header("⚙️ Settings")
    results = validate_all_settings()
    for name, valid in results.items():
        if name.endswith("_error"):
            continue
        if valid:
            st.success(f"✅ {name} - OK")
        else:
            st.error(f"❌ {name} - {results.get(f'{name}_error')}")

    history = get_settings().history
    st.write(f"History limit: {history.history_limit or 'unbounded'}")
    st.write(f"Audit enabled: {history.audit_enabled}")


def main():
    """Main application entry point."""
    configure_logging()
    components = get_components()

    st.sidebar.title("↩️ Ledger History")
    page = st.sidebar.radio(
        "Navigate to:",
        ["📒 Expenses", "🎨 Template Designer", "🧾 Activity", "⚙️ Settings"],
        index=0,
    )

    if page == "📒 Expenses":
        render_expenses_page(components["expense_editor"], components["company_toolbar"])
    elif page == "🎨 Template Designer":
        render_designer_page(components["designer"], components["designer_toolbar"])
    elif page == "🧾 Activity":
        render_activity_page(components["audit_storage"])
    elif page == "⚙️ Settings":
        render_settings_page()


if __name__ == "__main__":
    main()
