"""Sales and expense entry commands."""

import csv
import mimetypes
from dataclasses import replace
from pathlib import Path

import click
from fijibooks.domain.access import Capability
from fijibooks.domain.categories import suggested_categories
from fijibooks.domain.entities import EntryType
from fijibooks.domain.entry import EntryDraft
from fijibooks.domain.errors import DomainError
from fijibooks.domain.ledger import by_date_range, by_type
from fijibooks.domain.receipts import ReceiptScanError, apply_scan
from fijibooks.ocr.gemini import create_receipt_scanner
from fijibooks.utils.date_parser import parse_date
from fijibooks.cli.date_filters import period_options, resolve_cli_date_range
from fijibooks.cli.error_handling import handle_domain_error
from fijibooks.cli.session_guard import (
    active_company_or_exit,
    format_money,
    require_user_or_exit,
)

TYPE_CHOICES = {"income": EntryType.INCOME, "expense": EntryType.EXPENSE}


def _entry_type_option(required: bool = True):
    return click.option(
        "--type",
        "entry_type",
        type=click.Choice(list(TYPE_CHOICES), case_sensitive=False),
        required=required,
        help="income (sale) or expense (purchase)",
    )


def _echo_draft(draft: EntryDraft, company) -> None:
    blank = "(not set)"
    click.echo(f"  Type: {draft.type.value}")
    click.echo(f"  Date: {draft.date}")
    click.echo(f"  Ref #: {draft.invoice_no or blank}")
    if draft.counterparty_id:
        click.echo(f"  Contact ID: {draft.counterparty_id}")
    else:
        contact = draft.new_counterparty_name or blank
        if draft.new_counterparty_tin:
            contact = f"{contact} (TIN: {draft.new_counterparty_tin})"
        click.echo(f"  New contact: {contact}")
    click.echo(f"  Category: {draft.category}")
    click.echo(f"  Net: {format_money(draft.subtotal) if draft.subtotal is not None else blank}")
    click.echo(
        f"  VAT ({company.vat_rate * 100:.1f}%): "
        f"{format_money(draft.vat_amount) if draft.vat_amount is not None else blank}"
    )
    click.echo(
        f"  Total: {format_money(draft.total_amount) if draft.total_amount is not None else blank}"
    )


def _save_draft(ctx, draft: EntryDraft) -> None:
    bookkeeper = ctx.obj["bookkeeper"]
    contacts_before = len(bookkeeper.state.contacts)
    try:
        state = bookkeeper.add_entry(draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    entry = state.entries[0]
    contact = bookkeeper.get_contact(entry.counterparty_id)
    label = "sales invoice" if entry.type == EntryType.INCOME else "purchase expense"
    click.echo(f"Saved {label} {entry.invoice_no} (ID: {entry.id})")
    click.echo(f"  Date: {entry.date}")
    if contact is not None:
        click.echo(f"  Contact: {contact.name}")
        if len(state.contacts) > contacts_before:
            click.echo(f"  Created new contact '{contact.name}' (ID: {contact.id})")
    click.echo(f"  Net: {format_money(entry.subtotal)}")
    click.echo(f"  VAT: {format_money(entry.vat_amount)}")
    click.echo(f"  Total: {format_money(entry.total_amount)}")


@click.group()
def entry_group():
    """Record and list sales and expenses."""
    pass


@entry_group.command("add")
@_entry_type_option()
@click.option("--invoice", required=True, help="Invoice or reference number")
@click.option("--date", "entry_date", default="today", help="Document date (YYYY-MM-DD or 'today')")
@click.option("--total", help="Grand total including VAT")
@click.option("--net", help="Net amount excluding VAT")
@click.option("--contact", "contact_id", help="Existing customer/supplier ID")
@click.option("--new-contact", help="Name of a new customer/supplier")
@click.option("--new-tin", default="", help="TIN of the new customer/supplier")
@click.option("--category", help="Category (see 'fijibooks categories')")
@click.option("--description", help="Description")
@click.pass_context
def add_entry(
    ctx,
    entry_type: str,
    invoice: str,
    entry_date: str,
    total: str | None,
    net: str | None,
    contact_id: str | None,
    new_contact: str | None,
    new_tin: str,
    category: str | None,
    description: str | None,
):
    """Record a sale or expense. Give either --total or --net; VAT is worked out.

    Examples:
        fijibooks entry add --type income --invoice INV-001 --total 112.50 --contact 3f2a9c1d0
        fijibooks entry add --type expense --invoice R-77 --net 200 --new-contact "Energy Fiji Limited"
    """
    require_user_or_exit(ctx, Capability.RECORD)
    company = active_company_or_exit(ctx)

    if (total is None) == (net is None):
        click.echo("Error: Give exactly one of --total or --net.", err=True)
        ctx.exit(1)
    if contact_id and new_contact:
        click.echo("Error: Use either --contact or --new-contact, not both.", err=True)
        ctx.exit(1)

    try:
        doc_date = parse_date(entry_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    draft = EntryDraft.blank(TYPE_CHOICES[entry_type.lower()], on=doc_date)
    draft = replace(
        draft,
        invoice_no=invoice,
        counterparty_id=contact_id,
        new_counterparty_name=new_contact or "",
        new_counterparty_tin=new_tin,
        category=category or draft.category,
        description=description,
    )
    if total is not None:
        draft = draft.with_total(total, company.vat_rate)
    else:
        draft = draft.with_subtotal(net, company.vat_rate)

    _save_draft(ctx, draft)


@entry_group.command("scan")
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_entry_type_option()
@click.option("--invoice", help="Override the scanned reference number")
@click.option("--total", help="Override the scanned grand total")
@click.option("--contact", "contact_id", help="Attach to an existing contact instead of the scanned name")
@click.option("--category", help="Override the suggested category")
@click.option("--yes", "-y", is_flag=True, help="Save without asking for confirmation")
@click.pass_context
def scan_entry(
    ctx,
    image: Path,
    entry_type: str,
    invoice: str | None,
    total: str | None,
    contact_id: str | None,
    category: str | None,
    yes: bool,
):
    """Pre-fill an entry from a receipt photo, review it, then save.

    Requires GEMINI_API_KEY. Nothing is saved if the scan fails or the
    entry is not confirmed.

    Examples:
        fijibooks entry scan receipt.jpg --type expense
        fijibooks entry scan invoice.png --type income --total 450.00
    """
    require_user_or_exit(ctx, Capability.RECORD)
    company = active_company_or_exit(ctx)
    kind = TYPE_CHOICES[entry_type.lower()]

    draft = EntryDraft.blank(kind)
    scanner_factory = ctx.obj.get("scanner_factory", create_receipt_scanner)
    try:
        scanner = scanner_factory()
        mime_type = mimetypes.guess_type(image.name)[0] or "image/jpeg"
        scan = scanner.scan(image.read_bytes(), kind, suggested_categories(kind), mime_type=mime_type)
    except ReceiptScanError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("Scan failed. Manual entry required: use 'fijibooks entry add'.", err=True)
        ctx.exit(1)

    draft = apply_scan(draft, scan, company.vat_rate)
    if invoice:
        draft = replace(draft, invoice_no=invoice)
    if total is not None:
        draft = draft.with_total(total, company.vat_rate)
    if contact_id:
        draft = replace(draft, counterparty_id=contact_id)
    if category:
        draft = replace(draft, category=category)

    click.echo("Scanned details:")
    _echo_draft(draft, company)

    if draft.total_amount is None:
        click.echo("Error: No total found on the receipt. Re-run with --total.", err=True)
        ctx.exit(1)

    if not yes and not click.confirm("Save this entry?"):
        click.echo("Discarded.")
        return

    _save_draft(ctx, draft)


@entry_group.command("list")
@_entry_type_option(required=False)
@period_options
@click.pass_context
def list_entries(
    ctx,
    entry_type: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
):
    """List the active company's entries, most recent first."""
    kind = TYPE_CHOICES[entry_type.lower()] if entry_type else None
    if kind == EntryType.INCOME:
        require_user_or_exit(ctx, Capability.INCOME)
    elif kind == EntryType.EXPENSE:
        require_user_or_exit(ctx, Capability.EXPENSE)
    else:
        require_user_or_exit(ctx, Capability.INCOME)
        require_user_or_exit(ctx, Capability.EXPENSE)
    company = active_company_or_exit(ctx)
    bookkeeper = ctx.obj["bookkeeper"]

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
            "last-year": last_year,
        },
    )

    entries = bookkeeper.company_entries(company.id)
    if kind is not None:
        entries = by_type(entries, kind)
    entries = by_date_range(entries, start, end)

    title = {
        EntryType.INCOME: "Sales Ledger",
        EntryType.EXPENSE: "Expense Ledger",
        None: "Ledger",
    }[kind]
    click.echo(f"\n{title} - {company.name}")

    if not entries:
        click.echo("No records found for this period.")
        return

    click.echo("-" * 100)
    click.echo(
        f"{'Date':<12} {'Type':<8} {'Ref #':<14} {'Contact':<24} {'Net':>12} {'VAT':>12} {'Total':>12}"
    )
    click.echo("-" * 100)
    for e in entries:
        contact = bookkeeper.get_contact(e.counterparty_id)
        contact_name = (contact.name if contact else e.counterparty_id)[:24]
        click.echo(
            f"{str(e.date):<12} {e.type.value:<8} {e.invoice_no[:14]:<14} {contact_name:<24} "
            f"{e.subtotal:>12,.2f} {e.vat_amount:>12,.2f} {e.total_amount:>12,.2f}"
        )
    click.echo("-" * 100)
    click.echo(f"{len(entries)} record(s)")


@entry_group.command("export")
@click.option("--output", "-o", type=click.File("w", encoding="utf-8"), default="-", help="CSV file (default stdout)")
@period_options
@click.pass_context
def export_entries(
    ctx,
    output,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
):
    """Export the active company's entries as CSV."""
    require_user_or_exit(ctx, Capability.REPORTS)
    company = active_company_or_exit(ctx)
    bookkeeper = ctx.obj["bookkeeper"]

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
            "last-year": last_year,
        },
    )
    entries = by_date_range(bookkeeper.company_entries(company.id), start, end)

    writer = csv.writer(output)
    writer.writerow(
        ["date", "type", "invoice_no", "contact", "tin", "category", "net", "vat", "total", "description"]
    )
    # Oldest first reads naturally in a spreadsheet
    for e in reversed(entries):
        contact = bookkeeper.get_contact(e.counterparty_id)
        writer.writerow(
            [
                e.date.isoformat(),
                e.type.value,
                e.invoice_no,
                contact.name if contact else "",
                contact.tin if contact else "",
                e.category,
                f"{e.subtotal:.2f}",
                f"{e.vat_amount:.2f}",
                f"{e.total_amount:.2f}",
                e.description or "",
            ]
        )


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
