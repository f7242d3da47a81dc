"""
Owner CLI — calendar, reservations, cabins and AI insights.

Extracted from scripts/manage.py so it can be imported and tested
without a terminal.

Usage (from project root):
    python scripts/manage.py                       # this month's calendar
    python scripts/manage.py month 2024-03         # calendar for a given month
    python scripts/manage.py list                  # all reservations by arrival
    python scripts/manage.py add                   # new reservation (interactive)
    python scripts/manage.py edit <id>             # edit a reservation (interactive)
    python scripts/manage.py delete <id>           # delete a reservation (asks first)
    python scripts/manage.py cabins                # list cabins
    python scripts/manage.py rename <id> <name>    # rename a cabin
    python scripts/manage.py image <id> <path>     # set a cabin photo ("-" clears it)
    python scripts/manage.py stats                 # totals
    python scripts/manage.py insights              # AI summary of bookings

Environment variables (all optional):
    CABINBOOK_STORAGE   - "sqlite", "file" or "memory" (default: sqlite)
    DB_PATH             - SQLite database path (default: data/cabinbook.db)
    DATA_DIR            - directory for the file backend (default: data)
    ANTHROPIC_API_KEY   - enables AI insights
    INSIGHTS_MODEL      - Claude model for insights
    PROPERTY_NAME       - shown in prompts (default: Rancho Laguna Ita)
    CABIN_COUNT         - cabins seeded on first run (default: 8)
"""

import logging
import math
import sys
import textwrap
from datetime import date

from cabinbook.adapters.image_encoder import encode_image
from cabinbook.calendar_view import WEEKDAY_HEADERS, build_month, shift_month
from cabinbook.domain.blob_store import StorageError
from cabinbook.domain.models import Reservation, new_reservation_id
from cabinbook.factory import create_insight_requester, create_store
from cabinbook.insights import BookingStats, InsightSession, paragraphs
from cabinbook.store import EntityStore

log = logging.getLogger(__name__)


def _wrap(text: str, width: int = 72, indent: str = "    ") -> str:
    return textwrap.fill(text, width=width, initial_indent=indent, subsequent_indent=indent)


def _short(iso: str) -> str:
    """Format an ISO date as dd/mm."""
    try:
        return date.fromisoformat(iso).strftime("%d/%m")
    except ValueError:
        return iso


def _report_storage(store: EntityStore) -> None:
    if store.storage_warning:
        print(f"WARNING: {store.storage_warning}", file=sys.stderr)


# -- views -------------------------------------------------------------------


def show_month(store: EntityStore, year: int, month: int) -> None:
    view = build_month(year, month, store.reservations)
    prev_y, prev_m = shift_month(year, month, -1)
    next_y, next_m = shift_month(year, month, 1)

    print(f"\n  {view.title}")
    print("  " + "".join(f"{h:<8}" for h in WEEKDAY_HEADERS))
    for week in view.weeks():
        cells = []
        for cell in week:
            if cell is None:
                cells.append(" " * 8)
                continue
            marks = "*" * len(cell.markers)
            if cell.overflow:
                marks += f"+{cell.overflow}"
            cells.append(f"{cell.day.day:>2} {marks:<5}")
        print("  " + "".join(cells))
    print(f"\n  < {prev_y}-{prev_m:02d}    {next_y}-{next_m:02d} >\n")


def list_reservations(store: EntityStore) -> None:
    reservations = store.upcoming()
    if not reservations:
        print("No reservations recorded.")
        return

    print(f"\n{'Arrive':>6}  {'Leave':>6}  {'Cabin':<16}  {'Deposit':>9}  {'Client':<20}  ID")
    print("-" * 100)
    for r in reservations:
        print(
            f"{_short(r.start_date):>6}  {_short(r.end_date):>6}  "
            f"{store.cabin_label(r.cabin_id)[:16]:<16}  ${r.deposit:>8}  "
            f"{r.client_name[:20]:<20}  {r.id}"
        )
        if r.notes:
            print(_wrap(r.notes, indent=" " * 8))
    print()


def list_cabins(store: EntityStore) -> None:
    print(f"\n{'ID':>4}  {'Name':<24}  {'Photo':<5}  Bookings")
    print("-" * 50)
    for c in store.cabins:
        photo = "yes" if c.image else "-"
        print(f"{c.id:>4}  {c.name[:24]:<24}  {photo:<5}  {len(store.reservations_for_cabin(c.id))}")
    print()


def show_stats(store: EntityStore) -> None:
    stats = BookingStats.from_reservations(store.reservations)
    print(f"\n  Total reservations:  {stats.reservation_count}")
    print(f"  Deposits collected:  ${stats.total_deposits}")
    busiest = [store.cabin_label(cid) for cid in stats.busiest_cabins()]
    if busiest:
        print(f"  Busiest cabins:      {', '.join(busiest)}")
    print()


# -- reservation form --------------------------------------------------------


def parse_date(value: str) -> str:
    """Canonical "YYYY-MM-DD" for a typed date. Raises ValueError otherwise."""
    # fromisoformat also takes "20240310" and week dates on 3.11+
    return date.fromisoformat(value.strip()).isoformat()


def _ask(label: str, default: str | None = None, required: bool = True) -> str:
    suffix = f" [{default}]" if default not in (None, "") else ""
    while True:
        value = input(f"{label}{suffix}: ").strip()
        if not value and default is not None:
            return default
        if value or not required:
            return value
        print("  This field is required.")


def _ask_date(label: str, default: str | None = None) -> str:
    while True:
        value = _ask(label, default)
        try:
            return parse_date(value)
        except ValueError:
            print("  Use the YYYY-MM-DD format.")


def _ask_deposit(default: float | None = None) -> float:
    while True:
        value = _ask("Deposit paid ($)", None if default is None else str(default))
        try:
            amount = float(value)
        except ValueError:
            print("  Enter a number, e.g. 5000.")
            continue
        if not math.isfinite(amount) or amount < 0:
            print("  The deposit must be a non-negative amount.")
            continue
        return int(amount) if amount.is_integer() else amount


def _ask_cabin(store: EntityStore, default: int | None = None) -> int:
    for c in store.cabins:
        print(f"  {c.id:>3}  {c.name}")
    ids = {c.id for c in store.cabins}
    fallback = default if default in ids else store.cabins[0].id
    while True:
        value = _ask("Cabin ID", str(fallback))
        if value.isdigit() and int(value) in ids:
            return int(value)
        print("  Pick one of the cabin IDs above.")


def reservation_form(store: EntityStore, existing: Reservation | None = None) -> Reservation:
    """Collect a full reservation. The store must hold at least one cabin."""
    print("\nEdit reservation" if existing else "\nNew reservation")
    cabin_id = _ask_cabin(store, existing.cabin_id if existing else None)
    client = _ask("Client", existing.client_name if existing else None)
    start = _ask_date("Arrival (YYYY-MM-DD)", existing.start_date if existing else None)
    end = _ask_date("Departure (YYYY-MM-DD)", existing.end_date if existing else None)
    deposit = _ask_deposit(existing.deposit if existing else None)
    notes = _ask("Notes (optional)", (existing.notes or "") if existing else "", required=False)

    if end < start:
        print("  Note: departure is before arrival; this booking will not show on the calendar.")

    return Reservation(
        id=existing.id if existing else new_reservation_id(),
        cabin_id=cabin_id,
        client_name=client,
        deposit=deposit,
        start_date=start,
        end_date=end,
        notes=notes or None,
    )


# -- commands ----------------------------------------------------------------


def _no_cabins(store: EntityStore) -> bool:
    if store.cabins:
        return False
    print("No cabins on record; a reservation needs a cabin.")
    return True


def add(store: EntityStore) -> None:
    if _no_cabins(store):
        return
    record = reservation_form(store)
    store.upsert_reservation(record)
    _report_storage(store)
    print(f"Reservation {record.id} saved.")


def edit(store: EntityStore, reservation_id: str) -> None:
    existing = store.get_reservation(reservation_id)
    if not existing:
        print(f"Reservation {reservation_id} not found.")
        return
    if _no_cabins(store):
        return
    store.upsert_reservation(reservation_form(store, existing))
    _report_storage(store)
    print(f"Reservation {reservation_id} updated.")


def delete(store: EntityStore, reservation_id: str) -> None:
    existing = store.get_reservation(reservation_id)
    if not existing:
        print(f"Reservation {reservation_id} not found.")
        return

    answer = input(f"Delete the reservation of {existing.client_name}? [y/N] ").strip().lower()
    if answer not in ("y", "yes"):
        print("Kept.")
        return

    store.delete_reservation(reservation_id)
    _report_storage(store)
    print(f"Reservation {reservation_id} deleted.")


def rename(store: EntityStore, cabin_id: int, name: str) -> None:
    if not store.get_cabin(cabin_id):
        print(f"Cabin #{cabin_id} not found.")
        return
    store.update_cabin(cabin_id, name=name)
    _report_storage(store)
    print(f"Cabin #{cabin_id} renamed to {name!r}.")


def set_image(store: EntityStore, cabin_id: int, path: str) -> None:
    if not store.get_cabin(cabin_id):
        print(f"Cabin #{cabin_id} not found.")
        return
    if path == "-":
        store.update_cabin(cabin_id, image=None)
    else:
        try:
            image = encode_image(path)
        except OSError as exc:
            print(f"Cannot read {path}: {exc}")
            return
        store.update_cabin(cabin_id, image=image)
    _report_storage(store)
    print(f"Cabin #{cabin_id} photo updated.")


async def insights(store: EntityStore) -> None:
    session = InsightSession(create_insight_requester())
    print("Analysing bookings …")
    text = await session.refresh(store.cabins, store.reservations)
    print()
    for p in paragraphs(text):
        print(_wrap(p, indent="  "))
        print()
    show_stats(store)


def _parse_month(arg: str) -> tuple[int, int]:
    year, month = arg.split("-")
    return int(year), int(month)


def open_store() -> EntityStore | None:
    """Build and load the store; None when the configuration is unusable."""
    try:
        store = create_store()
    except (StorageError, ValueError) as exc:
        log.error("Cannot open the reservation store: %s", exc)
        return None
    for warning in store.load().warnings:
        print(f"WARNING: {warning}", file=sys.stderr)
    return store


async def main(argv: list[str] | None = None) -> int:
    """Run one command. Returns the process exit status."""
    store = open_store()
    if store is None:
        return 1

    args = sys.argv[1:] if argv is None else argv
    cmd = args[0] if args else "month"

    if cmd == "month":
        today = date.today()
        try:
            year, month = _parse_month(args[1]) if len(args) >= 2 else (today.year, today.month)
            show_month(store, year, month)
        except ValueError:
            print("Use the YYYY-MM format, e.g. 2024-03.")
    elif cmd == "list":
        list_reservations(store)
    elif cmd == "add":
        add(store)
    elif cmd == "edit" and len(args) >= 2:
        edit(store, args[1])
    elif cmd == "delete" and len(args) >= 2:
        delete(store, args[1])
    elif cmd == "cabins":
        list_cabins(store)
    elif cmd == "rename" and len(args) >= 3 and args[1].isdigit():
        rename(store, int(args[1]), " ".join(args[2:]))
    elif cmd == "image" and len(args) >= 3 and args[1].isdigit():
        set_image(store, int(args[1]), args[2])
    elif cmd == "stats":
        show_stats(store)
    elif cmd == "insights":
        await insights(store)
    else:
        print(__doc__)
    return 0
