#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps one assistant session for the run
- Sends your typed messages through the same ConversationSession the API uses
- Prints decision details (intents, strategy, ready to book) and the reply text
- /book walks the booking form prefilled from the conversation and submits it to the ledger
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from detailerdash.application.exceptions import BookingError  # noqa: E402
from detailerdash.application.use_cases.booking_flow import BookingFlow  # noqa: E402
from detailerdash.core.config import settings  # noqa: E402
from detailerdash.wiring.dependencies import (  # noqa: E402
    get_calendar,
    get_ledger,
    get_service_catalog,
    get_session_registry,
)


def _print_header(session_id: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"session_id: {session_id}")
    print("Type your message and press Enter.")
    print("Commands: /new (clear chat), /book, /appointments, /quit, /help")
    print("-" * 60)


def _ask(prompt: str, default: str = "") -> str:
    suffix = f" [{default}]" if default else ""
    value = input(f"{prompt}{suffix}: ").strip()
    return value or default


def _run_booking(session, business_id: str) -> None:
    flow = BookingFlow(
        ledger=get_ledger(),
        calendar=get_calendar(business_id),
        business_id=business_id,
        business_name=settings.BUSINESS_NAME,
    )
    flow.prefill(session.booking_draft(), date.today())
    form = flow.form

    if form.service is None:
        services = get_service_catalog().list_services(business_id)
        for i, service in enumerate(services, 1):
            print(f"  {i}. {service.name} ({service.display_price}, {service.display_duration})")
        choice = _ask("Service number")
        if choice.isdigit() and 1 <= int(choice) <= len(services):
            form.service = services[int(choice) - 1]
    if form.day is None:
        raw_day = _ask("Day (YYYY-MM-DD)", date.today().isoformat())
        try:
            form.day = date.fromisoformat(raw_day)
        except ValueError:
            print("Invalid date.")
            return

    starts = flow.load_available_slots()
    if not starts:
        print("No open times on that day.")
        return
    for i, start in enumerate(starts, 1):
        print(f"  {i}. {start.strftime('%I:%M %p').lstrip('0')}")
    choice = _ask("Time number", "1")
    if choice.isdigit() and 1 <= int(choice) <= len(starts):
        form.start = starts[int(choice) - 1]

    form.first_name = _ask("First name")
    form.last_name = _ask("Last name")
    form.email = _ask("Email")
    form.phone = _ask("Phone")
    form.vehicle_make = _ask("Vehicle make", form.vehicle_make)
    form.vehicle_model = _ask("Vehicle model", form.vehicle_model)
    form.vehicle_year = _ask("Vehicle year", form.vehicle_year)

    print(flow.confirmation_message())
    if not flow.is_valid or _ask("Confirm? (y/n)", "y").lower() != "y":
        return
    try:
        appointment = flow.book()
    except BookingError as e:
        print(f"ERROR: {e}")
        return
    print(f"Booked: {appointment.list_header_text} ({appointment.display_total}) id={appointment.id}")


def main() -> None:
    business_id = settings.DEFAULT_BUSINESS_ID
    registry = get_session_registry()
    services = get_service_catalog().list_services(business_id)
    handle = registry.create(business_id, settings.BUSINESS_NAME, services)
    session = handle.session
    _print_header(session.session_id)
    print(f"(assistant) {session.messages[0].content}")

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /new  -> clear the chat and the collected booking details")
            print("  /book -> open the booking form prefilled from the chat")
            print("  /appointments -> list this business's upcoming appointments")
            print("  /quit -> exit")
            continue
        if cmd == "/new":
            session.reset()
            print(f"(assistant) {session.messages[0].content}")
            continue
        if cmd == "/book":
            try:
                _run_booking(session, business_id)
            except (EOFError, KeyboardInterrupt):
                print("\nBooking abandoned.")
            continue
        if cmd == "/appointments":
            upcoming = get_ledger().upcoming_for_business(business_id)
            if not upcoming:
                print("(no upcoming appointments)")
            for appointment in upcoming:
                print(
                    f"- {appointment.list_header_text} | {appointment.customer.full_name}"
                    f" | {appointment.vehicle.display_name}"
                )
            continue

        result = session.send(user_text)
        if result is None:
            continue

        print("\n--- Decision ---")
        print(f"intents: {', '.join(sorted(i.value for i in result.intents)) or '-'}")
        print(f"strategy: {result.strategy}")
        print(f"ready_to_book: {result.ready_to_book}")
        if result.suggestions:
            print(f"suggestions: {', '.join(s.name for s in result.suggestions)}")

        print("\n--- Reply ---")
        print(result.reply.content.strip())
        print("-" * 60)


if __name__ == "__main__":
    main()
