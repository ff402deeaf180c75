"""Command-line front end for the rental booking API."""
import argparse
import getpass
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from .client import RentalClient
from .config import settings
from .dates import days_between, format_date
from .errors import RentalClientError, UnauthorizedError, ValidationError
from .models import Reservation
from .models.maintenance import MAINTENANCE_STATUSES, MAINTENANCE_TYPES
from .roles import ADMIN, DRIVER, landing_path
from .services import DriverForm, filter_reservations
from .workflow import ACTION_LABELS, Action, ReservationController, available_actions, status_change_prompt


def to_plain(obj: Any) -> Any:
    if hasattr(obj, "model_dump"):
        return obj.model_dump(exclude_none=True)
    if isinstance(obj, list):
        return [to_plain(item) for item in obj]
    return obj


def print_json(obj: Any) -> None:
    print(json.dumps(to_plain(obj), indent=2, default=str))


def describe(reservation: Reservation) -> str:
    vehicle = reservation.vehicle.title if reservation.vehicle else reservation.vehicleId
    days = days_between(reservation.pickupDate, reservation.returnDate)
    return (
        f"#{reservation.short_id}  {reservation.status:<10} trip={reservation.tripStatus:<9} "
        f"payment={reservation.paymentStatus:<14} {vehicle}  "
        f"{format_date(reservation.pickupDate)} -> {format_date(reservation.returnDate)} ({days} days)  "
        f"Rs {reservation.totalPrice:,.0f}"
    )


def current_role(client: RentalClient) -> Optional[str]:
    if client.session.user is None and client.session.is_authenticated:
        client.auth.fetch_current_user()
    return client.session.role


def reservations_for_role(client: RentalClient, role: Optional[str]) -> List[Reservation]:
    if role == ADMIN:
        return client.reservations.list_all()
    if role == DRIVER:
        return client.reservations.list_for_driver()
    return client.reservations.list_mine()


def find_reservation(client: RentalClient, reservation_id: str) -> ReservationController:
    role = current_role(client)
    listing = reservations_for_role(client, role)
    matches = [r for r in listing if r.id == reservation_id]
    if not matches:
        matches = [r for r in listing if r.id.startswith(reservation_id)]
    if not matches:
        raise RentalClientError(f"Reservation {reservation_id} not found")
    if len(matches) > 1:
        raise RentalClientError(f"Reservation id {reservation_id} is ambiguous, use more characters")
    return ReservationController(client.reservations, matches[0], role)


def run_action(client: RentalClient, reservation_id: str, action: Action, assume_yes: bool, **payment) -> None:
    controller = find_reservation(client, reservation_id)
    target = {
        Action.CONFIRM: "confirmed",
        Action.COMPLETE: "completed",
        Action.ADMIN_CANCEL: "cancelled",
    }.get(action)
    if target and not assume_yes:
        answer = input(status_change_prompt(controller.reservation, target) + " [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted")
            return
    updated = controller.perform(action, **payment)
    print(f"{ACTION_LABELS[action]}: done")
    print(describe(updated))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Client for the vehicle rental booking API")
    parser.add_argument("--host", default=settings.API_BASE_URL, help="API base URL")
    parser.add_argument("--token-file", default=settings.TOKEN_FILE, help="Where the access token is kept")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Sign in and keep the token")
    login.add_argument("--email", required=True)
    login.add_argument("--password", help="Prompted for when omitted")

    sub.add_parser("logout", help="Sign out")
    sub.add_parser("whoami", help="Show the signed-in user")

    reg = sub.add_parser("register", help="Create an account")
    reg.add_argument("--name", required=True)
    reg.add_argument("--email", required=True)
    reg.add_argument("--phone", required=True)
    reg.add_argument("--password", help="Prompted for when omitted")
    reg.add_argument("--role", default="customer")

    forgot = sub.add_parser("forgot-password", help="Send a password reset link")
    forgot.add_argument("--email", required=True)

    reset = sub.add_parser("reset-password", help="Set a new password from a reset token")
    reset.add_argument("--token", required=True)
    reset.add_argument("--password", help="Prompted for when omitted")

    sub.add_parser("users", help="List all users (admin)")

    vehicles = sub.add_parser("vehicles", help="List or search vehicles")
    vehicles.add_argument("--scope", choices=["available", "all", "company", "customer"], default="available")
    vehicles.add_argument("--make")
    vehicles.add_argument("--model")
    vehicles.add_argument("--min-price", type=float)
    vehicles.add_argument("--max-price", type=float)
    vehicles.add_argument("--year", type=int)
    vehicles.add_argument("--ownership", choices=["Company", "Customer"])

    res = sub.add_parser("reservations", help="List reservations")
    res.add_argument("--scope", choices=["mine", "all", "driver"], help="Defaults to the one for your role")
    res.add_argument("--status", default="all")
    res.add_argument("--search", default="")
    res.add_argument("--json", action="store_true", help="Print full records")

    reserve = sub.add_parser("reserve", help="Book a vehicle")
    reserve.add_argument("--vehicle", required=True)
    reserve.add_argument("--pickup", required=True, help="YYYY-MM-DD")
    reserve.add_argument("--return", dest="return_date", required=True, help="YYYY-MM-DD")
    reserve.add_argument("--pickup-location", required=True)
    reserve.add_argument("--return-location", required=True)
    reserve.add_argument("--driver", help="Driver id; implies a driver is required")
    reserve.add_argument("--notes")

    actions = sub.add_parser("actions", help="Show what you can do with a reservation")
    actions.add_argument("--id", required=True)

    cancel = sub.add_parser("cancel", help="Cancel your pending reservation")
    cancel.add_argument("--id", required=True)

    status = sub.add_parser("set-status", help="Change a reservation's status (admin)")
    status.add_argument("--id", required=True)
    status.add_argument("--status", choices=["confirmed", "completed", "cancelled"], required=True)
    status.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    trip = sub.add_parser("trip", help="Start or end a trip (driver)")
    trip.add_argument("--id", required=True)
    trip.add_argument("--status", choices=["started", "completed"], required=True)

    pay = sub.add_parser("pay", help="Record a payment (admin)")
    pay.add_argument("--id", required=True)
    pay.add_argument("--status", choices=["unpaid", "partially_paid", "paid"], required=True)
    pay.add_argument("--amount")
    pay.add_argument("--receipt")
    pay.add_argument("--date", help="YYYY-MM-DD")
    pay.add_argument("--method", choices=["cash", "card", "bank_transfer", "online"])
    pay.add_argument("--notes")

    inq = sub.add_parser("inquiries", help="List driver inquiries (admin)")
    inq.add_argument("--status", default="all")
    inq.add_argument("--type", default="all")
    inq.add_argument("--priority", default="all")

    respond = sub.add_parser("inquiry-respond", help="Answer an inquiry (admin)")
    respond.add_argument("--id", required=True)
    respond.add_argument("--response", required=True)
    respond.add_argument("--status", default="resolved")

    inq_del = sub.add_parser("inquiry-delete", help="Delete an inquiry")
    inq_del.add_argument("--id", required=True)

    driver = sub.add_parser("add-driver", help="Create a driver account (admin)")
    driver.add_argument("--name", required=True)
    driver.add_argument("--email", required=True)
    driver.add_argument("--phone", required=True)
    driver.add_argument("--age", required=True, type=int)
    driver.add_argument("--address", required=True)
    driver.add_argument("--front", required=True, type=Path, help="Front image of the license")
    driver.add_argument("--back", required=True, type=Path, help="Back image of the license")
    driver.add_argument("--daily-rate", type=float)
    driver.add_argument("--experience", type=int)

    sub.add_parser("my-vehicles", help="Vehicles you have submitted for approval")

    apps = sub.add_parser("applications", help="List vehicle applications (admin)")
    apps.add_argument("--status", choices=["all", "pending", "approved", "rejected"], default="all")

    approve = sub.add_parser("application-approve", help="Approve a vehicle application (admin)")
    approve.add_argument("--id", required=True)

    reject = sub.add_parser("application-reject", help="Reject a vehicle application (admin)")
    reject.add_argument("--id", required=True)

    profile = sub.add_parser("update-profile", help="Edit your name, email, phone or picture")
    profile.add_argument("--name", required=True)
    profile.add_argument("--email", required=True)
    profile.add_argument("--phone", required=True)
    profile.add_argument("--picture", type=Path)

    maint = sub.add_parser("maintenance", help="List maintenance records")
    maint.add_argument("--status", default="all")
    maint.add_argument("--mine", action="store_true", help="Only your assignments (technician)")

    sched = sub.add_parser("maintenance-schedule", help="Schedule maintenance for a vehicle (admin)")
    sched.add_argument("--vehicle", required=True)
    sched.add_argument("--date", required=True, help="YYYY-MM-DD")
    sched.add_argument("--type", required=True, choices=MAINTENANCE_TYPES)
    sched.add_argument("--description", required=True)
    sched.add_argument("--cost")
    sched.add_argument("--technician")

    work = sub.add_parser("maintenance-update", help="Report progress on an assignment (technician)")
    work.add_argument("--id", required=True)
    work.add_argument("--status", choices=MAINTENANCE_STATUSES)
    work.add_argument("--notes")
    work.add_argument("--report")
    work.add_argument("--actual-cost")
    work.add_argument("--parts-cost")
    work.add_argument("--labor-cost")
    work.add_argument("--additional-costs")
    work.add_argument("--bill", type=Path, action="append", default=[])
    work.add_argument("--report-file", type=Path, action="append", default=[])

    return parser


def dispatch(client: RentalClient, args: argparse.Namespace) -> None:
    if args.command == "login":
        password = args.password or getpass.getpass("Password: ")
        result = client.auth.login(args.email, password)
        if result.requires_verification:
            print(result.message or "Verification code sent to your email")
            return
        user = result.user or client.auth.fetch_current_user()
        print(f"Signed in as {user.name} ({user.role})" if user else "Signed in")
        print(f"Home: {landing_path(user)}")
    elif args.command == "logout":
        client.auth.logout()
        print("Signed out")
    elif args.command == "whoami":
        if not client.auth.check_or_refresh():
            print("Not signed in")
            sys.exit(1)
        print_json(client.auth.fetch_current_user())
    elif args.command == "register":
        password = args.password or getpass.getpass("Password: ")
        print_json(client.auth.register(args.name, args.email, args.phone, password, args.role))
    elif args.command == "forgot-password":
        print_json(client.auth.forgot_password(args.email))
    elif args.command == "reset-password":
        password = args.password or getpass.getpass("New password: ")
        confirm = args.password or getpass.getpass("Confirm password: ")
        print_json(client.auth.reset_password(args.token, password, confirm))
    elif args.command == "users":
        print_json(client.auth.list_users())
    elif args.command == "vehicles":
        filters = dict(
            make=args.make,
            model=args.model,
            min_price=args.min_price,
            max_price=args.max_price,
            year=args.year,
            ownership=args.ownership,
        )
        if any(v is not None for v in filters.values()):
            print_json(client.vehicles.search(**filters))
        elif args.scope == "all":
            print_json(client.vehicles.list_all())
        elif args.scope == "company":
            print_json(client.vehicles.list_company())
        elif args.scope == "customer":
            print_json(client.vehicles.list_customer())
        else:
            print_json(client.vehicles.list_available())
    elif args.command == "reservations":
        scope = args.scope
        if scope is None:
            role = current_role(client)
            scope = {ADMIN: "all", DRIVER: "driver"}.get(role, "mine")
        listing = {
            "all": client.reservations.list_all,
            "driver": client.reservations.list_for_driver,
            "mine": client.reservations.list_mine,
        }[scope]()
        listing = filter_reservations(listing, args.status, args.search)
        if args.json:
            print_json(listing)
        elif not listing:
            print("No reservations")
        else:
            for reservation in listing:
                print(describe(reservation))
    elif args.command == "reserve":
        reservation = client.reservations.create(
            args.vehicle,
            args.pickup,
            args.return_date,
            args.pickup_location,
            args.return_location,
            driver_required=bool(args.driver),
            driver_id=args.driver,
            notes=args.notes,
        )
        print(describe(reservation))
    elif args.command == "actions":
        controller = find_reservation(client, args.id)
        print(describe(controller.reservation))
        offered = available_actions(controller.reservation, controller.role)
        print("Actions: " + (", ".join(ACTION_LABELS[a] for a in offered) if offered else "none"))
    elif args.command == "cancel":
        run_action(client, args.id, Action.CANCEL, assume_yes=True)
    elif args.command == "set-status":
        action = {"confirmed": Action.CONFIRM, "completed": Action.COMPLETE, "cancelled": Action.ADMIN_CANCEL}[args.status]
        run_action(client, args.id, action, assume_yes=args.yes)
    elif args.command == "trip":
        action = Action.START_TRIP if args.status == "started" else Action.END_TRIP
        run_action(client, args.id, action, assume_yes=True)
    elif args.command == "pay":
        run_action(
            client,
            args.id,
            Action.RECORD_PAYMENT,
            assume_yes=True,
            payment_status=args.status,
            amount_paid=args.amount,
            receipt_number=args.receipt,
            payment_date=args.date,
            payment_method=args.method,
            notes=args.notes,
        )
    elif args.command == "inquiries":
        print_json(client.inquiries.list_admin(args.status, args.type, args.priority))
    elif args.command == "inquiry-respond":
        print_json(client.inquiries.respond(args.id, args.response, args.status))
    elif args.command == "inquiry-delete":
        print_json(client.inquiries.delete(args.id))
    elif args.command == "add-driver":
        form = DriverForm(
            name=args.name,
            email=args.email,
            phone=args.phone,
            age=args.age,
            address=args.address,
            front_license=args.front.read_bytes(),
            back_license=args.back.read_bytes(),
            daily_rate=args.daily_rate,
            years_of_experience=args.experience,
            front_filename=args.front.name,
            back_filename=args.back.name,
        )
        print_json(client.drivers.create(form))
    elif args.command == "my-vehicles":
        print_json(client.vehicles.my_vehicles())
    elif args.command == "applications":
        print_json(client.vehicles.list_applications(args.status))
    elif args.command == "application-approve":
        vehicle = client.vehicles.approve_application(args.id)
        print(f"Approved, added to the fleet as {vehicle.id}" if vehicle else "Approved")
    elif args.command == "application-reject":
        client.vehicles.reject_application(args.id)
        print("Rejected")
    elif args.command == "update-profile":
        picture = args.picture.read_bytes() if args.picture else None
        filename = args.picture.name if args.picture else "profile.jpg"
        print_json(client.auth.update_profile(args.name, args.email, args.phone, picture, filename))
    elif args.command == "maintenance":
        if args.mine:
            records = client.maintenance.assignments()
            if args.status != "all":
                records = [r for r in records if r.status == args.status]
        else:
            records = client.maintenance.list(args.status)
        print_json(records)
    elif args.command == "maintenance-schedule":
        print_json(
            client.maintenance.schedule(
                args.vehicle, args.date, args.type, args.description, cost=args.cost, technician_id=args.technician
            )
        )
    elif args.command == "maintenance-update":
        print_json(
            client.maintenance.report_progress(
                args.id,
                status=args.status,
                notes=args.notes,
                report_text=args.report,
                actual_cost=args.actual_cost,
                parts_cost=args.parts_cost,
                labor_cost=args.labor_cost,
                additional_costs=args.additional_costs,
                bill_files=[(p.name, p.read_bytes()) for p in args.bill],
                report_files=[(p.name, p.read_bytes()) for p in args.report_file],
            )
        )
    else:
        raise RentalClientError(f"Unsupported command {args.command}")


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.DEBUG if args.verbose else settings.LOG_LEVEL
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    client = RentalClient.from_settings(base_url=args.host, token_file=args.token_file)
    try:
        dispatch(client, args)
    except ValidationError as exc:
        for field, message in exc.errors.items():
            print(f"{field}: {message}")
        sys.exit(1)
    except UnauthorizedError as exc:
        print(f"{exc.message}. Please sign in again ({client.navigator.current}).")
        sys.exit(1)
    except RentalClientError as exc:
        print(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
