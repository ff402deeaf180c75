import pytest

from conftest import make_token, reservation_doc

from rental_client import cli
from rental_client.errors import RentalClientError

RID = "665f1c2ab7e4a90012345678"


def run(client, *argv):
    args = cli.build_parser().parse_args(list(argv))
    cli.dispatch(client, args)


def test_reservations_use_the_role_listing(signed_in, http, capsys):
    client = signed_in("driver")
    http.add("GET", "/reservations/driver", [reservation_doc(status="confirmed")])

    run(client, "reservations")

    out = capsys.readouterr().out
    assert "#665f1c2a" in out
    assert "Toyota Prius (2019)" in out
    assert "May 1, 2030 -> May 4, 2030 (3 days)" in out
    assert http.paths() == [("GET", "/reservations/driver")]


def test_reservations_filtered_to_nothing(signed_in, http, capsys):
    client = signed_in()
    http.add("GET", "/reservations/user", [reservation_doc()])
    run(client, "reservations", "--status", "completed")
    assert capsys.readouterr().out.strip() == "No reservations"


def test_actions_lists_what_the_role_can_do(signed_in, http, capsys):
    client = signed_in("admin")
    http.add("GET", "/reservations", [reservation_doc()])
    run(client, "actions", "--id", RID[:8])
    assert "Actions: Confirm, Cancel, Update Payment" in capsys.readouterr().out


def test_cancel_by_prefix(signed_in, http, capsys):
    client = signed_in()
    http.add("GET", "/reservations/user", [reservation_doc()])
    http.add("PUT", f"/reservations/{RID}/cancel", {"message": "Reservation cancelled successfully"})

    run(client, "cancel", "--id", "665f1c")

    assert http.paths()[-1] == ("PUT", f"/reservations/{RID}/cancel")
    assert "cancelled" in capsys.readouterr().out


def test_ambiguous_prefix_changes_nothing(signed_in, http):
    client = signed_in()
    other = RID[:-4] + "9999"
    http.add("GET", "/reservations/user", [reservation_doc(), reservation_doc(_id=other)])

    with pytest.raises(RentalClientError, match="ambiguous"):
        run(client, "cancel", "--id", RID[:8])

    assert http.paths() == [("GET", "/reservations/user")]


def test_exact_id_wins_over_prefix(signed_in, http):
    client = signed_in()
    longer = RID + "ff"
    http.add("GET", "/reservations/user", [reservation_doc(_id=longer), reservation_doc()])
    http.add("PUT", f"/reservations/{RID}/cancel", {"message": "Reservation cancelled successfully"})

    run(client, "cancel", "--id", RID)

    assert http.paths()[-1] == ("PUT", f"/reservations/{RID}/cancel")


def test_set_status_can_be_aborted(signed_in, http, capsys, monkeypatch):
    client = signed_in("admin")
    http.add("GET", "/reservations", [reservation_doc()])
    monkeypatch.setattr("builtins.input", lambda prompt: "n")

    run(client, "set-status", "--id", RID, "--status", "confirmed")

    assert "Aborted" in capsys.readouterr().out
    assert http.paths() == [("GET", "/reservations")]


def test_main_reports_validation_errors(monkeypatch, client, capsys):
    monkeypatch.setattr(cli.RentalClient, "from_settings", classmethod(lambda cls, **kw: client))
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["register", "--name", "Nimal", "--email", "nimal@example.com", "--phone", "123", "--password", "secret1"])
    assert excinfo.value.code == 1
    assert "phone:" in capsys.readouterr().out


def test_main_reports_forced_logout(monkeypatch, client, http, capsys):
    client.session.set_token(make_token("u1"))
    http.add("GET", "/auth/searchUser/u1", {"message": "Token expired"}, status=401)
    monkeypatch.setattr(cli.RentalClient, "from_settings", classmethod(lambda cls, **kw: client))

    with pytest.raises(SystemExit):
        cli.main(["whoami"])

    out = capsys.readouterr().out
    assert "Please sign in again (/login)" in out
    assert client.session.token is None


def test_maintenance_update_uploads_files(signed_in, http, tmp_path, capsys):
    client = signed_in("technician")
    bill = tmp_path / "bill.pdf"
    bill.write_bytes(b"%PDF")
    record = {
        "_id": "m1",
        "vehicleId": "v1",
        "maintenanceType": "Repair",
        "scheduledDate": "2030-06-01",
        "status": "completed",
    }
    http.add("PATCH", "/maintenance/technician/update/m1", {"success": True, "data": record})

    run(client, "maintenance-update", "--id", "m1", "--status", "completed", "--labor-cost", "1500", "--bill", str(bill))

    call = http.last()
    assert call["data"] == {"status": "completed", "laborCost": "1500"}
    assert call["files"] == [("billFiles", ("bill.pdf", b"%PDF"))]
    assert '"status": "completed"' in capsys.readouterr().out


def test_application_approve(signed_in, http, capsys):
    client = signed_in("admin")
    http.add(
        "PUT",
        "/vehicles/admin/applications/a1/approve",
        {"vehicle": {"_id": "v9", "make": "Suzuki", "model": "Alto", "year": 2018, "price": 4500}},
    )
    run(client, "application-approve", "--id", "a1")
    assert "added to the fleet as v9" in capsys.readouterr().out
