from dataclasses import replace
from decimal import Decimal

import httpx
import pytest

from conftest import envelope
from core.controller import AppController
from core.models import NextOfKin
from core.navigation import View


@pytest.fixture()
def state():
    return {}


@pytest.fixture()
def controller(settings, state, api, credentials):
    return AppController(settings, state, api=api, credentials=credentials)


def test_login_gate(controller):
    assert not controller.is_authenticated
    assert not controller.login("admin", "wrong").ok
    assert not controller.login("someone", "admin123").ok
    result = controller.login("Admin", "admin123")
    assert result.ok
    assert controller.is_authenticated
    assert controller.user["full_name"] == "Administrator"
    assert controller.current_view() is View.DASHBOARD


def test_logout_resets_navigation(controller):
    controller.login("admin", "admin123")
    controller.navigate(View.STUDENTS)
    controller.logout()
    assert not controller.is_authenticated
    assert controller.current_view() is View.DASHBOARD


def test_invalid_registration_stays_on_register(controller, server, valid_form):
    controller.navigate(View.DASHBOARD)
    controller.navigate(View.REGISTER)
    result = controller.register_student(replace(valid_form, full_name="", nemis_number="123"))
    assert not result.ok
    assert set(result.errors) == {"full_name", "nemis_number"}
    assert controller.current_view() is View.REGISTER
    assert len(controller.store) == 0
    # nothing reached the server either
    assert server.requests == []


def test_successful_registration_opens_profile(controller, server, valid_form):
    controller.navigate(View.REGISTER)
    result = controller.register_student(valid_form)
    assert result.ok
    assert "AHP2024001" in result.message
    assert controller.current_view() is View.PROFILE
    selected = controller.selected_student()
    assert selected.id == "srv-1"
    assert selected.admission_number == "AHP2024001"
    assert selected.fee_status.balance == 0


def test_registration_uses_local_number_when_server_sends_no_record(controller, server, valid_form):
    import httpx
    server.create_response = httpx.Response(201)
    expected = controller.next_admission_number()
    result = controller.register_student(valid_form)
    assert result.ok
    assert result.record.admission_number == expected


def test_registration_when_server_is_down(controller, server, valid_form):
    server.down = True
    controller.navigate(View.REGISTER)
    result = controller.register_student(valid_form)
    assert not result.ok
    assert result.message == "Could not connect to the server."
    assert controller.current_view() is View.REGISTER
    assert len(controller.store) == 0


def test_fee_updates_keep_profile_in_sync(controller, valid_form):
    record = controller.register_student(valid_form).record
    assert controller.update_fees(record.id, bill=5000).ok
    assert controller.selected_student().fee_status.balance == Decimal("5000")
    assert controller.update_fees(record.id, payment="2000").ok
    fee = controller.selected_student().fee_status
    assert (fee.total_billed, fee.total_paid, fee.balance) == (Decimal("5000"), Decimal("2000"), Decimal("3000"))


def test_bad_fee_amount_is_reported(controller, valid_form):
    record = controller.register_student(valid_form).record
    result = controller.update_fees(record.id, bill=0)
    assert not result.ok
    assert result.message == "Amount must be greater than zero"


def test_fee_update_for_unknown_student(controller):
    result = controller.update_fees("ghost", bill=10)
    assert not result.ok
    assert "ghost" in result.message


def test_next_of_kin_edit(controller, valid_form):
    record = controller.register_student(valid_form).record
    bad = controller.update_next_of_kin(record.id, NextOfKin("", "Aunt", "0700", "aunt@example.com", "Nakuru"))
    assert not bad.ok
    assert bad.errors == {"name": "Name is required"}
    good = controller.update_next_of_kin(record.id, NextOfKin("Grace", "Aunt", "0700", "aunt@example.com", "Nakuru"))
    assert good.ok
    assert controller.selected_student().next_of_kin.name == "Grace"


def test_list_students_adopts_server_list(controller, server, valid_form):
    controller.register_student(valid_form)
    controller.register_student(replace(valid_form, full_name="Brian Otieno", gender="Male"))
    result = controller.list_students()
    assert result.ok
    assert [r.id for r in result.records] == ["srv-1", "srv-2"]
    assert len(controller.store) == 2


def test_filtered_list_does_not_replace_store(controller, valid_form):
    controller.register_student(valid_form)
    controller.register_student(replace(valid_form, full_name="Brian Otieno", gender="Male"))
    result = controller.list_students("brian")
    assert [r.full_name for r in result.records] == ["Brian Otieno"]
    assert len(controller.store) == 2


def test_list_falls_back_to_local_search(controller, server, valid_form):
    controller.register_student(valid_form)
    server.down = True
    result = controller.list_students("jane")
    assert not result.ok
    assert [r.full_name for r in result.records] == ["Jane Wanjiku"]


def test_dashboard_from_server(controller, server):
    server.stats["totalStudents"] = 42
    result = controller.load_dashboard()
    assert result.ok
    assert result.stats.total_students == 42


def test_dashboard_falls_back_to_local_figures(controller, server, valid_form):
    controller.register_student(valid_form)
    server.down = True
    result = controller.load_dashboard()
    assert not result.ok
    assert result.stats.total_students == 1
    assert result.stats.female_students == 1
    assert result.stats.female_percentage == pytest.approx(100.0)


def test_view_student_adopts_unknown_record(controller, server, valid_form):
    from core.api_client import build_registration_payload
    created = server.client().create_student(build_registration_payload(valid_form))
    assert controller.view_student(created.id, record=created) is View.PROFILE
    assert controller.selected_student() == created
    assert controller.close_profile() is View.STUDENTS


def test_refresh_keeps_session_fee_ledger(controller, valid_form):
    record = controller.register_student(valid_form).record
    controller.update_fees(record.id, bill="5000")
    controller.update_fees(record.id, payment="2000")
    result = controller.list_students()
    assert result.ok
    assert controller.store.get(record.id).fee_status.balance == Decimal("3000")
    assert result.records[0].fee_status.balance == Decimal("3000")


def test_refresh_keeps_edited_next_of_kin(controller, valid_form):
    record = controller.register_student(valid_form).record
    kin = NextOfKin("Grace", "Aunt", "0700", "aunt@example.com", "Nakuru")
    controller.update_next_of_kin(record.id, kin)
    controller.list_students()
    assert controller.store.get(record.id).next_of_kin == kin


def test_unreadable_server_row_is_skipped(controller, server, valid_form):
    controller.register_student(valid_form)
    server.students.append({"id": "srv-x", "admissionNumber": "AHP2024099", "fullName": "Broken", "totalBilled": "n/a"})
    result = controller.list_students()
    assert result.ok
    assert [r.full_name for r in result.records] == ["Jane Wanjiku"]


def test_rows_without_identity_survive_a_refresh(controller, server):
    server.students.extend([{"fullName": "A"}, {"fullName": "B"}])
    result = controller.list_students()
    assert [r.full_name for r in result.records] == ["A", "B"]
    assert len(controller.store) == 2


def test_bad_dashboard_stats_fall_back_to_local_figures(controller, server, valid_form):
    controller.register_student(valid_form)
    server.stats["totalStudents"] = None
    result = controller.load_dashboard()
    assert not result.ok
    assert result.message == "Server returned an invalid response"
    assert result.stats.total_students == 1


def test_search_shows_students_registered_after_the_fetch(controller, valid_form):
    stale = controller.list_students("jane")
    assert stale.records == []
    controller.register_student(valid_form)
    visible = controller.visible_students(stale.records, "jane")
    assert [r.full_name for r in visible] == ["Jane Wanjiku"]
    assert controller.visible_students(stale.records, "brian") == []


def test_search_rows_show_live_fees(controller, valid_form):
    record = controller.register_student(valid_form).record
    fetched = controller.list_students("jane").records
    controller.update_fees(record.id, bill="300")
    visible = controller.visible_students(fetched, "jane")
    assert len(visible) == 1
    assert visible[0].fee_status.total_billed == Decimal("300")


def test_server_returning_a_known_student_is_not_registered_twice(controller, server, valid_form):
    created = dict(id="srv-1", admissionNumber="AHP2024001", fullName="Jane Wanjiku",
                   gender="Female", registeredDate="2024-05-02T10:00:00")
    server.create_response = httpx.Response(201, json=envelope(created))
    first = controller.register_student(valid_form)
    second = controller.register_student(valid_form)
    assert first.ok and second.ok
    assert len(controller.store) == 1
    assert second.record == first.record
    assert "already registered as AHP2024001" in second.message
    assert controller.selected_student().id == "srv-1"


def test_logout_leaves_a_shared_client_open(controller, api):
    controller.login("admin", "admin123")
    controller.logout()
    assert not api.closed
    assert controller.list_students().ok


def test_logout_closes_a_client_the_controller_made(settings, credentials):
    controller = AppController(settings, {}, credentials=credentials)
    controller.logout()
    assert controller.api.closed
