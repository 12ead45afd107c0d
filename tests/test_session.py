import pytest

from planner.constants import GUEST_NICKNAME, PASTEL_COLORS
from planner.data.local_store import LocalTarget
from planner.data.remote_store import RemoteTarget
from planner.errors import AuthenticationError
from planner.models import Category, default_categories
from planner.session import ANONYMOUS, AUTHENTICATED, IdentitySession, SessionManager, user_from_session


@pytest.fixture
def build_manager(controller, storage, fake_api):
    def _build(provider):
        return SessionManager(
            provider,
            controller,
            local_target_factory=lambda: LocalTarget(storage),
            remote_target_factory=lambda user: RemoteTarget(user.id, request=fake_api),
        )

    return _build


class TestUserFromSession:
    def test_full_name_wins_over_nickname(self):
        user = user_from_session(IdentitySession("u1", {"full_name": "Kim Alice", "nickname": "alice"}))
        assert user.nickname == "Kim Alice"

    def test_defaults(self):
        user = user_from_session(IdentitySession("u1", {}))
        assert user.nickname == GUEST_NICKNAME
        assert user.profile_image == ""

    def test_picture_claim_is_used_for_avatar(self):
        user = user_from_session(IdentitySession("u1", {"nickname": "a", "picture": "https://img/p.png"}))
        assert user.profile_image == "https://img/p.png"


def test_start_without_session_uses_local_target(build_manager, make_provider, controller):
    manager = build_manager(make_provider())
    manager.start()
    assert manager.state == ANONYMOUS
    assert isinstance(controller.target, LocalTarget)
    assert controller.categories == default_categories()


def test_start_with_existing_session_goes_straight_to_remote(build_manager, make_provider, controller, alice_session):
    manager = build_manager(make_provider(session=alice_session))
    manager.start()
    assert manager.state == AUTHENTICATED
    assert manager.user.nickname == "alice"
    assert manager.user.profile_image == "https://img.example/alice.png"
    assert isinstance(controller.target, RemoteTarget)
    assert controller.target.user_id == "kakao-1001"


def test_provider_error_on_start_stays_anonymous(build_manager, make_provider, controller, caplog):
    manager = build_manager(make_provider(startup_error=ConnectionError("idp down")))
    manager.start()
    assert manager.state == ANONYMOUS
    assert isinstance(controller.target, LocalTarget)
    assert "staying anonymous" in caplog.text


def test_login_keeps_in_memory_categories_when_remote_is_empty(
    build_manager, make_provider, controller, alice_session
):
    provider = make_provider()
    manager = build_manager(provider)
    manager.start()
    controller.add_category("Gym")
    before = controller.categories

    provider.emit(alice_session)
    assert controller.flush(timeout=5)
    assert manager.is_authenticated
    assert controller.categories == before


def test_guest_todos_do_not_follow_the_user_into_remote_storage(
    build_manager, make_provider, controller, alice_session, fake_api
):
    provider = make_provider()
    manager = build_manager(provider)
    manager.start()
    controller.add_todo("2024-03-10", "guest secret")

    provider.emit(alice_session)
    assert controller.flush(timeout=5)
    assert controller.all_todos() == {}

    controller.add_todo("2024-03-10", "alice item")
    assert controller.flush(timeout=5)
    stored = fake_api.todos["kakao-1001"]["2024-03-10"]
    assert [item["text"] for item in stored] == ["alice item"]


def test_logout_resets_to_defaults_and_local(build_manager, make_provider, controller, alice_session, fake_api):
    fake_api.categories["kakao-1001"] = [{"id": "r1", "name": "Remote", "color": PASTEL_COLORS[3]}]
    provider = make_provider(session=alice_session)
    manager = build_manager(provider)
    manager.start()
    assert controller.flush(timeout=5)
    assert [c.id for c in controller.categories] == ["r1"]

    provider.emit(None)
    assert manager.state == ANONYMOUS
    assert manager.user is None
    assert isinstance(controller.target, LocalTarget)
    assert controller.categories == default_categories()
    assert controller.all_todos() == {}


def test_repeat_notification_for_same_user_does_not_reload(
    build_manager, make_provider, controller, alice_session, fake_api
):
    provider = make_provider(session=alice_session)
    manager = build_manager(provider)
    manager.start()
    assert controller.flush(timeout=5)
    target = controller.target
    calls = len(fake_api.calls)

    provider.emit(IdentitySession("kakao-1001", {"nickname": "alice2"}))
    assert controller.flush(timeout=5)
    assert controller.target is target
    assert len(fake_api.calls) == calls
    assert manager.user.nickname == "alice2"


def test_switching_users_swaps_owner(build_manager, make_provider, controller, alice_session):
    provider = make_provider(session=alice_session)
    manager = build_manager(provider)
    manager.start()
    assert controller.flush(timeout=5)
    controller.add_todo("2024-03-10", "alice only")
    provider.emit(IdentitySession("kakao-2002", {"nickname": "bob"}))
    assert controller.target.user_id == "kakao-2002"
    assert controller.flush(timeout=5)
    assert controller.all_todos() == {}


def test_close_unsubscribes(build_manager, make_provider):
    provider = make_provider()
    manager = build_manager(provider)
    manager.start()
    assert len(provider.subscribers) == 1
    manager.close()
    assert provider.subscribers == []


def test_login_failure_raises_authentication_error(build_manager, make_provider):
    manager = build_manager(make_provider(sign_in_error=RuntimeError("no client id")))
    with pytest.raises(AuthenticationError) as excinfo:
        manager.login()
    assert excinfo.value.remediation
    assert manager.state == ANONYMOUS


def test_logout_errors_are_logged(build_manager, make_provider, mocker, caplog):
    provider = make_provider()
    mocker.patch.object(provider, "sign_out", side_effect=RuntimeError("boom"))
    manager = build_manager(provider)
    manager.logout()
    assert "Logout failed" in caplog.text


def test_local_categories_survive_restart(build_manager, make_provider, controller):
    manager = build_manager(make_provider())
    manager.start()
    controller.set_categories([Category("keep", "Keep", PASTEL_COLORS[0])])
    manager.close()

    again = build_manager(make_provider())
    again.start()
    assert [c.id for c in controller.categories] == ["keep"]
