from types import SimpleNamespace

import pytest

from planner import header


@pytest.fixture
def fake_st(mocker):
    st = mocker.patch("planner.header.st")
    st.session_state = {}
    st.columns.return_value = [mocker.MagicMock(), mocker.MagicMock()]
    mocker.patch("planner.header._render_sync_badge")
    return st


@pytest.fixture
def ctx(controller):
    return SimpleNamespace(controller=controller, user=None, remote_enabled=True, session=None)


def test_callback_mutation_is_already_rendered_by_the_full_run(fake_st, ctx):
    header.render_header(ctx)
    ctx.controller.add_category("Gym")

    header.render_header(ctx)
    assert not header.state_changed_since_render(ctx)


def test_background_change_after_render_is_detected(fake_st, ctx):
    header.render_header(ctx)
    assert not header.state_changed_since_render(ctx)

    ctx.controller.clear_todos()
    assert header.state_changed_since_render(ctx)
    header.mark_rendered(ctx)
    assert not header.state_changed_since_render(ctx)


def test_nothing_to_compare_before_first_render(fake_st, ctx):
    assert not header.state_changed_since_render(ctx)
