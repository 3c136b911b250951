"""
End-to-end lifecycle tests: services wired to the SQLAlchemy repositories.
"""

import pytest

from tool_tracker.core.exceptions import ConflictError, ValidationError
from tool_tracker.domain.entities import EventType, ToolStatus, UserRole
from tool_tracker.repositories import EventRepository, ToolRepository, UserRepository
from tool_tracker.services import EventService, StatsService, ToolService, UserService


@pytest.fixture
def event_service(db_session) -> EventService:
    return EventService(EventRepository(db_session))


@pytest.fixture
def tool_service(db_session, event_service) -> ToolService:
    return ToolService(ToolRepository(db_session), event_service)


@pytest.fixture
def user_service(db_session, event_service) -> UserService:
    return UserService(UserRepository(db_session), event_service)


@pytest.mark.integration
@pytest.mark.services
class TestToolLifecycleFlow:
    def test_check_out_then_check_in(self, tool_service, event_service, user_service, actor_x):
        worker = user_service.create_user("Ana", "ana@example.com")
        hammer = tool_service.create_tool("Hammer", actor_id=actor_x)

        out = tool_service.check_out_tool(hammer.id, worker.id, actor_x, "for job")
        assert out.status is ToolStatus.CHECKED_OUT
        assert out.current_user_id == worker.id

        back = tool_service.check_in_tool(hammer.id, actor_x, "done")
        assert back.status is ToolStatus.IN_OFFICE
        assert back.current_user_id is None

        history = event_service.tool_history(hammer.id)
        transitions = [e for e in history if e.event_type is not EventType.TOOL_CREATED]
        assert [e.event_type for e in reversed(transitions)] == [
            EventType.TOOL_CHECKED_OUT,
            EventType.TOOL_CHECKED_IN,
        ]
        checked_out = transitions[-1]
        assert checked_out.user_id == worker.id
        assert checked_out.actor_id == actor_x
        assert checked_out.notes == "for job"
        assert checked_out.metadata == {"from_status": "IN_OFFICE", "to_status": "CHECKED_OUT"}
        assert transitions[0].user_id == worker.id

    def test_double_checkout_is_rejected_and_not_recorded(self, tool_service, event_service, user_a, user_b):
        tool = tool_service.create_tool("Drill")
        tool_service.check_out_tool(tool.id, user_a)

        with pytest.raises(ValidationError, match="tool is already checked out"):
            tool_service.check_out_tool(tool.id, user_b)

        assert tool_service.get_tool(tool.id).current_user_id == user_a
        assert len(event_service.list_events(event_type=EventType.TOOL_CHECKED_OUT)) == 1

    def test_lost_while_checked_out(self, tool_service, event_service, user_a):
        tool = tool_service.create_tool("Level")
        tool_service.check_out_tool(tool.id, user_a)

        lost = tool_service.mark_lost(tool.id, notes="left on site")
        again = tool_service.mark_lost(tool.id)

        assert lost.status is ToolStatus.LOST
        assert again.status is ToolStatus.LOST
        assert again.current_user_id is None
        lost_events = event_service.list_events(event_type=EventType.TOOL_LOST, tool_id=tool.id)
        assert len(lost_events) == 2
        assert {e.user_id for e in lost_events} == {user_a, None}
        assert tool_service.list_tools_by_user(user_a) == []

        with pytest.raises(ValidationError, match="lost tools cannot be sent to maintenance"):
            tool_service.send_to_maintenance(tool.id)

    def test_maintenance_round_trip(self, tool_service):
        tool = tool_service.create_tool("Saw")

        tool_service.send_to_maintenance(tool.id)
        tool = tool_service.update_tool(tool.id, "Saw", status=ToolStatus.IN_OFFICE)

        assert tool.status is ToolStatus.IN_OFFICE
        assert [t.id for t in tool_service.list_tools_by_status("IN_OFFICE")] == [tool.id]

    def test_deleted_tool_keeps_history(self, tool_service, event_service, actor_x):
        tool = tool_service.create_tool("Wrench")

        tool_service.delete_tool(tool.id, actor_x)

        assert tool_service.count_tools() == 0
        types = [e.event_type for e in event_service.tool_history(tool.id)]
        assert set(types) == {EventType.TOOL_CREATED, EventType.TOOL_DELETED}


@pytest.mark.integration
@pytest.mark.services
class TestUserFlow:
    def test_email_uniqueness(self, user_service):
        john = user_service.create_user("John", "john@example.com")
        jane = user_service.create_user("Jane", "jane@example.com", role=UserRole.MANAGER)

        with pytest.raises(ConflictError):
            user_service.create_user("Johnny", "john@example.com")
        with pytest.raises(ConflictError):
            user_service.update_user(jane.id, "Jane", "john@example.com")

        renamed = user_service.update_user(john.id, "John Smith", "john@example.com")
        assert renamed.name == "John Smith"
        assert user_service.get_user_by_email("john@example.com").id == john.id

    def test_actor_sees_their_own_actions_in_activity(
        self, tool_service, event_service, user_service, user_a
    ):
        admin = user_service.create_user("Admin", "admin@example.com", role="ADMIN")
        hammer = tool_service.create_tool("Hammer", actor_id=admin.id)
        tool_service.check_out_tool(hammer.id, user_a, admin.id)

        activity = {e.event_type for e in event_service.user_activity(admin.id)}
        assert activity == {
            EventType.USER_CREATED,
            EventType.TOOL_CREATED,
            EventType.TOOL_CHECKED_OUT,
        }

        checkouts = event_service.list_events(user_id=admin.id, event_type="TOOL_CHECKED_OUT")
        assert [e.user_id for e in checkouts] == [user_a]

    def test_user_events_and_stats(self, db_session, user_service, tool_service, event_service, actor_x):
        user = user_service.create_user("Ana", "ana@example.com", actor_id=actor_x)
        tool_service.create_tool("Hammer")
        tool_service.create_tool("Ladder", status="MAINTENANCE")
        user_service.delete_user(user.id, actor_x)

        activity = [e.event_type for e in event_service.user_activity(user.id)]
        assert set(activity) == {EventType.USER_CREATED, EventType.USER_DELETED}

        stats = StatsService(
            ToolRepository(db_session), UserRepository(db_session), EventRepository(db_session)
        ).get_stats()
        assert stats.total_tools == 2
        assert stats.total_users == 0
        assert stats.total_events == 4
        assert stats.tools_by_status["MAINTENANCE"] == 1
        assert stats.tools_by_status["CHECKED_OUT"] == 0
        assert len(event_service.recent_audit_log()) == 4
