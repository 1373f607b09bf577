import pytest

from study_hub.audit.models import AuditLog
from study_hub.audit.utils import log_action


@pytest.mark.django_db
def test_log_action_with_actor(user):
    log = log_action(
        AuditLog.Action.GROUP_UPDATED,
        actor=user,
        model_name="StudyGroup",
        record_id=4,
        before={"name": "old"},
        after={"name": "new"},
    )
    log.refresh_from_db()
    assert log.actor == user
    assert log.before == {"name": "old"}
    assert log.after == {"name": "new"}
    assert str(log).startswith("[")


@pytest.mark.django_db
def test_log_action_without_user_records_system(db):
    log = log_action(AuditLog.Action.CLASS_DELETED, actor="cron", record_id=1)
    assert log.actor is None
    assert str(log).endswith("system: class_deleted")


@pytest.mark.django_db
def test_newest_first(user):
    first = log_action(AuditLog.Action.CLASS_CREATED, actor=user)
    second = log_action(AuditLog.Action.CLASS_DELETED, actor=user)
    assert list(AuditLog.objects.all()) == [second, first]
