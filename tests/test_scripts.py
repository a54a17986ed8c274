# tests/test_scripts.py
from turterra.scripts import reconcile_scores


def test_reconcile_script_reports_changes(mocker, capsys) -> None:
    session = mocker.MagicMock()
    session_local = mocker.patch.object(reconcile_scores, "SessionLocal")
    session_local.return_value.__enter__.return_value = session
    reconcile = mocker.patch.object(reconcile_scores, "reconcile_scores", return_value=3)

    assert reconcile_scores.main([]) == 0

    reconcile.assert_called_once_with(session)
    assert "3 rows changed" in capsys.readouterr().out


def test_init_db_reset_drops_before_create(mocker) -> None:
    from turterra.scripts import init_db

    calls = mocker.MagicMock()
    mocker.patch.object(init_db, "drop_tables", calls.drop)
    mocker.patch.object(init_db, "create_tables", calls.create)

    init_db.main(["--reset"])

    assert [name for name, _, _ in calls.mock_calls] == ["drop", "create"]
