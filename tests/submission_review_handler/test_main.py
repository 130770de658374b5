from submission_review_handler import main as main_mod
from submission_review_handler.config import Settings
from submission_review_handler.folder_sync import SyncReport


def _settings(**overrides):
    base = dict(
        submission_sheet_id="sheet",
        submission_worksheet="Form Responses 1",
        submissions_root_folder_id="root",
        tracker_sheet_id="tracker",
        reviewers=["ana@example.org"],
        strict=False,
        dry_run=False,
    )
    base.update(overrides)
    return Settings(**base)


def test_run_sync_returns_nonzero_when_rows_failed(monkeypatch):
    called = {}

    def _fake_sync(**kwargs):
        called.update(kwargs)
        return SyncReport(failed=[3])

    monkeypatch.setattr(main_mod, "sync_submission_folders", _fake_sync)
    args = main_mod.build_parser().parse_args(["sync"])

    assert main_mod.run(args, _settings(), g="G") == 1
    assert called["g"] == "G"
    assert called["submission_sheet_id"] == "sheet"
    assert called["root_folder_id"] == "root"


def test_run_tracker_uses_cli_reviewers_over_settings(monkeypatch):
    called = {}
    monkeypatch.setattr(
        main_mod, "build_review_tracker", lambda **kw: called.update(kw) or "tid"
    )
    args = main_mod.build_parser().parse_args(
        ["tracker", "--reviewer", "bo@example.org", "--reviewer", "cy@example.org"]
    )

    assert main_mod.run(args, _settings(), g="G") == 0
    assert called["reviewers"] == ["bo@example.org", "cy@example.org"]


def test_run_tracker_falls_back_to_settings_reviewers(monkeypatch):
    called = {}
    monkeypatch.setattr(
        main_mod, "build_review_tracker", lambda **kw: called.update(kw) or "tid"
    )
    args = main_mod.build_parser().parse_args(["tracker"])

    main_mod.run(args, _settings(), g="G")
    assert called["reviewers"] == ["ana@example.org"]


def test_run_notify_flags_override_settings(monkeypatch):
    called = {}
    monkeypatch.setattr(main_mod, "notify_reviewers", lambda **kw: called.update(kw))

    args = main_mod.build_parser().parse_args(["notify", "--strict", "--dry-run"])
    main_mod.run(args, _settings(), g="G")
    assert (called["strict"], called["dry_run"]) == (True, True)
    assert called["tracker_sheet_id"] == "tracker"

    args = main_mod.build_parser().parse_args(["notify", "--tracker-id", "t2"])
    main_mod.run(args, _settings(strict=True), g="G")
    assert (called["strict"], called["dry_run"]) == (True, False)
    assert called["tracker_sheet_id"] == "t2"


def test_main_without_command_prints_help():
    assert main_mod.main([]) == 2


def test_main_builds_clients_and_dispatches(monkeypatch):
    called = {}
    monkeypatch.setattr(main_mod.GoogleAPI, "from_settings", lambda cfg: "G")
    monkeypatch.setattr(
        main_mod, "notify_reviewers", lambda **kw: called.update(kw)
    )

    assert main_mod.main(["notify", "--dry-run"]) == 0
    assert called["g"] == "G"
    assert called["dry_run"] is True
