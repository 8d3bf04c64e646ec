"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from balance_lift.cli import main

EMAIL = "lifter@example.com"


@pytest.fixture
def runner(temp_data_dir):
    """CLI runner pointed at a temporary data directory."""
    return CliRunner(env={"BALANCE_LIFT_DATA_DIR": str(temp_data_dir)})


@pytest.fixture
def ready_project(runner, plan_file):
    """Initialized project with one user and an imported plan."""
    assert runner.invoke(main, ["init"]).exit_code == 0
    assert runner.invoke(main, ["users", "add", EMAIL, "--first-name", "Sam"]).exit_code == 0
    result = runner.invoke(main, ["plan", "import", str(plan_file), "--user", EMAIL])
    assert result.exit_code == 0, result.output
    return runner


class TestSetupCommands:
    """Tests for init, users and plan commands."""

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "balance-lift" in result.output

    def test_init(self, runner, temp_data_dir):
        result = runner.invoke(main, ["init"])

        assert result.exit_code == 0
        assert "Exercise catalog populated (12 exercises)" in result.output
        assert (temp_data_dir / "balance_lift.db").exists()
        assert (temp_data_dir / "local_storage.db").exists()

    def test_commands_require_init(self, runner):
        result = runner.invoke(main, ["users", "list"])
        assert result.exit_code == 1
        assert "Project not initialized" in result.output

    def test_users(self, runner):
        runner.invoke(main, ["init"])
        runner.invoke(main, ["users", "add", EMAIL, "--first-name", "Sam", "--last-name", "Lee"])

        duplicate = runner.invoke(main, ["users", "add", EMAIL.upper()])
        assert duplicate.exit_code == 1
        assert "already exists" in duplicate.output

        listing = runner.invoke(main, ["users", "list"])
        assert EMAIL in listing.output
        assert "Sam Lee" in listing.output

    def test_plan_import(self, ready_project):
        result = ready_project.invoke(main, ["workout", "show", "--user", EMAIL])
        assert result.exit_code == 0
        assert "Week 1, Day 1" in result.output
        assert "Goblet Squat" in result.output

    def test_plan_import_unknown_user(self, runner, plan_file):
        runner.invoke(main, ["init"])
        result = runner.invoke(main, ["plan", "import", str(plan_file), "--user", "who@example.com"])
        assert result.exit_code == 1
        assert "No user with email" in result.output

    def test_plan_import_invalid_file(self, runner, temp_data_dir):
        runner.invoke(main, ["init"])
        runner.invoke(main, ["users", "add", EMAIL])
        bad_plan = temp_data_dir / "bad.json"
        bad_plan.write_text('{"workouts": []}')

        result = runner.invoke(main, ["plan", "import", str(bad_plan), "--user", EMAIL])
        assert result.exit_code == 1
        assert "non-empty 'workouts' list" in result.output

    def test_plan_import_reports_unmatched(self, runner, temp_data_dir):
        runner.invoke(main, ["init"])
        runner.invoke(main, ["users", "add", EMAIL])
        plan = temp_data_dir / "plan.json"
        plan.write_text('{"workouts": [{"exercises": ["Bench Press", "Wall Sit"]}]}')

        result = runner.invoke(main, ["plan", "import", str(plan), "--user", EMAIL])
        assert result.exit_code == 0
        assert "No catalog exercise for 'Bench Press'" in result.output


class TestWorkoutCommands:
    """Tests for the workout command group."""

    def test_show_without_plan(self, runner):
        runner.invoke(main, ["init"])
        runner.invoke(main, ["users", "add", EMAIL])

        result = runner.invoke(main, ["workout", "show", "--user", EMAIL])
        assert result.exit_code == 0
        assert "No strength test found" in result.output

    def test_toggle_persists_between_commands(self, ready_project):
        """Test progress is restored by the next command."""
        result = ready_project.invoke(main, ["workout", "toggle", "2", "1", "--user", EMAIL])
        assert result.exit_code == 0
        assert "Nordic Hamstring Curl, set 1: done" in result.output

        shown = ready_project.invoke(main, ["workout", "show", "--user", EMAIL])
        assert "[x][ ]" in shown.output

    def test_toggle_out_of_range(self, ready_project):
        result = ready_project.invoke(main, ["workout", "toggle", "1", "9", "--user", EMAIL])
        assert result.exit_code == 1
        assert "Goblet Squat has 3 sets." in result.output

        result = ready_project.invoke(main, ["workout", "toggle", "5", "1", "--user", EMAIL])
        assert result.exit_code == 1

    def test_submit_declined(self, ready_project):
        result = ready_project.invoke(main, ["workout", "submit", "--user", EMAIL], input="n\n")
        assert result.exit_code == 1
        assert "Submission cancelled." in result.output

    def test_submit_moves_to_next_workout(self, ready_project):
        result = ready_project.invoke(main, ["workout", "submit", "--user", EMAIL, "--yes"])
        assert result.exit_code == 0
        assert "Workout complete!" in result.output

        shown = ready_project.invoke(main, ["workout", "show", "--user", EMAIL])
        assert "Week 1, Day 2" in shown.output
        assert "Hip Thrust" in shown.output

    def test_all_workouts_done(self, ready_project):
        for _ in range(2):
            ready_project.invoke(main, ["workout", "submit", "--user", EMAIL, "--yes"])

        result = ready_project.invoke(main, ["workout", "show", "--user", EMAIL])
        assert "Every workout in your plan is done!" in result.output

    def test_run_interactive(self, ready_project):
        """Test stepping through sets and quitting keeps progress."""
        result = ready_project.invoke(
            main,
            ["workout", "run", "--user", EMAIL],
            input="t 1\nt 2\nt 3\nn\nj 9\nq\n",
        )
        assert result.exit_code == 0
        assert "Exercise must be between 1 and 2." in result.output
        assert "Progress saved" in result.output

        shown = ready_project.invoke(main, ["workout", "show", "--user", EMAIL])
        assert "[x][x][x]" in shown.output
        assert "> 2. Nordic Hamstring Curl" in shown.output

    def test_run_submit_complete_workout(self, ready_project):
        result = ready_project.invoke(
            main,
            ["workout", "run", "--user", EMAIL],
            input="t 1\nt 2\nt 3\nn\nt 1\nt 2\nn\ns\n",
        )
        assert result.exit_code == 0
        assert "Workout complete!" in result.output
