"""
Tests for the clusterauth command-line interface.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from clusterauth import ClusterAuthClient, MemoryCredentialStore
from clusterauth.cli import app
from clusterauth.credentials import FileCredentialStore
from clusterauth.scopes import Scope
from clusterauth.testing import FakeAuthService, ScriptedPrompter
from clusterauth.testing.fixtures import FIXED_NOW
from clusterauth.types.credentials import Credential

runner = CliRunner()


class Harness:
    """Runs CLI commands against an in-memory service."""

    def __init__(self) -> None:
        self.service = FakeAuthService()
        self.store = MemoryCredentialStore()
        self.prompter = ScriptedPrompter()

    def client(self) -> ClusterAuthClient:
        return ClusterAuthClient(
            address="http://cluster.test",
            credential_store=self.store,
            prompter=self.prompter,
            http_transport=self.service.as_transport(),
            clock=lambda: FIXED_NOW,
        )

    def invoke(self, *args: str):
        return runner.invoke(app, ["auth", *args], obj=self.client)

    def log_in_as(self, subject: str, ttl: int | None = None) -> None:
        self.store.write(
            Credential(token=self.service.issue_token(subject, ttl=ttl), subject=subject)
        )


@pytest.fixture
def cli() -> Harness:
    return Harness()


@pytest.fixture
def admin_cli(cli: Harness) -> Harness:
    cli.store.write(Credential(token=cli.service.activate_with_admin("admin"), subject="admin"))
    return cli


class TestActivation:
    """Tests for activate and deactivate."""

    def test_activate_with_robot_prints_root_token(self, cli: Harness) -> None:
        result = cli.invoke("activate", "--initial-admin", "robot:ci")

        assert result.exit_code == 0, result.output
        token = cli.store.read().token
        assert "WARNING: DO NOT LOSE THE ROBOT TOKEN" in result.output
        assert f'Token for "robot:ci":\n{token}\n' in result.output
        assert cli.prompter.prompts == []

    def test_activate_as_operator_prints_no_token(self, cli: Harness) -> None:
        cli.service.register_proof("gh-proof", "alice")
        cli.prompter.add("gh-proof")

        result = cli.invoke("activate")

        assert result.exit_code == 0, result.output
        assert cli.store.read().token not in result.output
        assert cli.service.admins == {"alice"}

    def test_activate_twice_fails(self, admin_cli: Harness) -> None:
        result = admin_cli.invoke("activate", "--initial-admin", "robot:ci")

        assert result.exit_code == 1
        assert "Error: already activated" in result.output
        assert "Retrieving" not in result.output

    def test_activate_with_blank_proof_reports_no_progress(self, cli: Harness) -> None:
        cli.prompter.add("")

        result = cli.invoke("activate")

        assert result.exit_code == 1
        assert "Error: no token was entered" in result.output
        assert "Retrieving" not in result.output
        assert not cli.service.was_called("activate")

    def test_deactivate_declined(self, admin_cli: Harness) -> None:
        admin_cli.prompter.add("n")

        result = admin_cli.invoke("deactivate")

        assert result.exit_code == 1
        assert "Error: operation aborted" in result.output
        assert not admin_cli.service.was_called("deactivate")

    def test_deactivate_confirmed(self, admin_cli: Harness) -> None:
        admin_cli.prompter.add("y")

        result = admin_cli.invoke("deactivate")

        assert result.exit_code == 0, result.output
        assert admin_cli.service.admins == set()


class TestSessionCommands:
    """Tests for login, logout, whoami and use-auth-token."""

    def test_login_with_code(self, admin_cli: Harness) -> None:
        admin_cli.service.register_one_time_code("123456", "alice")

        result = admin_cli.invoke("login", "--code", "123456")

        assert result.exit_code == 0, result.output
        assert admin_cli.store.read().subject == "alice"

    def test_login_with_otp_prompt(self, admin_cli: Harness) -> None:
        admin_cli.service.register_one_time_code("123456", "alice")
        admin_cli.prompter.add("123456")

        result = admin_cli.invoke("login", "--otp")

        assert result.exit_code == 0, result.output
        assert admin_cli.prompter.prompts == ["Please enter your One-Time Password:"]

    def test_login_with_bad_code(self, admin_cli: Harness) -> None:
        result = admin_cli.invoke("login", "--code", "000000")

        assert result.exit_code == 1
        assert "Error: proof is invalid or has expired" in result.output
        assert admin_cli.store.read().subject == "admin"

    def test_whoami_with_expiry(self, admin_cli: Harness) -> None:
        admin_cli.log_in_as("alice", ttl=3600)

        result = admin_cli.invoke("whoami")

        assert result.exit_code == 0, result.output
        assert result.output == 'You are "alice"\nsession expires: 15 Jan 24 11:30 UTC\n'

    def test_whoami_without_expiry(self, admin_cli: Harness) -> None:
        result = admin_cli.invoke("whoami")

        assert result.output == 'You are "admin"\n'

    def test_logout_then_whoami(self, admin_cli: Harness) -> None:
        assert admin_cli.invoke("logout").exit_code == 0
        assert admin_cli.invoke("logout").exit_code == 0

        result = admin_cli.invoke("whoami")

        assert result.exit_code == 1
        assert "Error: no credential found; log in first" in result.output

    def test_use_auth_token(self, admin_cli: Harness) -> None:
        token = admin_cli.service.issue_token("robot:ci")
        admin_cli.prompter.add(token)

        result = admin_cli.invoke("use-auth-token")

        assert result.exit_code == 0, result.output
        assert admin_cli.store.read() == Credential(token=token)
        assert admin_cli.invoke("whoami").output == 'You are "robot:ci"\n'


class TestAccessCommands:
    """Tests for check, get and set."""

    def test_set_then_get(self, admin_cli: Harness) -> None:
        admin_cli.service.create_repo("images", "carol")

        result = admin_cli.invoke("set", "alice", "writer", "images")
        assert result.exit_code == 0, result.output

        result = admin_cli.invoke("get", "images")
        assert result.output == "alice: writer\ncarol: owner\n"

        result = admin_cli.invoke("get", "alice", "images")
        assert result.output == "writer\n"

    def test_check(self, admin_cli: Harness) -> None:
        admin_cli.service.acls["images"] = {"alice": Scope.READER}
        admin_cli.log_in_as("alice")

        assert admin_cli.invoke("check", "reader", "images").output == "true\n"
        assert admin_cli.invoke("check", "writer", "images").output == "false\n"

    def test_invalid_scope(self, admin_cli: Harness) -> None:
        result = admin_cli.invoke("set", "alice", "Writer", "images")

        assert result.exit_code == 1
        assert "invalid scope 'Writer'" in result.output
        assert not admin_cli.service.was_called("set-scope")

    def test_get_with_too_many_arguments(self, admin_cli: Harness) -> None:
        result = admin_cli.invoke("get", "alice", "images", "extra")

        assert result.exit_code == 2


class TestAdminCommands:
    """Tests for list-admins, modify-admins and get-auth-token."""

    def test_modify_then_list(self, admin_cli: Harness) -> None:
        result = admin_cli.invoke("modify-admins", "--add", "carol,bob", "--add", "robot:ci")
        assert result.exit_code == 0, result.output

        result = admin_cli.invoke("modify-admins", "--remove", "robot:ci")
        assert result.exit_code == 0, result.output

        result = admin_cli.invoke("list-admins")
        assert result.output == "admin\nbob\ncarol\n"

    def test_get_auth_token(self, admin_cli: Harness) -> None:
        result = admin_cli.invoke("get-auth-token", "alice")

        assert result.exit_code == 0, result.output
        assert result.output.startswith("New credentials:\n  Subject: alice\n  Token: ")
        assert admin_cli.store.read().subject == "admin"

    def test_get_auth_token_quiet_and_saved(self, admin_cli: Harness, tmp_path: Path) -> None:
        path = tmp_path / "robot.json"

        result = admin_cli.invoke("get-auth-token", "robot:ci", "-q", "--save-to", str(path))

        assert result.exit_code == 0, result.output
        token = result.output.strip()
        assert admin_cli.service.tokens[token] == "robot:ci"
        assert FileCredentialStore(path).read() == Credential(token=token, subject="robot:ci")

    def test_get_auth_token_denied(self, admin_cli: Harness) -> None:
        admin_cli.log_in_as("alice")

        result = admin_cli.invoke("get-auth-token", "bob")

        assert result.exit_code == 1
        assert "must be an admin" in result.output
