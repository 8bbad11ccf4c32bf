"""
Command-line interface for clusterauth.

Auth commands manage access to data in a cluster:

    clusterauth auth activate [--initial-admin robot:ci]
    clusterauth auth login [--otp | --code CODE]
    clusterauth auth whoami
    clusterauth auth set alice writer images
    clusterauth auth check reader images
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from clusterauth.client import ClusterAuthClient
from clusterauth.clients.session import LoginMode
from clusterauth.credentials import FileCredentialStore
from clusterauth.exceptions import ClusterAuthError
from clusterauth.logging import configure_logging
from clusterauth.scopes import parse_scope

app = typer.Typer(help="clusterauth: manage access to data in a cluster")
auth_app = typer.Typer(help="Auth commands manage access to data in a cluster")
app.add_typer(auth_app, name="auth")

ClientFactory = Callable[[], ClusterAuthClient]


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """clusterauth command-line interface."""
    if verbose:
        configure_logging(level=logging.DEBUG)
    if ctx.obj is None:
        ctx.obj = ClusterAuthClient.from_env


def _split_csv(values: list[str] | None) -> list[str]:
    result: list[str] = []
    for value in values or []:
        result.extend(part.strip() for part in value.split(",") if part.strip())
    return result


@contextmanager
def _client(ctx: typer.Context) -> Iterator[ClusterAuthClient]:
    """Yield a client from the context factory; report library errors and exit 1."""
    factory: ClientFactory = ctx.obj or ClusterAuthClient.from_env
    try:
        with factory() as client:
            yield client
    except ClusterAuthError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1)


@auth_app.command()
def activate(
    ctx: typer.Context,
    initial_admin: str = typer.Option(
        "",
        "--initial-admin",
        help=(
            "The subject (robot user or identity-provider user) who will be the "
            "first cluster admin. If this is a robot user, its token is printed; "
            "that token is effectively a root token, and if it's lost you will be "
            "locked out of your cluster"
        ),
    ),
) -> None:
    """Activate the cluster's auth system and make the first admin."""
    with _client(ctx) as client:
        result = client.session.activate(initial_admin or None)
        if result.is_root_robot_token:
            typer.echo(
                "WARNING: DO NOT LOSE THE ROBOT TOKEN BELOW WITHOUT ADDING OTHER "
                "ADMINS.\nIF YOU DO, YOU WILL BE PERMANENTLY LOCKED OUT OF YOUR "
                "CLUSTER!"
            )
            typer.echo(f'Token for "{result.initial_admin}":\n{result.credential.token}')


@auth_app.command()
def deactivate(ctx: typer.Context) -> None:
    """Delete all ACLs, tokens, and admins, and deactivate auth."""
    with _client(ctx) as client:
        client.session.deactivate()


@auth_app.command()
def login(
    ctx: typer.Context,
    otp: bool = typer.Option(
        False,
        "--otp",
        "-o",
        help="Authenticate with a One-Time Password entered at a prompt",
    ),
    code: str = typer.Option(
        "",
        "--code",
        help="Authenticate with the given One-Time Password",
    ),
) -> None:
    """Log in to the cluster."""
    mode = LoginMode.resolve(otp, code or None)
    with _client(ctx) as client:
        client.session.login(mode=mode, one_time_code=code or None)


@auth_app.command()
def logout(ctx: typer.Context) -> None:
    """Log out by deleting your local credential."""
    with _client(ctx) as client:
        client.session.logout()


@auth_app.command()
def whoami(ctx: typer.Context) -> None:
    """Print your cluster identity."""
    with _client(ctx) as client:
        result = client.session.whoami()
        typer.echo(f'You are "{result.username}"')
        if result.expires_at is not None:
            typer.echo(f"session expires: {result.expires_at:%d %b %y %H:%M %Z}")


@auth_app.command()
def check(
    ctx: typer.Context,
    scope: str = typer.Argument(..., help="none, reader, writer or owner"),
    repo: str = typer.Argument(...),
) -> None:
    """Check whether you have at least SCOPE access to REPO."""
    with _client(ctx) as client:
        authorized = client.authorization.check(parse_scope(scope), repo)
        typer.echo("true" if authorized else "false")


@auth_app.command("get")
def get_access(
    ctx: typer.Context,
    args: list[str] = typer.Argument(..., metavar="[USERNAME] REPO"),
) -> None:
    """Get the ACL for REPO, or the access that USERNAME has to REPO."""
    if len(args) not in (1, 2):
        typer.echo("Error: expected [USERNAME] REPO", err=True)
        raise typer.Exit(2)
    with _client(ctx) as client:
        if len(args) == 1:
            for grant in client.authorization.get_acl(args[0]):
                typer.echo(f"{grant.username}: {grant.scope}")
        else:
            typer.echo(str(client.authorization.get_scope(args[0], args[1])))


@auth_app.command("set")
def set_scope(
    ctx: typer.Context,
    username: str = typer.Argument(...),
    scope: str = typer.Argument(..., help="none, reader, writer or owner"),
    repo: str = typer.Argument(...),
) -> None:
    """Set the scope of access that USERNAME has to REPO."""
    with _client(ctx) as client:
        client.authorization.set_scope(username, parse_scope(scope), repo)


@auth_app.command("list-admins")
def list_admins(ctx: typer.Context) -> None:
    """List the current cluster admins."""
    with _client(ctx) as client:
        for admin in sorted(client.authorization.list_admins()):
            typer.echo(admin)


@auth_app.command("modify-admins")
def modify_admins(
    ctx: typer.Context,
    add: list[str] = typer.Option(None, "--add", help="Comma-separated list of users to grant admin status"),
    remove: list[str] = typer.Option(None, "--remove", help="Comma-separated list of users to revoke admin status"),
) -> None:
    """Modify the current cluster admins."""
    with _client(ctx) as client:
        client.authorization.modify_admins(add=_split_csv(add), remove=_split_csv(remove))


@auth_app.command("get-auth-token")
def get_auth_token(
    ctx: typer.Context,
    username: str = typer.Argument(...),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only print the resulting token, e.g. to pipe into use-auth-token",
    ),
    save_to: Path = typer.Option(
        None,
        "--save-to",
        help="Also write the token to a separate config file at this path",
    ),
) -> None:
    """Get an auth token that authenticates the holder as USERNAME (admins only)."""
    with _client(ctx) as client:
        credential = client.authorization.get_auth_token(username)
        if save_to is not None:
            FileCredentialStore(save_to).write(credential)
        if quiet:
            typer.echo(credential.token)
        else:
            typer.echo(
                f"New credentials:\n  Subject: {credential.subject}\n  Token: {credential.token}"
            )


@auth_app.command("use-auth-token")
def use_auth_token(ctx: typer.Context) -> None:
    """Read an auth token from stdin and write it to your config file."""
    with _client(ctx) as client:
        client.session.use_delegated_token()


if __name__ == "__main__":
    app()
