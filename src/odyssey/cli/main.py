"""Odyssey CLI — talk to a running Odyssey server from the terminal.

Usage:
    odyssey register me@example.com "Me" --password s3cret!   # create account, print token
    odyssey login me@example.com --password s3cret!           # print a fresh token
    odyssey me                                                # who does my token belong to
    odyssey journals                                          # my journals
    odyssey public --page 0 --size 10                         # public feed
    odyssey search lisbon                                     # location search

The token is sent as "Authorization: Bearer <token>". Pass it with
--token or export ODYSSEY_TOKEN=... after logging in.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8080"


def _api_url() -> str:
    return os.environ.get("ODYSSEY_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.Client:
    """Build an HTTP client pointed at the Odyssey backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.Client(base_url=_api_url(), timeout=30.0, headers=headers)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "—")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _check(resp: httpx.Response) -> dict | list:
    """Exit with the server's error detail on non-2xx responses."""
    if resp.is_success:
        return resp.json() if resp.content else {}
    try:
        detail = resp.json().get("detail", resp.text)
    except ValueError:
        detail = resp.text
    click.secho(f"Error {resp.status_code}: {detail}", fg="red", err=True)
    sys.exit(1)


def _require_token(token: Optional[str]) -> str:
    if not token:
        click.secho(
            "Error: --token required (or set ODYSSEY_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return token


_JOURNAL_COLUMNS = [
    ("ID", "id", 36),
    ("TITLE", "title", 30),
    ("PUBLIC", "is_public", 6),
    ("CREATED", "created_at", 19),
]


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="odyssey")
def main():
    """Odyssey — travel journals from the command line."""


token_option = click.option(
    "--token", envvar="ODYSSEY_TOKEN", help="Auth token (or set ODYSSEY_TOKEN)"
)


@main.command()
@click.argument("email")
@click.argument("name")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
def register(email: str, name: str, password: str):
    """Create an account and print its token."""
    with _client() as c:
        data = _check(
            c.post(
                "/api/auth/register",
                json={"email": email, "name": name, "password": password},
            )
        )
    click.secho(f"Registered {data['user']['email']}", fg="green", err=True)
    click.echo(data["token"])


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Sign in and print a token."""
    with _client() as c:
        data = _check(
            c.post("/api/auth/login", json={"email": email, "password": password})
        )
    click.echo(data["token"])


@main.command()
@token_option
def me(token: Optional[str]):
    """Show the account the token belongs to."""
    with _client(_require_token(token)) as c:
        click.echo(_pretty_json(_check(c.get("/api/auth/me"))))


@main.command()
@token_option
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def journals(token: Optional[str], as_json: bool):
    """List your own journals."""
    with _client(_require_token(token)) as c:
        rows = _check(c.get("/api/journals/my"))
    if as_json:
        click.echo(_pretty_json(rows))
    else:
        _print_table(rows, _JOURNAL_COLUMNS)


@main.command()
@click.option("--page", default=0, show_default=True)
@click.option("--size", default=20, show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def public(page: int, size: int, as_json: bool):
    """Browse the public journal feed."""
    with _client() as c:
        data = _check(c.get("/api/journals/public", params={"page": page, "size": size}))
    if as_json:
        click.echo(_pretty_json(data))
        return
    _print_table(data["items"], _JOURNAL_COLUMNS)
    click.echo(f"\npage {data['page']} · {len(data['items'])} of {data['total']}")


@main.command()
@click.argument("query")
@token_option
def search(query: str, token: Optional[str]):
    """Search journal locations by name, city or country."""
    with _client(token) as c:
        rows = _check(c.get("/api/locations/search", params={"q": query}))
    _print_table(
        rows,
        [("NAME", "name", 25), ("CITY", "city", 20), ("COUNTRY", "country", 20)],
    )


if __name__ == "__main__":
    main()
