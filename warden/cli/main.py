"""Warden command-line entry point."""

import cyclopts

from warden.cli.commands import db, serve, token, users

app = cyclopts.App(name="warden", help="Role-gated user and activity-log service")
app.command(serve.app)
app.command(db.app)
app.command(users.app)
app.command(token.app)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
