"""
ntfy-sdk CLI - Main entry point.

Commands:
    ntfy-sdk publish <topic> <message>  - Publish a message
    ntfy-sdk subscribe <topic>          - Print messages as JSON lines
    ntfy-sdk version                    - Show the SDK version
"""

import asyncio
import logging
from typing import List, Optional

import typer

from ..client import NtfyClient
from ..config import ClientConfig
from ..exceptions import NtfyError
from ..headers import PublishOptions
from ..listener import Listener

app = typer.Typer(
    name="ntfy-sdk",
    help="Publish to and subscribe from ntfy topics.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _split_action(raw: str) -> tuple:
    label, sep, url = raw.partition("=")
    if not sep or not label or not url:
        raise typer.BadParameter(f"Expected LABEL=URL, got: {raw}")
    return label, url


@app.command()
def publish(
    topic: str = typer.Argument(..., help="Topic to publish to."),
    message: str = typer.Argument(..., help="Message body."),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Message title."),
    tags: Optional[str] = typer.Option(None, "--tags", help="Comma separated tags."),
    priority: Optional[int] = typer.Option(None, "--priority", "-p", help="Priority 1-5."),
    click: Optional[str] = typer.Option(None, "--click", help="URL to open on click."),
    delay: Optional[str] = typer.Option(None, "--delay", help="Schedule delivery (e.g. 30m, tomorrow 10am)."),
    attach: Optional[str] = typer.Option(None, "--attach", help="Attachment URL."),
    icon: Optional[str] = typer.Option(None, "--icon", help="Icon URL."),
    filename: Optional[str] = typer.Option(None, "--filename", help="Attachment filename."),
    email: Optional[str] = typer.Option(None, "--email", help="Forward to this e-mail address."),
    markdown: bool = typer.Option(False, "--markdown", help="Render the body as Markdown."),
    no_cache: bool = typer.Option(False, "--no-cache", help="Do not cache the message on the server."),
    no_firebase: bool = typer.Option(False, "--no-firebase", help="Do not forward to Firebase."),
    view_actions: Optional[List[str]] = typer.Option(
        None, "--view-action", help="Add a view button as LABEL=URL (repeatable)."
    ),
    server: Optional[str] = typer.Option(None, "--server", "-s", help="Server URL."),
    token: Optional[str] = typer.Option(None, "--token", help="Access token."),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Basic auth user."),
    password: Optional[str] = typer.Option(None, "--password", help="Basic auth password."),
):
    """
    Publish a message and print its id.
    """
    options = PublishOptions(
        markdown=markdown,
        cache=not no_cache,
        firebase=not no_firebase,
        priority=priority,
        tags=tags,
        title=title,
        delay=delay,
        attach=attach,
        icon=icon,
        filename=filename,
        click=click,
        email=email,
    )
    for raw in view_actions or []:
        label, url = _split_action(raw)
        options.add_view_action(label, url)

    async def _publish():
        async with NtfyClient(ClientConfig()) as client:
            return await client.publish(
                topic, message, options, token, server, username=user, password=password
            )

    try:
        result = asyncio.run(_publish())
    except (NtfyError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(result.id)


@app.command()
def subscribe(
    topic: str = typer.Argument(..., help="Topic to subscribe to."),
    reconnect: bool = typer.Option(False, "--reconnect", "-r", help="Reconnect after failures."),
    server: Optional[str] = typer.Option(None, "--server", "-s", help="Server URL."),
    token: Optional[str] = typer.Option(None, "--token", help="Access token."),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Basic auth user."),
    password: Optional[str] = typer.Option(None, "--password", help="Basic auth password."),
):
    """
    Print every received event as a JSON line until interrupted.
    """
    try:
        listener = Listener(
            topic,
            token,
            username=user,
            password=password,
            server_url=server,
            config=ClientConfig(),
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    @listener.on_message
    def echo_message(message):
        typer.echo(message.to_json())

    @listener.on_disconnect
    def echo_disconnect(error):
        typer.echo(f"Disconnected: {error}", err=True)

    try:
        asyncio.run(listener.start(reconnect=reconnect))
    except KeyboardInterrupt:
        pass
    except NtfyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show the ntfy SDK version.
    """
    from ntfy_sdk import __version__
    typer.echo(f"ntfy-sdk v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
