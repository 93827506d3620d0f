"""
wasignup CLI main module.

Runs the onboarding service under uvicorn for development and production.
"""

import subprocess
import sys

import typer

APP_FACTORY = "wasignup.core.app:create_app"

app = typer.Typer(help="WhatsApp embedded signup backend CLI")


def build_uvicorn_command(
    host: str, port: int, reload: bool = False, workers: int | None = None
) -> list[str]:
    """uvicorn invocation for the application factory."""
    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        APP_FACTORY,
        "--factory",
        "--host",
        host,
        "--port",
        str(port),
    ]
    if reload:
        cmd.append("--reload")
    if workers is not None:
        cmd.extend(["--workers", str(workers)])
    return cmd


def _default_port() -> int:
    from wasignup.core.config.settings import settings

    return settings.port


def _run(cmd: list[str], mode: str, port: int) -> None:
    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        typer.echo(
            f"❌ {mode} server failed to start (exit code: {e.returncode})",
            err=True,
        )
        typer.echo("", err=True)
        typer.echo("Common issues:", err=True)
        typer.echo("• FACEBOOK_APP_ID / FACEBOOK_APP_SECRET not set", err=True)
        typer.echo(f"• Port {port} already in use", err=True)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        typer.echo(f"👋 {mode} server stopped")


@app.command()
def dev(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(None, "--port", "-p", help="Port (defaults to PORT)"),
):
    """
    Run development server with auto-reload.

    Examples:
        wasignup dev
        wasignup dev --port 9000
    """
    port = port or _default_port()
    cmd = build_uvicorn_command(host, port, reload=True)

    typer.echo("🚀 Starting wasignup development server...")
    typer.echo(f"🌐 Server: http://{host}:{port}")
    typer.echo(f"🔗 Embedded signup: http://{host}:{port}/api/whatsapp/setup")
    typer.echo(f"📞 Webhooks: http://{host}:{port}/api/whatsapp/webhooks")
    typer.echo(f"📝 Docs: http://{host}:{port}/docs")
    typer.echo()

    _run(cmd, "Development", port)


@app.command()
def prod(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(None, "--port", "-p", help="Port (defaults to PORT)"),
):
    """
    Run production server (no auto-reload).

    Runs a single worker: onboarded accounts live in process memory.
    """
    port = port or _default_port()
    cmd = build_uvicorn_command(host, port, workers=1)

    typer.echo("🚀 Starting wasignup production server...")
    typer.echo(f"🌐 Server: http://{host}:{port}")
    typer.echo()

    _run(cmd, "Production", port)


if __name__ == "__main__":
    app()
