"""Configuration commands for flashcards CLI."""

from cyclopts import App

from flashcard_manager.config import get_config

config_app = App(name="config", help="Manage configuration")

BACKENDS = ("file", "notion")


def _scope(global_: bool) -> str:
    return "global" if global_ else "local"


@config_app.command
def set(key: str, value: str, global_: bool = False) -> None:
    """Set a configuration setting.

    Args:
        key: Configuration key, e.g. backend, file.path, notion.token
        value: Configuration value
        global_: Store in ~/.flashcards instead of the current directory
    """
    if key == "backend" and value not in BACKENDS:
        raise ValueError(f"Unknown backend: '{value}'. Available backends: {list(BACKENDS)}")
    get_config(use_global=global_).set(key, value)
    shown = "********" if key.endswith("token") else value
    print(f"Set {key} = {shown} ({_scope(global_)})")


@config_app.command
def unset(key: str, global_: bool = False) -> None:
    """Unset a configuration setting."""
    get_config(use_global=global_).unset(key)
    print(f"Unset {key} ({_scope(global_)})")


@config_app.command
def get(key: str, global_: bool = False) -> None:
    """Get the value of a configuration setting, falling back to global config."""
    value = get_config(use_global=global_).get(key)
    print(f"{key} is not set" if value is None else f"{key} = {value}")


@config_app.command(name="list")
def list_config(global_: bool = False) -> None:
    """List all configuration settings."""
    settings = get_config(use_global=global_).list()
    if not settings:
        print(f"No {_scope(global_)} configuration settings")
        return

    for key, value in settings.items():
        print(f"{key} = {value}")


@config_app.command
def path(global_: bool = False) -> None:
    """Show the config file location."""
    print(get_config(use_global=global_).config_file)
