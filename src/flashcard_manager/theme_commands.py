"""Theme commands for flashcards CLI."""

from cyclopts import App

from flashcard_manager.config import get_config
from flashcard_manager.theme import PALETTES, ThemePreferences

theme_app = App(name="theme", help="Manage display theme")


@theme_app.command
def show() -> None:
    """Show the current theme."""
    prefs = ThemePreferences.load(get_config())
    print(f"Mode: {prefs.mode}")
    print(f"Palette: {prefs.palette}")


@theme_app.command
def toggle(global_: bool = False) -> None:
    """Switch between light and dark mode."""
    config = get_config(use_global=global_)
    prefs = ThemePreferences.load(config)
    mode = prefs.toggle_mode()
    prefs.save(config)
    print(f"Mode set to {mode}")


@theme_app.command
def palette(name: str | None = None, global_: bool = False) -> None:
    """Set the color palette, or list the available palettes when no name is given."""
    if name is None:
        for available in PALETTES:
            print(available)
        return

    config = get_config(use_global=global_)
    prefs = ThemePreferences.load(config)
    prefs.set_palette(name)
    prefs.save(config)
    print(f"Palette set to {name}")
