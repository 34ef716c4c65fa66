"""Theme preferences stored in configuration."""

from dataclasses import dataclass

import structlog

from flashcard_manager.config import Config
from flashcard_manager.errors import ValidationError

logger = structlog.get_logger()

MODES = ("light", "dark")
PALETTES = ("calm-spark",)

MODE_KEY = "theme.mode"
PALETTE_KEY = "theme.palette"


@dataclass
class ThemePreferences:
    """Display mode and color palette."""

    mode: str = "light"
    palette: str = "calm-spark"

    @classmethod
    def load(cls, config: Config) -> "ThemePreferences":
        """Read preferences, falling back to defaults for missing or unknown values."""
        prefs = cls()
        mode = config.get(MODE_KEY)
        if mode in MODES:
            prefs.mode = mode
        elif mode is not None:
            logger.warning("Ignoring unknown theme mode", mode=mode)
        palette = config.get(PALETTE_KEY)
        if palette in PALETTES:
            prefs.palette = palette
        elif palette is not None:
            logger.warning("Ignoring unknown theme palette", palette=palette)
        return prefs

    def save(self, config: Config) -> None:
        config.set(MODE_KEY, self.mode)
        config.set(PALETTE_KEY, self.palette)

    def toggle_mode(self) -> str:
        self.mode = "dark" if self.mode == "light" else "light"
        return self.mode

    def set_palette(self, palette: str) -> None:
        if palette not in PALETTES:
            raise ValidationError(f"Unknown palette: '{palette}'. Available palettes: {list(PALETTES)}")
        self.palette = palette
