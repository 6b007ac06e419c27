from __future__ import annotations

from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .bounded import SingletonSlot
from .interfaces import KeyValueDocumentStore

ACCESSIBILITY_SETTINGS_KEY = "accessibility_settings"

ColorBlindMode = Literal["none", "protanopia", "deuteranopia", "tritanopia"]
CursorSize = Literal["normal", "large", "extra-large"]
FocusIndicator = Literal["default", "enhanced", "high-visibility"]


class AccessibilitySettings(BaseModel):
    """
    Mirrors the on-disk accessibility.json slot:
      { "accessibility_settings": { "high_contrast": false, "text_scaling": 1.0, ... } }

    Fields missing from a stored document take their defaults; unknown fields are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    # Display
    high_contrast: bool = False
    reduced_motion: bool = False
    large_text: bool = False
    text_scaling: float = Field(default=1.0, gt=0)
    color_blind_mode: ColorBlindMode = "none"
    cursor_size: CursorSize = "normal"

    # Audio / assistive tech
    screen_reader: bool = False
    sound_effects: bool = True
    voice_feedback: bool = False

    # Keyboard
    keyboard_navigation: bool = True
    sticky_keys: bool = False
    slow_keys: bool = False
    slow_keys_delay: int = Field(default=300, ge=0)
    focus_indicator: FocusIndicator = "default"

    # Reading
    simplified_ui: bool = False
    reading_guide: bool = False
    dyslexia_font: bool = False
    line_spacing: float = Field(default=1.5, gt=0)
    word_spacing: float = Field(default=0.0, ge=0)


class AccessibilityStateRepository(Protocol):
    def get_settings(self) -> AccessibilitySettings | None:
        ...

    def save_settings(self, settings: AccessibilitySettings) -> None:
        ...


class DocumentAccessibilityStateRepository(AccessibilityStateRepository):
    def __init__(self, store: KeyValueDocumentStore):
        self._slot = SingletonSlot(store, ACCESSIBILITY_SETTINGS_KEY, AccessibilitySettings)

    def get_settings(self) -> AccessibilitySettings | None:
        return self._slot.get()

    def save_settings(self, settings: AccessibilitySettings) -> None:
        self._slot.set(settings)
