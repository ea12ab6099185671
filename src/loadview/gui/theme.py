"""Visual constants for the default loading, failure and retry widgets.

Usage:
    from loadview.gui.theme import Colors, Typography, Styles

    button.setStyleSheet(Styles.RETRY_BUTTON)
"""

from __future__ import annotations


class Colors:
    """Semantic color palette for dark theme."""

    PRIMARY = "#0078d4"
    PRIMARY_HOVER = "#106ebe"
    PRIMARY_PRESSED = "#005a9e"

    ERROR = "#F44336"
    ERROR_HOVER = "#d32f2f"

    SURFACE = "#2a2a2a"

    TEXT_PRIMARY = "#ffffff"
    TEXT_MUTED = "#888888"
    TEXT_DISABLED = "#555555"


class Typography:
    HELPER_TEXT = f"color: {Colors.TEXT_MUTED}; font-style: italic;"
    ERROR_TEXT = f"color: {Colors.ERROR};"


class Styles:
    """Pre-composed Qt stylesheets for widgets.

    Each style includes the :hover, :pressed and :disabled pseudo-states.
    """

    PRIMARY_BUTTON = f"""
        QPushButton {{
            background-color: {Colors.PRIMARY};
            color: white;
            border: none;
            border-radius: 4px;
            padding: 8px 20px;
            font-weight: bold;
            min-width: 100px;
        }}
        QPushButton:hover {{
            background-color: {Colors.PRIMARY_HOVER};
        }}
        QPushButton:pressed {{
            background-color: {Colors.PRIMARY_PRESSED};
        }}
        QPushButton:disabled {{
            background-color: {Colors.TEXT_DISABLED};
            color: {Colors.TEXT_MUTED};
        }}
    """

    RETRY_BUTTON = f"""
        QPushButton {{
            background-color: {Colors.ERROR};
            color: {Colors.TEXT_PRIMARY};
            border: none;
            border-radius: 4px;
            padding: 6px 16px;
        }}
        QPushButton:hover {{
            background-color: {Colors.ERROR_HOVER};
        }}
        QPushButton:pressed {{
            background-color: {Colors.ERROR_HOVER};
        }}
        QPushButton:disabled {{
            background-color: {Colors.TEXT_DISABLED};
            color: {Colors.TEXT_MUTED};
        }}
    """
