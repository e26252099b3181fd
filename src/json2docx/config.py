"""Population options.

A single :class:`PopulateOptions` value is threaded through the populator,
the walker and the error report. The CLI flags and the HTTP form fields map
one-to-one onto its fields.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class PopulateOptions:
    """Switches controlling how a template is populated."""

    # Write "\n" in plain-text values as w:br elements instead of raw text.
    replace_line_breaks: bool = False
    # Prepend a linked list of errors to the output document.
    show_errors_in_document: bool = False
    error_heading: str = "Template errors"
    # RGB hex, no leading '#'.
    error_color: str = "FF0000"

    def derive(self, **overrides) -> PopulateOptions:
        """Return a copy with selected fields overridden."""
        return replace(self, **overrides)


DEFAULT_OPTIONS = PopulateOptions()
