"""sRGB colour arithmetic used by the contrast rater.

Implements the WCAG 2.0 relative-luminance formula, linear colour mixing
(alpha compositing of text over its background), and the contrast ratio of
two luminances.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Color:
    """An sRGB colour with channels in 0–255.

    Sampled and parsed colours carry integer channels. Colours produced by
    :func:`mix` may carry fractional channels, which are kept as-is for the
    luminance computation.

    Attributes:
        r: Red channel.
        g: Green channel.
        b: Blue channel.
        a: Alpha channel; ``255`` is fully opaque.
    """

    r: float
    g: float
    b: float
    a: float = 255

    @classmethod
    def from_unit(cls, r: float, g: float, b: float, a: float = 1.0) -> Color:
        """Build a colour from 0–1 float components.

        Each component is scaled by 255 and rounded, the way design tools
        expose their colour objects.

        Args:
            r: Red in [0, 1].
            g: Green in [0, 1].
            b: Blue in [0, 1].
            a: Alpha in [0, 1].

        Returns:
            The colour.
        """
        return cls(round(255 * r), round(255 * g), round(255 * b), round(255 * a))

    @classmethod
    def from_hex(cls, hex_color: str) -> Color | None:
        """Parse a hex colour string.

        Supports ``#RGB``, ``#RRGGBB``, ``#RRGGBBAA``, and ``#RRRGGGBBB`` formats.

        Args:
            hex_color: The hex colour string.

        Returns:
            The colour, or ``None`` on failure.
        """
        color = hex_color.strip().lstrip("#")
        try:
            if len(color) == 3:
                return cls(int(color[0] * 2, 16), int(color[1] * 2, 16), int(color[2] * 2, 16))
            if len(color) == 6:
                return cls(int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16))
            if len(color) == 8:
                return cls(
                    int(color[0:2], 16),
                    int(color[2:4], 16),
                    int(color[4:6], 16),
                    int(color[6:8], 16),
                )
            if len(color) == 9:
                return cls(
                    int(color[0:3], 16) >> 4,
                    int(color[3:6], 16) >> 4,
                    int(color[6:9], 16) >> 4,
                )
        except ValueError:
            pass
        return None

    @classmethod
    def parse(cls, value: Any) -> Color | None:
        """Parse a colour from a hex string or a mapping of 0–1 components.

        Args:
            value: ``"#RRGGBB"``-style string, or ``{"r", "g", "b", "a"}``
                mapping with unit floats (``a`` optional).

        Returns:
            The colour, or ``None`` if *value* is absent or unparsable.
        """
        if isinstance(value, str):
            return cls.from_hex(value)
        if isinstance(value, dict):
            try:
                return cls.from_unit(
                    float(value["r"]),
                    float(value["g"]),
                    float(value["b"]),
                    float(value.get("a", 1.0)),
                )
            except (KeyError, TypeError, ValueError):
                return None
        return None

    def to_rgba(self) -> tuple[int, int, int, int]:
        """Return the colour as a rounded ``(R, G, B, A)`` tuple."""
        return (round(self.r), round(self.g), round(self.b), round(self.a))

    def to_hex(self) -> str:
        """Return the colour as ``#RRGGBB``, or ``#RRGGBBAA`` when translucent."""
        r, g, b, a = self.to_rgba()
        if a == 255:
            return f"#{r:02x}{g:02x}{b:02x}"
        return f"#{r:02x}{g:02x}{b:02x}{a:02x}"


def luminance(color: Color) -> float:
    """Compute the WCAG 2.0 relative luminance of an sRGB colour.

    - Linearise each channel: if C ≤ 0.03928, C_lin = C/12.92;
      otherwise C_lin = ((C + 0.055)/1.055)^2.4
    - L = 0.2126·R + 0.7152·G + 0.0722·B

    The alpha channel is ignored.

    Args:
        color: The colour.

    Returns:
        Relative luminance in [0, 1].
    """
    channels: list[float] = []
    for c in (color.r, color.g, color.b):
        s = c / 255
        if s <= 0.03928:
            channels.append(s / 12.92)
        else:
            channels.append(((s + 0.055) / 1.055) ** 2.4)
    return 0.2126 * channels[0] + 0.7152 * channels[1] + 0.0722 * channels[2]


def mix(background: Color, foreground: Color, amount_percent: float | None = None) -> Color:
    """Linearly interpolate from *background* toward *foreground*.

    An amount of exactly ``0`` keeps the background; any other falsy amount
    (``None``) means 50 %. Amounts outside [0, 100] extrapolate. Alpha is not
    interpolated and the result is opaque.

    Args:
        background: The colour at 0 %.
        foreground: The colour at 100 %.
        amount_percent: Interpolation amount in percent.

    Returns:
        The mixed colour.
    """
    amount = 0 if amount_percent == 0 else (amount_percent or 50)
    p = amount / 100
    return Color(
        r=(foreground.r - background.r) * p + background.r,
        g=(foreground.g - background.g) * p + background.g,
        b=(foreground.b - background.b) * p + background.b,
    )


def contrast_ratio(lum_a: float, lum_b: float) -> float:
    """Compute the WCAG contrast ratio of two relative luminances.

    Args:
        lum_a: First luminance in [0, 1].
        lum_b: Second luminance in [0, 1].

    Returns:
        Contrast ratio in [1, 21]; symmetric in its arguments.
    """
    lighter = max(lum_a, lum_b)
    darker = min(lum_a, lum_b)
    return (lighter + 0.05) / (darker + 0.05)
