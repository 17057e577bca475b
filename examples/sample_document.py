"""Sample artboard with intentional contrast defects.

The document describes a sign-up card on a split background, white on the
left and dark navy on the right, with several deliberately introduced
defects for the rater to detect:

1. **Failing text**: The caption uses light grey text on white.

2. **Mixed background**: The banner straddles the white/navy seam, so two
   samples pass and two fail.

3. **Translucent group**: The footer sits in a 30 % opacity group, which
   washes out otherwise black text.

4. **Unresolvable colour**: The badge text has no colour at all.

5. **Off-canvas text**: A stray label sits entirely outside the artboard.
"""

from __future__ import annotations

from typing import Any

from PIL import Image, ImageDraw

WIDTH = 400
HEIGHT = 300
SEAM_X = 200
NAVY = (16, 24, 64, 255)


def create_background() -> Image.Image:
    """Render the artboard background with every text layer hidden.

    Returns:
        An RGBA image the size of the artboard.
    """
    image = Image.new("RGBA", (WIDTH, HEIGHT), (255, 255, 255, 255))
    ImageDraw.Draw(image).rectangle((SEAM_X, 0, WIDTH - 1, HEIGHT - 1), fill=NAVY)
    return image


def _text(name: str, x: float, y: float, w: float, h: float, **extra: Any) -> dict[str, Any]:
    layer = {
        "type": "text",
        "name": name,
        "frame": {"x": x, "y": y, "w": w, "h": h},
        "font_size": 16,
        "font_name": "Roboto-Regular",
        "text_color": "#000000",
    }
    layer.update(extra)
    return layer


def create_document() -> dict[str, Any]:
    """Return the layer document of the sample page."""
    return {
        "name": "Page 1",
        "layers": [
            {
                "type": "artboard",
                "name": "Sign up",
                "frame": {"x": 0, "y": 0, "w": WIDTH, "h": HEIGHT},
                "layers": [
                    _text("Title", 20, 20, 160, 32, font_size=32, font_name="Roboto-Bold"),
                    _text("Caption", 20, 60, 160, 20, text_color="#c8c8c8"),
                    _text("Banner", 150, 100, 100, 20),
                    {
                        "type": "group",
                        "name": "Footer",
                        "frame": {"x": 10, "y": 240, "w": 180, "h": 40},
                        "opacity": 0.3,
                        "layers": [_text("Legal", 10, 10, 160, 16, font_size=12)],
                    },
                    {
                        "type": "symbol_instance",
                        "name": "Badge",
                        "symbol_id": "badge",
                        "frame": {"x": 240, "y": 20, "w": 120, "h": 40},
                    },
                    _text("Stray", 500, 500, 80, 20),
                    _text("Hidden", 20, 150, 80, 20, visible=False),
                ],
            }
        ],
        "symbols": {
            "badge": {
                "type": "symbol_master",
                "name": "Badge",
                "layers": [
                    _text("Badge label", 10, 10, 100, 20, text_color=None),
                    {
                        "type": "group",
                        "name": "Tinted",
                        "frame": {"x": 0, "y": 0, "w": 120, "h": 40},
                        "tint": "#ffffff",
                        "layers": [_text("Badge count", 80, 10, 30, 20)],
                    },
                ],
            }
        },
    }
