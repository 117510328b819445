"""Render a token's traits as a standalone SVG document."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final
from xml.sax.saxutils import quoteattr

if TYPE_CHECKING:
    from tokensmith.domain.model import Token, TraitSet

CANVAS_SIZE: Final[int] = 400

_BODY_WIDTHS: Final[tuple[int, ...]] = (150, 170, 190, 210)
_EYE_RADII: Final[tuple[int, ...]] = (10, 12, 14, 16, 18, 20)
_MOUTH_PATHS: Final[tuple[str, ...]] = (
    "M160 250 Q200 280 240 250",
    "M160 260 L240 260",
    "M160 265 Q200 240 240 265",
    "M170 255 Q200 300 230 255 Z",
    "M150 250 Q200 270 250 250 Q200 290 150 250 Z",
)
_HEAD_PATHS: Final[tuple[str, ...]] = (
    "",
    "M130 110 Q200 40 270 110 Z",
    "M120 120 L280 120 L260 70 L140 70 Z",
    "M140 110 L200 30 L260 110 Z",
    "M125 115 Q150 60 200 80 Q250 60 275 115 Z",
    "M110 120 L290 120 L290 105 L110 105 Z M150 105 L150 50 L250 50 L250 105 Z",
    "M130 115 Q160 90 180 115 Q200 90 220 115 Q240 90 270 115 Z",
)
_SHIRT_PATHS: Final[tuple[str, ...]] = (
    "M110 400 L120 330 Q200 300 280 330 L290 400 Z",
    "M100 400 L115 320 L200 350 L285 320 L300 400 Z",
    "M120 400 L125 335 Q200 315 275 335 L280 400 Z",
    "M105 400 L120 325 L170 325 L200 360 L230 325 L280 325 L295 400 Z",
    "M115 400 Q130 320 200 320 Q270 320 285 400 Z",
    "M110 400 L110 330 L290 330 L290 400 Z",
)


def _hsl(hue: int, saturation: int = 60, lightness: int = 50) -> str:
    return f"hsl({hue},{saturation}%,{lightness}%)"


def _element(tag: str, **attributes: object) -> str:
    rendered = " ".join(
        f"{name.rstrip('_').replace('_', '-')}={quoteattr(str(value))}"
        for name, value in attributes.items()
    )
    return f"<{tag} {rendered}/>"


def render_svg(token: Token, traits: TraitSet) -> str:
    """Compose the token image. Output depends only on ``token`` and ``traits``."""

    skin = _hsl(traits["skin_hue"], 55, 45)
    body_width = _BODY_WIDTHS[traits["body"] % len(_BODY_WIDTHS)]
    eye_radius = _EYE_RADII[traits["eyes"] % len(_EYE_RADII)]

    parts = [
        _element(
            "rect",
            width=CANVAS_SIZE,
            height=CANVAS_SIZE,
            fill=_hsl(traits["background_hue"], 40, 85),
        ),
        _element(
            "ellipse",
            cx=CANVAS_SIZE // 2,
            cy=210,
            rx=body_width // 2,
            ry=130,
            fill=skin,
        ),
        _element(
            "path",
            d=_SHIRT_PATHS[traits["shirt"] % len(_SHIRT_PATHS)],
            fill=_hsl(traits["shirt_hue"]),
        ),
    ]
    for eye_x in (165, 235):
        parts.append(_element("circle", cx=eye_x, cy=180, r=eye_radius, fill="#ffffff"))
        parts.append(
            _element(
                "circle",
                cx=eye_x,
                cy=180,
                r=eye_radius // 2,
                fill=_hsl(traits["eye_hue"], 70, 30),
            )
        )
    if traits["glasses"]:
        parts.append(
            _element(
                "path",
                d=f"M140 180 H{165 - eye_radius} M{165 + eye_radius} 180 H{235 - eye_radius} "
                f"M{235 + eye_radius} 180 H260",
                stroke="#222222",
                stroke_width=traits["glasses"] * 2,
                fill="none",
            )
        )
    parts.append(
        _element(
            "path",
            d=_MOUTH_PATHS[traits["mouth"] % len(_MOUTH_PATHS)],
            stroke=_hsl(traits["skin_hue"], 60, 25),
            stroke_width=6,
            fill="none",
        )
    )
    head_path = _HEAD_PATHS[traits["head"] % len(_HEAD_PATHS)]
    if head_path:
        parts.append(_element("path", d=head_path, fill=_hsl(traits["head_hue"], 65, 40)))

    title = f"Token #{token.token_id} (generation {token.generation})"
    if token.is_founder:
        title += ", founder"
    body = "".join(parts)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {CANVAS_SIZE} {CANVAS_SIZE}" '
        f'width="{CANVAS_SIZE}" height="{CANVAS_SIZE}">'
        f"<title>{title}</title>{body}</svg>"
    )
