"""
Partner portal branding.

Company administrators store partial overrides; rendering needs a
complete object. ``resolve`` coalesces field by field against the
system defaults and never fails.
"""
import re
from dataclasses import asdict, dataclass, fields
from typing import Any, Callable, Dict, Mapping, Optional

BUTTON_RADIUS = {
    "rounded": "25px",
    "square": "6px",
    "gradient": "12px",
}
DEFAULT_BUTTON_STYLE = "rounded"

LOGO_SIZE = "full"
BACKGROUND_SIZE = "full"

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

ImageUrlLookup = Callable[[str, str], Optional[str]]


@dataclass(frozen=True)
class BrandingDefaults:
    primary_color: str = "#2563eb"
    secondary_color: str = "#2dd4da"
    logo_url: str = ""
    background_video_url: str = ""

    @classmethod
    def from_settings(cls, settings) -> "BrandingDefaults":
        return cls(
            primary_color=settings.default_primary_color,
            secondary_color=settings.default_secondary_color,
            logo_url=settings.default_logo_url,
            background_video_url=settings.default_background_video_url,
        )


@dataclass(frozen=True)
class BrandingOverrides:
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    logo_ref: Optional[str] = None
    background_ref: Optional[str] = None
    background_video_ref: Optional[str] = None
    button_style: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "BrandingOverrides":
        data = data or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known and isinstance(v, str) and v})

    def merged(self, changes: Mapping[str, Any]) -> "BrandingOverrides":
        """
        Apply a partial update; an explicit ``None`` or ``""`` clears a field.
        Non-string values are ignored.
        """
        current = asdict(self)
        for key in current:
            if key not in changes:
                continue
            value = changes[key]
            if value is None or value == "":
                current[key] = None
            elif isinstance(value, str):
                current[key] = value
        return BrandingOverrides(**current)

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class ResolvedBranding:
    primary_color: str
    secondary_color: str
    logo_url: str
    background_url: Optional[str]
    background_video_url: Optional[str]
    background_gradient: str
    button_style: str
    button_radius: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _color(value: Optional[str], default: str) -> str:
    if isinstance(value, str) and _HEX_COLOR.match(value):
        return value
    return default


def _image(ref: Optional[str], size: str, image_url: Optional[ImageUrlLookup]) -> Optional[str]:
    if not isinstance(ref, str) or not ref or image_url is None:
        return None
    return image_url(ref, size)


def resolve(
    overrides: BrandingOverrides,
    defaults: BrandingDefaults = BrandingDefaults(),
    image_url: Optional[ImageUrlLookup] = None,
) -> ResolvedBranding:
    primary = _color(overrides.primary_color, defaults.primary_color)
    secondary = _color(overrides.secondary_color, defaults.secondary_color)

    button_style = overrides.button_style
    if not isinstance(button_style, str) or button_style not in BUTTON_RADIUS:
        button_style = DEFAULT_BUTTON_STYLE

    logo_url = _image(overrides.logo_ref, LOGO_SIZE, image_url) or defaults.logo_url

    # A custom background image replaces the video; otherwise the
    # custom video (or the stock one) plays over the gradient.
    background_url = _image(overrides.background_ref, BACKGROUND_SIZE, image_url)
    background_video_url = None
    if background_url is None:
        background_video_url = (
            _image(overrides.background_video_ref, BACKGROUND_SIZE, image_url)
            or defaults.background_video_url
            or None
        )

    return ResolvedBranding(
        primary_color=primary,
        secondary_color=secondary,
        logo_url=logo_url,
        background_url=background_url,
        background_video_url=background_video_url,
        background_gradient=f"linear-gradient(135deg, {primary} 0%, {secondary} 100%)",
        button_style=button_style,
        button_radius=BUTTON_RADIUS[button_style],
    )
