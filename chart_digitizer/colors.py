# chart_digitizer/colors.py
import numpy as np

from .types import ColorProfile

# ---------- Registry ----------
# Order matters: ties in dominant-color detection go to the first entry.
DEFAULT_PROFILES: tuple[ColorProfile, ...] = (
    ColorProfile("blue", r=(0, 99), g=(0, 149), b=(101, 255)),
    ColorProfile("red", r=(150, 255), g=(0, 100), b=(0, 100)),
    ColorProfile("green", r=(0, 100), g=(120, 255), b=(0, 100)),
    ColorProfile("black", r=(0, 60), g=(0, 60), b=(0, 60)),
)


def get_profile(name: str, profiles=DEFAULT_PROFILES) -> ColorProfile:
    for p in profiles:
        if p.name == name:
            return p
    known = ", ".join(p.name for p in profiles)
    raise KeyError(f"Unknown color profile '{name}' (known: {known})")


def matches_color_profile(pixel, profile: ColorProfile) -> bool:
    """Closed-interval test on R, G and B; alpha is ignored."""
    r, g, b = pixel[0], pixel[1], pixel[2]
    return (
        profile.r[0] <= r <= profile.r[1]
        and profile.g[0] <= g <= profile.g[1]
        and profile.b[0] <= b <= profile.b[1]
    )


def profile_mask(rgb: np.ndarray, profile: ColorProfile) -> np.ndarray:
    """Boolean mask of ``rgb[..., :3]`` pixels matching ``profile``."""
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    return (
        (r >= profile.r[0])
        & (r <= profile.r[1])
        & (g >= profile.g[0])
        & (g <= profile.g[1])
        & (b >= profile.b[0])
        & (b <= profile.b[1])
    )
