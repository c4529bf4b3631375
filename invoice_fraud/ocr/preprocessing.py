"""Pixel preprocessing applied before a thorough OCR pass."""

from PIL import Image


def adjust_contrast_brightness(
    image: Image.Image,
    gain: float = 1.2,
    offset: float = 10.0,
) -> Image.Image:
    """Apply ``v * gain + offset`` to every channel value, clamped to [0, 255]."""
    if image.mode not in ("L", "RGB"):
        image = image.convert("RGB")
    lut = [max(0, min(255, round(value * gain + offset))) for value in range(256)]
    return image.point(lut * len(image.getbands()))
