# adstudio/features/image_ad/prompt.py
from typing import List, Optional

from adstudio.constants import IMAGE_RESOLUTION_PRESETS
from adstudio.errors import MissingRequiredInput, MissingWatermarkAsset
from adstudio.schemas import (
    AspectRatio,
    AttachmentRole,
    ImageGenerationRequest,
    ImageResolution,
    MediaAttachment,
    WatermarkKind,
    WatermarkPosition,
    WatermarkSpec,
)

_ORDINALS = ["first", "second", "third", "fourth"]

_POSITION_TEXT = {
    WatermarkPosition.TOP_LEFT: "top-left corner",
    WatermarkPosition.TOP_CENTER: "top-center edge",
    WatermarkPosition.TOP_RIGHT: "top-right corner",
    WatermarkPosition.MIDDLE_LEFT: "middle-left edge",
    WatermarkPosition.CENTER: "center",
    WatermarkPosition.MIDDLE_RIGHT: "middle-right edge",
    WatermarkPosition.BOTTOM_LEFT: "bottom-left corner",
    WatermarkPosition.BOTTOM_CENTER: "bottom-center edge",
    WatermarkPosition.BOTTOM_RIGHT: "bottom-right corner",
}


def _sentence(text: str) -> str:
    text = text.strip()
    return text if text.endswith((".", "!", "?")) else f"{text}."


def _opacity_percent(opacity: float) -> int:
    # half-up, so 0.125 -> 13
    return int(opacity * 100 + 0.5)


def watermark_directive(watermark: Optional[WatermarkSpec]) -> str:
    """Empty string when no watermark should be drawn."""
    if watermark is None or not watermark.enabled:
        return ""
    where = _POSITION_TEXT[watermark.position]
    pct = _opacity_percent(watermark.opacity)
    if watermark.kind == WatermarkKind.IMAGE:
        return (
            f"Use the last image supplied as a watermark. Place it in the {where} "
            f"of the ad at {pct}% opacity, so it reads as a professional brand mark "
            "without hiding the product."
        )
    text = (watermark.text or "").strip()
    if not text:
        return ""
    return (
        f'Add the text "{text}" as a watermark in the {where} of the ad at {pct}% opacity. '
        "Use a clean, legible font that suits the scene."
    )


def build_image_instruction(
    *,
    scene: str,
    aspect_ratio: AspectRatio,
    resolution: ImageResolution,
    model_position: Optional[int] = None,
    background_position: Optional[int] = None,
    watermark: Optional[WatermarkSpec] = None,
) -> str:
    """
    The product is always the first image; model/background positions are the
    0-based slots they were attached in.
    """
    pixels = IMAGE_RESOLUTION_PRESETS[aspect_ratio][resolution]
    parts: List[str] = [
        "Create a professional advertising image for the product shown in the first image.",
        f"Scene: {_sentence(scene)}",
        f"The final image must have a {aspect_ratio.value} aspect ratio at {resolution.value} resolution ({pixels}).",
    ]
    if model_position is not None:
        parts.append(
            f"Feature the person from the {_ORDINALS[model_position]} image as the model in this ad, "
            "interacting naturally with the product. Keep their likeness."
        )
    if background_position is not None:
        parts.append(
            f"Use the {_ORDINALS[background_position]} image as the main backdrop. "
            "Place the product and any model into this setting so the lighting and perspective match."
        )
    wm = watermark_directive(watermark)
    if wm:
        parts.append(wm)
    return " ".join(parts)


def compose_image_request(
    product: Optional[MediaAttachment],
    model: Optional[MediaAttachment] = None,
    background: Optional[MediaAttachment] = None,
    *,
    instruction_text: str,
    aspect_ratio: AspectRatio,
    resolution: ImageResolution,
    watermark: Optional[WatermarkSpec] = None,
) -> ImageGenerationRequest:
    if product is None:
        raise MissingRequiredInput("Please upload a product image first.")
    if not (instruction_text or "").strip():
        raise MissingRequiredInput("Please enter a prompt, pick a preset or extract one from an image.")
    use_watermark_image = bool(watermark and watermark.enabled and watermark.kind == WatermarkKind.IMAGE)
    if use_watermark_image and watermark.image is None:
        raise MissingWatermarkAsset()

    attachments: List[MediaAttachment] = [product]
    roles: List[AttachmentRole] = [AttachmentRole.PRODUCT]
    model_position = background_position = None
    if model is not None:
        model_position = len(attachments)
        attachments.append(model)
        roles.append(AttachmentRole.MODEL)
    if background is not None:
        background_position = len(attachments)
        attachments.append(background)
        roles.append(AttachmentRole.BACKGROUND)
    if use_watermark_image:
        attachments.append(watermark.image)
        roles.append(AttachmentRole.WATERMARK)

    instruction = build_image_instruction(
        scene=instruction_text,
        aspect_ratio=aspect_ratio,
        resolution=resolution,
        model_position=model_position,
        background_position=background_position,
        watermark=watermark,
    )
    return ImageGenerationRequest(
        attachments=attachments,
        roles=roles,
        instruction=instruction,
        aspect_ratio=aspect_ratio,
        resolution=resolution,
    )
