"""Per-model input schemas and result extractors, keyed by upstream routing id.

Each fal endpoint takes its own parameter set with its own defaults.  A
caller's overrides win over the defaults (``None`` counts as absent) and the
prompt is always the request's own.  Endpoints without a profile get the
prompt plus the overrides unchanged.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from app.catalog import ModelDescriptor
from app.gateway.normalize import as_ref, probe

InputBuilder = Callable[[str, dict[str, Any]], dict[str, Any]]
Extractor = Callable[[Any], dict[str, Any] | None]


def _given(params: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


def with_defaults(**defaults: Any) -> InputBuilder:
    def build(prompt: str, params: dict[str, Any]) -> dict[str, Any]:
        return {**defaults, **_given(params), "prompt": prompt}

    return build


def passthrough(prompt: str, params: dict[str, Any]) -> dict[str, Any]:
    return {**_given(params), "prompt": prompt}


@dataclass(frozen=True)
class ModelProfile:
    build_input: InputBuilder = passthrough
    # None means the category's normalization strategy applies
    extract: Extractor | None = None


# --- Speech synthesis ---

SPEECH_DEFAULTS: dict[str, Any] = {
    "voice": "Aria",
    "stability": 0.5,
    "similarity_boost": 0.75,
    "speed": 1,
}

SPEECH_AUDIO_PATHS: list[tuple] = [("data", "audio"), ("result", "audio"), ("audio",)]


def build_speech_input(prompt: str, params: dict[str, Any]) -> dict[str, Any]:
    given = _given(params)
    voice = {key: given.get(key, default) for key, default in SPEECH_DEFAULTS.items()}
    return {"text": prompt, **voice}


def extract_speech_audio(payload: Any) -> dict[str, Any] | None:
    for path in SPEECH_AUDIO_PATHS:
        ref = as_ref(probe(payload, path))
        if ref:
            return {"audio": ref}
    return None


MODEL_PROFILES: dict[str, ModelProfile] = {
    "fal-ai/stable-diffusion-v35-medium": ModelProfile(with_defaults(
        negative_prompt="",
        image_size="landscape_4_3",
        num_inference_steps=40,
        guidance_scale=4.5,
        num_images=1,
        enable_safety_checker=True,
        output_format="jpeg",
    )),
    "fal-ai/ideogram/v3": ModelProfile(with_defaults(
        rendering_speed="BALANCED",
        expand_prompt=True,
        num_images=1,
        image_size="square_hd",
    )),
    "fal-ai/nano-banana-pro": ModelProfile(with_defaults(
        num_images=1,
        aspect_ratio="1:1",
        output_format="png",
        resolution="1K",
    )),
    "fal-ai/flux-pro/v1.1-ultra": ModelProfile(with_defaults(
        num_images=1,
        enable_safety_checker=True,
        output_format="jpeg",
        safety_tolerance="2",
        image_prompt_strength=0.1,
        aspect_ratio="16:9",
    )),
    "fal-ai/flux-2": ModelProfile(with_defaults(
        guidance_scale=2.5,
        num_inference_steps=28,
        image_size="landscape_4_3",
        num_images=1,
        acceleration="regular",
        enable_safety_checker=True,
        output_format="png",
    )),
    "fal-ai/flux-2-pro": ModelProfile(with_defaults(
        image_size="landscape_4_3",
        safety_tolerance="2",
        enable_safety_checker=True,
        output_format="jpeg",
    )),
    "fal-ai/imagen4/preview/fast": ModelProfile(with_defaults(
        num_images=1,
        aspect_ratio="1:1",
        output_format="png",
    )),
    "fal-ai/gpt-image-1.5": ModelProfile(with_defaults(
        image_size="1024x1024",
        background="auto",
        quality="high",
        num_images=1,
        output_format="png",
    )),
    "fal-ai/bytedance/seedream/v4.5/text-to-image": ModelProfile(with_defaults(
        image_size="auto_2K",
        num_images=1,
        max_images=1,
        enable_safety_checker=True,
    )),
    "fal-ai/ovis-image": ModelProfile(with_defaults(
        image_size="landscape_4_3",
        num_inference_steps=28,
        guidance_scale=5,
        num_images=1,
        enable_safety_checker=True,
        output_format="png",
        acceleration="regular",
    )),
    "imagineart/imagineart-1.5-preview/text-to-image": ModelProfile(with_defaults(
        aspect_ratio="1:1",
        seed=0,
    )),
    "fal-ai/gemini-3-pro-image-preview": ModelProfile(with_defaults(
        num_images=1,
        aspect_ratio="1:1",
        output_format="png",
        resolution="1K",
    )),
    "fal-ai/emu-3.5-image/text-to-image": ModelProfile(with_defaults(
        resolution="720p",
        aspect_ratio="1:1",
        enable_safety_checker=True,
        output_format="png",
    )),
    "fal-ai/piflow": ModelProfile(with_defaults(
        image_size="square_hd",
        num_inference_steps=8,
        num_images=1,
        output_format="jpeg",
        enable_safety_checker=True,
    )),
    "fal-ai/flux/krea": ModelProfile(with_defaults(
        image_size="landscape_4_3",
        num_inference_steps=28,
        guidance_scale=4.5,
        num_images=1,
        enable_safety_checker=True,
        output_format="jpeg",
        acceleration="none",
    )),
    "fal-ai/pika/v2.2/text-to-video": ModelProfile(with_defaults(
        negative_prompt="ugly, bad, terrible",
        aspect_ratio="16:9",
        resolution="1080p",
        duration=5,
    )),
    "fal-ai/sora-2/text-to-video": ModelProfile(with_defaults(
        resolution="720p",
        aspect_ratio="16:9",
        duration=4,
        delete_video=True,
    )),
    "fal-ai/elevenlabs/tts/multilingual-v2": ModelProfile(build_speech_input, extract_speech_audio),
}

DEFAULT_PROFILE = ModelProfile()


def profile_for(routing_id: str) -> ModelProfile:
    return MODEL_PROFILES.get(routing_id, DEFAULT_PROFILE)


def build_completion_input(descriptor: ModelDescriptor, prompt: str, params: dict[str, Any]) -> dict[str, Any]:
    """Chat-style router input; the catalog's model alias is not overridable."""
    return {
        "temperature": 1,
        **_given(params),
        "prompt": prompt,
        "model": descriptor.upstream_model or descriptor.routing_id,
    }
