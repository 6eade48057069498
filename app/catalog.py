"""Static model catalog: which upstream endpoint serves each tool, and at what price."""

from dataclasses import dataclass

from app.errors import NotFoundError

COMPLETION_ROUTER = "completion-router"
MEDIA_JOB = "media-job"

TEXT_GENERATION = "Text Generation"
IMAGE_CREATION = "Image Creation"
VIDEO_CREATION = "Video Creation"
VOICE_SYNTHESIS = "Voice Synthesis"


@dataclass(frozen=True)
class ModelDescriptor:
    category: str
    name: str
    routing_id: str
    price_per_unit: float
    provider_kind: str = MEDIA_JOB
    upstream_model: str | None = None
    logo: str = ""
    pros: tuple[str, ...] = ()
    cons: tuple[str, ...] = ()

    @property
    def description(self) -> str:
        return self.pros[0] if self.pros else "AI model for content generation"


def _text(name, upstream_model, logo, pros, cons, price) -> ModelDescriptor:
    return ModelDescriptor(
        category=TEXT_GENERATION,
        name=name,
        routing_id="openrouter/router",
        upstream_model=upstream_model,
        price_per_unit=price,
        provider_kind=COMPLETION_ROUTER,
        logo=logo,
        pros=tuple(pros),
        cons=tuple(cons),
    )


def _media(category, name, routing_id, logo, pros, cons, price) -> ModelDescriptor:
    return ModelDescriptor(
        category=category,
        name=name,
        routing_id=routing_id,
        price_per_unit=price,
        provider_kind=MEDIA_JOB,
        logo=logo,
        pros=tuple(pros),
        cons=tuple(cons),
    )


MODEL_CATALOG: dict[str, tuple[ModelDescriptor, ...]] = {
    TEXT_GENERATION: (
        _text("Claude", "anthropic/claude-sonnet-4.5", "🤖",
              ["Best for reasoning and analysis", "High quality responses"],
              ["Slower response time", "Higher cost"], 0.00015),
        _text("ChatGPT", "openai/gpt-4.1", "💬",
              ["Great for conversations and creativity", "Fast responses"],
              ["May lack depth in complex topics"], 0.00010),
        # DeepSeek is served by Gemini Flash until the router exposes it
        _text("DeepSeek", "google/gemini-2.5-flash", "🔍",
              ["Efficient for coding tasks", "Fast and cost-effective"],
              ["Less creative than others"], 0.00008),
    ),
    IMAGE_CREATION: (
        _media(IMAGE_CREATION, "Midjourney", "fal-ai/stable-diffusion-v35-medium", "🎨",
               ["Artistic and creative images", "High quality output"],
               ["Slower generation time"], 0.00025),
        _media(IMAGE_CREATION, "Flux Pro Ultra", "fal-ai/flux-pro/v1.1-ultra", "✨",
               ["Ultra high quality images", "Excellent detail and realism"],
               ["Slower generation", "Higher resource usage"], 0.00025),
        _media(IMAGE_CREATION, "Flux 2", "fal-ai/flux-2", "🌊",
               ["Fast generation", "Good quality", "Balanced performance"],
               ["Standard quality compared to Pro"], 0.00020),
        _media(IMAGE_CREATION, "Flux 2 Pro", "fal-ai/flux-2-pro", "🌟",
               ["Professional quality", "High detail", "Excellent realism"],
               ["Slower than standard Flux 2"], 0.00022),
        _media(IMAGE_CREATION, "Imagen 4", "fal-ai/imagen4/preview/fast", "🖼️",
               ["Fast generation", "Google quality", "Good for narratives"],
               ["Preview version"], 0.00020),
        _media(IMAGE_CREATION, "GPT Image 1.5", "fal-ai/gpt-image-1.5", "🤖",
               ["Realistic photos", "High quality", "Good coordinates support"],
               ["Limited customization"], 0.00021),
        _media(IMAGE_CREATION, "Seedream 4.5", "fal-ai/bytedance/seedream/v4.5/text-to-image", "🌱",
               ["Good text rendering", "Creative outputs", "Auto sizing"],
               ["Limited control options"], 0.00019),
        _media(IMAGE_CREATION, "Ovis Image", "fal-ai/ovis-image", "🐑",
               ["Creative and artistic", "Good for abstract concepts"],
               ["May be slower"], 0.00020),
        _media(IMAGE_CREATION, "ImagineArt 1.5", "imagineart/imagineart-1.5-preview/text-to-image", "🎭",
               ["Artistic style", "Good for portraits", "Fast generation"],
               ["Preview version", "Limited aspect ratios"], 0.00018),
        _media(IMAGE_CREATION, "Gemini 3 Pro Image", "fal-ai/gemini-3-pro-image-preview", "💎",
               ["Google quality", "High resolution", "Good detail"],
               ["Preview version"], 0.00022),
        _media(IMAGE_CREATION, "Emu 3.5 Image", "fal-ai/emu-3.5-image/text-to-image", "🦘",
               ["High quality", "Good detail", "Meta technology"],
               ["May be slower"], 0.00021),
        _media(IMAGE_CREATION, "Piflow", "fal-ai/piflow", "π",
               ["Very fast generation", "Good quality", "Efficient"],
               ["Fewer inference steps"], 0.00017),
        _media(IMAGE_CREATION, "Flux Krea", "fal-ai/flux/krea", "🎨",
               ["Artistic style", "Good for street photography", "Natural look"],
               ["Slower with no acceleration"], 0.00020),
        _media(IMAGE_CREATION, "Ideogram", "fal-ai/ideogram/v3", "🖼️",
               ["Text and logo generation", "Good text rendering"],
               ["Limited to specific use cases"], 0.00020),
        _media(IMAGE_CREATION, "Nano Banana Pro", "fal-ai/nano-banana-pro", "🍌",
               ["Fast and reliable generation", "Good quality"],
               ["Fewer customization options"], 0.00018),
    ),
    VIDEO_CREATION: (
        _media(VIDEO_CREATION, "Pika", "fal-ai/pika/v2.2/text-to-video", "🎥",
               ["Quick video clips", "Good quality"],
               ["Limited duration"], 0.00180),
        _media(VIDEO_CREATION, "Sora", "fal-ai/sora-2/text-to-video", "🌟",
               ["High-quality cinematic videos", "Best quality"],
               ["Higher cost", "Longer generation time"], 0.00320),
    ),
    VOICE_SYNTHESIS: (
        _media(VOICE_SYNTHESIS, "ElevenLabs", "fal-ai/elevenlabs/tts/multilingual-v2", "🎙️",
               ["Natural voice cloning", "High quality audio", "Multilingual support"],
               ["Limited voice options"], 0.00030),
    ),
}


def list_categories() -> list[str]:
    return list(MODEL_CATALOG)


def list_models(category: str) -> list[ModelDescriptor]:
    return list(MODEL_CATALOG.get(category, ()))


def resolve(category: str, name: str) -> ModelDescriptor:
    """Return the unique descriptor for (category, name) or raise NotFoundError."""
    for descriptor in MODEL_CATALOG.get(category, ()):
        if descriptor.name == name:
            return descriptor
    raise NotFoundError(f'Model "{name}" not found in category "{category}"')
