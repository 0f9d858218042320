"""Generation model catalog.

Each entry is a "spec sheet" telling the orchestrator what a model can do,
when to use it, and which parameters it accepts. The table is built once at
import time and never mutated; admin-side editing lives elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PARAM_TYPES = ("string", "number", "enum", "boolean", "image")
MODEL_TYPES = ("text-to-image", "image-to-image", "video", "upscale")


@dataclass(frozen=True)
class ParamSpec:
    name: str
    type: str
    description: str
    options: tuple[str, ...] | None = None
    default: Any = None
    range: tuple[float, float] | None = None  # (min, max)
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "required": self.required,
        }
        if self.options is not None:
            out["options"] = list(self.options)
        if self.default is not None:
            out["default"] = self.default
        if self.range is not None:
            out["range"] = {"min": self.range[0], "max": self.range[1]}
        return out


@dataclass(frozen=True)
class ModelSpec:
    id: str
    name: str
    replicate_id: str
    type: str
    description: str
    when_to_use: str
    capabilities: tuple[str, ...] = ()
    required_params: tuple[ParamSpec, ...] = ()
    optional_params: tuple[ParamSpec, ...] = ()
    tips: tuple[str, ...] = ()

    @property
    def is_video(self) -> bool:
        return self.type == "video"

    @property
    def params(self) -> tuple[ParamSpec, ...]:
        return self.required_params + self.optional_params

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "replicateId": self.replicate_id,
            "type": self.type,
            "description": self.description,
            "whenToUse": self.when_to_use,
            "capabilities": list(self.capabilities),
            "params": {
                "required": [p.to_dict() for p in self.required_params],
                "optional": [p.to_dict() for p in self.optional_params],
            },
            "tips": list(self.tips),
        }


def _prompt(description: str = "Text prompt for generation") -> ParamSpec:
    return ParamSpec("prompt", "string", description, required=True)


def _enum(name: str, description: str, options: tuple[str, ...], default: str) -> ParamSpec:
    return ParamSpec(name, "enum", description, options=options, default=default)


def _number(name: str, description: str, default: float, lo: float, hi: float) -> ParamSpec:
    return ParamSpec(name, "number", description, default=default, range=(lo, hi))


_OUTPUT_FORMAT = _enum("output_format", "Output image format", ("webp", "jpg", "png"), "webp")
_FLUX_RATIOS = ("1:1", "16:9", "9:16", "4:3", "3:4", "21:9", "9:21")


MODEL_SPECS: tuple[ModelSpec, ...] = (
    # ---- Top tier image models ----
    ModelSpec(
        id="seedream-4.5",
        name="Seedream 4.5",
        replicate_id="bytedance/seedream-4.5",
        type="text-to-image",
        capabilities=("textRendering", "multipleReferences", "sequentialGeneration"),
        required_params=(_prompt(),),
        optional_params=(
            _enum("size", "Image resolution", ("2K", "4K", "custom"), "2K"),
            _enum(
                "aspect_ratio",
                "Image aspect ratio",
                ("1:1", "4:3", "3:4", "16:9", "9:16", "3:2", "2:3", "21:9"),
                "1:1",
            ),
            ParamSpec("image_input", "image", "Input images for image-to-image (1-14 images)"),
            _enum(
                "sequential_image_generation",
                "Generate a consistent series of images",
                ("disabled", "auto"),
                "disabled",
            ),
            _number("max_images", "Maximum images in a sequential series", 1, 1, 15),
        ),
        description="ByteDance's latest model with exceptional quality and up to 4K resolution.",
        when_to_use=(
            "Use for high-resolution professional work, complex scenes, and consistent "
            "multi-image series."
        ),
        tips=(
            "Supports up to 4K resolution",
            "Can use multiple reference images",
            "Sequential generation keeps characters consistent across a set",
        ),
    ),
    ModelSpec(
        id="flux-2-pro",
        name="FLUX 2 Pro",
        replicate_id="black-forest-labs/flux-2-pro",
        type="text-to-image",
        capabilities=("textRendering", "multipleReferences"),
        required_params=(_prompt(),),
        optional_params=(
            _enum(
                "aspect_ratio",
                "Image aspect ratio",
                ("1:1", "16:9", "3:2", "2:3", "4:5", "5:4", "9:16", "3:4", "4:3", "custom"),
                "1:1",
            ),
            _enum("resolution", "Resolution in megapixels", ("0.5 MP", "1 MP", "2 MP", "4 MP"), "1 MP"),
            ParamSpec("input_images", "image", "Input images for image-to-image (max 8 images)"),
            _OUTPUT_FORMAT,
            _number("safety_tolerance", "Safety tolerance (1=strict, 5=permissive)", 2, 1, 5),
        ),
        description="The latest FLUX model with state-of-the-art quality and image-to-image support.",
        when_to_use="Use for professional work, commercial projects, and the best FLUX quality.",
        tips=(
            "Supports up to 4MP resolution",
            "Up to 8 reference images for image-to-image",
        ),
    ),
    ModelSpec(
        id="nano-banana",
        name="Nano Banana",
        replicate_id="google/nano-banana",
        type="text-to-image",
        capabilities=("textRendering", "multipleReferences", "editing"),
        required_params=(_prompt("Text description of the image to generate"),),
        optional_params=(
            ParamSpec("image_input", "image", "Input images to transform or use as reference"),
            _enum(
                "aspect_ratio",
                "Aspect ratio of the generated image",
                ("1:1", "2:3", "3:2", "3:4", "4:3", "4:5", "5:4", "9:16", "16:9", "21:9"),
                "1:1",
            ),
            _enum("output_format", "Format of the output image", ("jpg", "png"), "jpg"),
        ),
        description="Google's efficient model with excellent multi-image reference support.",
        when_to_use="Use when you have reference images or want to edit an existing image.",
        tips=("Great for style transfer", "Fast and efficient"),
    ),
    # ---- FLUX family ----
    ModelSpec(
        id="flux-schnell",
        name="FLUX Schnell",
        replicate_id="black-forest-labs/flux-schnell",
        type="text-to-image",
        capabilities=("textRendering",),
        required_params=(_prompt(),),
        optional_params=(
            _enum("aspect_ratio", "Image aspect ratio", _FLUX_RATIOS, "1:1"),
            _number("num_outputs", "Number of images to generate", 1, 1, 4),
            _OUTPUT_FORMAT,
        ),
        description="Fast, high-quality image generation. Best for quick iterations.",
        when_to_use="Use for fast previews and when speed matters more than maximum quality.",
        tips=("Great for rapid prototyping",),
    ),
    ModelSpec(
        id="flux-dev",
        name="FLUX Dev",
        replicate_id="black-forest-labs/flux-dev",
        type="text-to-image",
        capabilities=("textRendering",),
        required_params=(_prompt(),),
        optional_params=(
            _enum("aspect_ratio", "Image aspect ratio", _FLUX_RATIOS, "1:1"),
            _number("guidance", "How closely to follow the prompt", 3.5, 1, 10),
            _number("num_inference_steps", "Quality vs speed tradeoff", 28, 1, 50),
            _OUTPUT_FORMAT,
        ),
        description="Higher quality FLUX with more control. Best for final outputs.",
        when_to_use="Use for final renders, portfolio pieces, or detailed work.",
        tips=("Slower than Schnell but more detailed",),
    ),
    ModelSpec(
        id="recraft-v3",
        name="Recraft V3",
        replicate_id="recraft-ai/recraft-v3",
        type="text-to-image",
        capabilities=("textRendering",),
        required_params=(_prompt(),),
        optional_params=(
            _enum(
                "style",
                "Visual style of the output",
                ("any", "realistic_image", "digital_illustration", "vector_illustration", "icon"),
                "any",
            ),
            _enum(
                "size",
                "Output image size",
                ("1024x1024", "1365x1024", "1024x1365", "1536x1024", "1024x1536"),
                "1024x1024",
            ),
        ),
        description="Excellent for design work, illustrations, and icons.",
        when_to_use="Use for vector graphics, icons, digital illustrations, and design assets.",
        tips=("Best for clean, design-focused outputs",),
    ),
    ModelSpec(
        id="ideogram",
        name="Ideogram V2",
        replicate_id="ideogram-ai/ideogram-v2",
        type="text-to-image",
        capabilities=("textRendering",),
        required_params=(_prompt(),),
        optional_params=(
            _enum(
                "aspect_ratio",
                "Image aspect ratio",
                ("1:1", "16:9", "9:16", "4:3", "3:4", "3:2", "2:3"),
                "1:1",
            ),
            _enum(
                "style_type",
                "Visual style",
                ("Auto", "General", "Realistic", "Design", "Render 3D", "Anime"),
                "Auto",
            ),
        ),
        description="Industry-leading text rendering in images.",
        when_to_use="Use for text, logos, posters, signage, or typography in images.",
        tips=("Best-in-class text rendering",),
    ),
    # ---- Video ----
    ModelSpec(
        id="veo-3.1",
        name="Veo 3.1",
        replicate_id="google/veo-3.1",
        type="video",
        capabilities=("lastFrame", "audio"),
        required_params=(_prompt("Text description of the video"),),
        optional_params=(
            ParamSpec("image", "image", "Starting frame for image-to-video"),
            ParamSpec("last_frame", "image", "Ending frame to interpolate towards"),
            _enum("duration", "Clip length in seconds", ("4", "6", "8"), "8"),
            _enum("resolution", "Output resolution", ("720p", "1080p"), "1080p"),
            _enum("aspect_ratio", "Video aspect ratio", ("16:9", "9:16"), "16:9"),
            ParamSpec("generate_audio", "boolean", "Generate a synchronized soundtrack", default=True),
        ),
        description="Google's flagship video model with native audio.",
        when_to_use="Use for cinematic clips with sound, or to animate between two frames.",
        tips=("Provide a starting frame for the most control", "Audio doubles the per-second cost"),
    ),
    ModelSpec(
        id="wan-2.5-i2v",
        name="Wan 2.5 Image-to-Video",
        replicate_id="wan-video/wan-2.5-i2v",
        type="video",
        required_params=(
            _prompt("Description of the motion"),
            ParamSpec("image", "image", "Starting frame", required=True),
        ),
        optional_params=(
            _enum("duration", "Clip length in seconds", ("5", "10"), "5"),
            _enum("resolution", "Output resolution", ("480p", "720p", "1080p"), "720p"),
        ),
        description="Affordable image-to-video with resolution-based pricing.",
        when_to_use="Use to animate a still image on a budget.",
        tips=("Higher resolutions cost more per second",),
    ),
    ModelSpec(
        id="kling-v2.5-turbo-pro",
        name="Kling 2.5 Turbo Pro",
        replicate_id="kwaivgi/kling-v2.5-turbo-pro",
        type="video",
        capabilities=("lastFrame",),
        required_params=(_prompt("Description of the video"),),
        optional_params=(
            ParamSpec("start_image", "image", "Starting frame"),
            ParamSpec("end_image", "image", "Ending frame"),
            _enum("duration", "Clip length in seconds", ("5", "10"), "5"),
            _enum("aspect_ratio", "Video aspect ratio", ("16:9", "9:16", "1:1"), "16:9"),
        ),
        description="Smooth, physically plausible motion with strong prompt adherence.",
        when_to_use="Use for dynamic camera moves and action shots.",
        tips=("Great for camera movement prompts",),
    ),
)

_BY_ID: dict[str, ModelSpec] = {spec.id: spec for spec in MODEL_SPECS}


def get_model_spec(model_id: str) -> ModelSpec | None:
    return _BY_ID.get(model_id)


def list_models(model_type: str | None = None) -> list[dict[str, str]]:
    """Short id/name/type listing for pickers, optionally limited to one type."""
    return [
        {"id": m.id, "name": m.name, "type": m.type}
        for m in MODEL_SPECS
        if model_type is None or m.type == model_type
    ]


def _format_param(param: ParamSpec) -> str:
    line = f"  - {param.name} ({param.type}): {param.description}"
    if param.options:
        line += f" (options: {', '.join(param.options)})"
    if param.range is not None:
        line += f" (range: {_num(param.range[0])}-{_num(param.range[1])})"
    if param.default is not None:
        line += f" [default: {_num(param.default)}]"
    if param.required:
        line += " [required]"
    return line


def _num(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_model_spec(spec: ModelSpec) -> str:
    lines = [
        f"### {spec.name} (`{spec.id}`)",
        f"**Type**: {spec.type}",
        f"**When to use**: {spec.when_to_use}",
        f"**Description**: {spec.description}",
        f"**Capabilities**: {', '.join(spec.capabilities) or 'Standard'}",
        "**Parameters**:",
        *(_format_param(p) for p in spec.params),
    ]
    if spec.tips:
        lines.append(f"**Tips**: {'; '.join(spec.tips)}")
    return "\n".join(lines) + "\n"


def model_specs_for_prompt(specs: tuple[ModelSpec, ...] = MODEL_SPECS) -> str:
    """Render the catalog as markdown for the system prompt."""
    return "\n".join(format_model_spec(spec) for spec in specs)
