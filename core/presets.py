# -*- coding: utf-8 -*-
"""
Style preset registry for AniScript Studio.
Each AnimationStyle gets a short look profile (rendering, lighting, palette,
camera) that is injected into the scene directive so Gemini writes visual
prompts an image model can render consistently.
"""
from core.data_models import AnimationStyle

PRESETS = {
    AnimationStyle.DISNEY_PIXAR: {
        "tagline": "Family-friendly 3D feature animation.",
        "rendering": "soft subsurface skin, rounded appealing shapes, expressive oversized eyes",
        "lighting": "warm key light, gentle rim light, global illumination",
        "palette": "saturated but soft, candy highlights",
        "camera": "eye-level medium shots, playful low angles for comedy beats",
        "taboos": ["gore", "photoreal faces"],
    },
    AnimationStyle.ANIME_SHINKAI: {
        "tagline": "Painterly anime with luminous skies.",
        "rendering": "clean cel-shaded characters over hyper-detailed painted backgrounds",
        "lighting": "golden hour, lens flare, volumetric light through clouds",
        "palette": "deep blues, sunset oranges, glowing pastels",
        "camera": "wide establishing skies, slow pans, shallow depth of field close-ups",
        "taboos": ["chibi proportions", "3D plastic shading"],
    },
    AnimationStyle.CINEMATIC_REALISTIC: {
        "tagline": "Live-action film look.",
        "rendering": "photographic textures, realistic proportions, film grain",
        "lighting": "motivated practical lights, high dynamic range",
        "palette": "teal and orange grade, natural skin tones",
        "camera": "anamorphic 35mm, rack focus, dolly moves",
        "taboos": ["cartoon outlines"],
    },
    AnimationStyle.HAND_DRAWN_SKETCHY: {
        "tagline": "Pencil-and-ink storyboard feel.",
        "rendering": "loose graphite lines, visible construction strokes, watercolor wash",
        "lighting": "flat with hatched shadows",
        "palette": "muted paper tones with one accent color",
        "camera": "simple framing, clear silhouettes",
        "taboos": ["glossy 3D shading"],
    },
    AnimationStyle.CLAYMATION: {
        "tagline": "Handmade stop-motion miniatures.",
        "rendering": "plasticine surfaces with fingerprints, felt and cardboard sets",
        "lighting": "small practical lamps, soft miniature shadows",
        "palette": "earthy and warm, slightly desaturated",
        "camera": "tabletop macro lens, slight tilt-shift",
        "taboos": ["motion blur", "perfectly smooth surfaces"],
    },
    AnimationStyle.CYBERPUNK: {
        "tagline": "Neon-drenched sci-fi 3D.",
        "rendering": "hard-surface 3D, chrome, holograms, rain-slick streets",
        "lighting": "neon signage, magenta and cyan rim lights, fog",
        "palette": "magenta, cyan, deep black",
        "camera": "low angles, dutch tilts, long lens compression",
        "taboos": ["daylight pastoral scenes"],
    },
}

def preset_block(style) -> str:
    p = PRESETS.get(AnimationStyle(style), {})
    if not p:
        return ""
    lines = [f"[STYLE PROFILE: {AnimationStyle(style).value}]"]
    for k in ["tagline", "rendering", "lighting", "palette", "camera", "taboos"]:
        v = p.get(k)
        if v is None:
            continue
        if isinstance(v, (list, tuple)):
            vv = ", ".join(v)
        else:
            vv = str(v)
        lines.append(f"- {k}: {vv}")
    return "\n".join(lines)
