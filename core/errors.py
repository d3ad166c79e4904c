# -*- coding: utf-8 -*-
"""
Exception taxonomy for AniScript Studio.
Every failure surfaced to the UI derives from AniScriptError so a view can
catch one type, show st.error and clear its pending flags.
"""


class AniScriptError(Exception):
    """Base class for all studio errors."""


# ---------- Gemini ----------

class MissingCredential(AniScriptError):
    """No API key configured; raised before any network attempt."""


class UpstreamError(AniScriptError):
    """The remote Gemini call failed (auth, network, quota...)."""


class MalformedResponse(AniScriptError):
    """Response is not valid JSON or omits required fields."""


class GenerationError(MalformedResponse):
    """Scene generation returned something that is not a scene list."""


class NoContent(AniScriptError):
    """Well-formed response without a usable payload."""


class NoImageError(NoContent):
    """Image request answered without any inline image part."""


# ---------- Import / storage ----------

class ParseError(AniScriptError):
    """Text could not be parsed as JSON."""


class SchemaError(AniScriptError):
    """JSON parsed but does not have the expected shape."""


class NotFound(AniScriptError):
    """No project with the given id."""


# ---------- Export ----------

class ExportError(AniScriptError):
    """The asset archive could not be assembled."""


class DecodeError(ExportError):
    """A scene's image payload is not a decodable base64 data URI."""

    def __init__(self, scene_number: int, reason: str):
        super().__init__(f"Scene {scene_number}: cannot decode generated image ({reason})")
        self.scene_number = scene_number
        self.reason = reason
