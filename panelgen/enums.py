"""Closed tag sets shared across the catalogs, strategies and engine."""

from enum import Enum


class ModelFamily(str, Enum):
    SD15 = "sd15"
    SDXL = "sdxl"
    ILLUSTRIOUS = "illustrious"
    PONY = "pony"
    FLUX = "flux"
    REALISTIC = "realistic"


class DimensionKey(str, Enum):
    """Dimension table a size preset is keyed by.

    ``SDXL`` is the grid-aligned key: its dimensions are multiples of 64.
    """

    SDXL = "sdxl"
    SD15 = "sd15"
    FLUX = "flux"


class SizeCategory(str, Enum):
    SQUARE = "square"
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    COMIC = "comic"
    SOCIAL = "social"
    MANGA = "manga"


class TargetQuality(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AdapterCategory(str, Enum):
    STYLE = "style"
    CHARACTER = "character"
    QUALITY = "quality"
    POSE = "pose"
    CONCEPT = "concept"


class StackPosition(str, Enum):
    FIRST = "first"
    MIDDLE = "middle"
    LAST = "last"


class CheckpointType(str, Enum):
    BASE = "base"
    INPAINT = "inpaint"
    REFINER = "refiner"


class ConditionType(str, Enum):
    CANNY = "canny"
    DEPTH = "depth"
    OPENPOSE = "openpose"
    LINEART = "lineart"
    SCRIBBLE = "scribble"
    SOFTEDGE = "softedge"
    NORMALBAE = "normalbae"
    MLSD = "mlsd"
    SHUFFLE = "shuffle"
    TILE = "tile"
    BLUR = "blur"
    INPAINT = "inpaint"
    IP2P = "ip2p"
    SEMANTIC_SEG = "semantic_seg"
    QRCODE = "qrcode"
    REFERENCE = "reference"


class ConfigSource(str, Enum):
    """Layer a resolved field was taken from, lowest precedence first."""

    MODEL_DEFAULT = "model-default"
    SIZE_PRESET = "size-preset"
    QUALITY_PRESET = "quality-preset"
    SLOT = "slot"
    OVERRIDE = "override"
